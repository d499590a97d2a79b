"""
Photo-to-blog pipeline stages.

1. fetch - Download photos and metadata from an Unsplash collection
2. generate - Write a blog post per photo with Gemini
3. publish - Upload photos and create posts/pages through the Ghost Admin API
"""
