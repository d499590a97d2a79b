BLOG_POST_PROMPT = """Analyze this image and create a blog post that would use this image as its thumbnail.

Image context:
- Description: {description}
- Photographer: {photographer}

Please provide:
1. A compelling blog post title (50-80 characters)
2. HTML blog post content (4-12 paragraphs) that:
   - Never talk about the image explicitly
   - Talk about any theme that can be visualized with the image
   - Uses proper HTML paragraph tags
   - the content should be suitable for web publication
   - Flows naturally from paragraph to paragraph
   - if you need to organize the content into sections please use h2, h3 and so on

Format your response as JSON:
{{
  "title": "Blog post title here",
  "content": "<p>First paragraph...</p><p>Second paragraph...</p>..."
}}

Make the content relevant to the image theme and visually appealing for readers."""


def build_prompt(description: str, photographer: str) -> str:
    return BLOG_POST_PROMPT.format(
        description=description or "",
        photographer=photographer or ""
    )
