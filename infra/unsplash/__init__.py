from .client import UnsplashClient, ListingPage, CollectionInfo, UNSPLASH_API_URL

__all__ = [
    "UnsplashClient",
    "ListingPage",
    "CollectionInfo",
    "UNSPLASH_API_URL",
]
