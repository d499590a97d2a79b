from .auth import GhostAdminKey, GhostTokenSigner
from .client import GhostClient

__all__ = [
    "GhostAdminKey",
    "GhostTokenSigner",
    "GhostClient",
]
