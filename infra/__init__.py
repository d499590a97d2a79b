from infra.errors import (
    PipelineError,
    ConfigurationError,
    SourceCollectionError,
    ListingFetchError,
    ListingFormatError,
    ArtifactResolutionError,
    SigningError,
)

__all__ = [
    "PipelineError",
    "ConfigurationError",
    "SourceCollectionError",
    "ListingFetchError",
    "ListingFormatError",
    "ArtifactResolutionError",
    "SigningError",
]
