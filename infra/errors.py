class PipelineError(Exception):
    """Base class for errors that abort a pipeline run."""


class ConfigurationError(PipelineError):
    pass


class SourceCollectionError(PipelineError):
    pass


class ListingFetchError(PipelineError):
    pass


class ListingFormatError(PipelineError):
    pass


class ArtifactResolutionError(PipelineError):
    pass


class SigningError(PipelineError):
    pass
