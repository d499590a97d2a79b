from .schemas import (
    PipelineConfig,
    UnsplashSettings,
    GeminiSettings,
    GhostSettings,
    PathSettings,
    resolve_env_vars,
)
from .runtime import (
    load_pipeline_config,
    load_yaml_config,
    env_overrides,
    cli_overrides,
)

__all__ = [
    "PipelineConfig",
    "UnsplashSettings",
    "GeminiSettings",
    "GhostSettings",
    "PathSettings",
    "resolve_env_vars",
    "load_pipeline_config",
    "load_yaml_config",
    "env_overrides",
    "cli_overrides",
]
