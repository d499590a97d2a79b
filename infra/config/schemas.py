"""
Configuration schemas for shutterpress.

One PipelineConfig per invocation, built from (lowest to highest priority)
defaults, environment variables, an optional YAML file and CLI flags.
"""

from pathlib import Path
from typing import Iterable, List, Optional
from pydantic import BaseModel, Field, field_validator
import os
import re

from infra.errors import ConfigurationError
from infra.llm.gemini.limits import DEFAULT_MODEL, ModelLimits, get_model_limits
from infra.pipeline.registry import STAGE_NAMES


GHOST_KEY_PATTERN = re.compile(r'^[^:\s]+:[0-9a-fA-F]+$')


class UnsplashSettings(BaseModel):
    """Listing source: an Unsplash collection."""
    api_key: Optional[str] = Field(None, description="Unsplash access key")
    collection_id: Optional[str] = Field(None, description="Collection to fetch")
    count: int = Field(10, description="Number of photos to fetch")
    api_url: str = Field("https://api.unsplash.com", description="API base URL")

    @field_validator('count')
    @classmethod
    def count_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("count must be a positive integer")
        return v

    @field_validator('collection_id', mode='before')
    @classmethod
    def collection_id_as_str(cls, v):
        return str(v) if v is not None else v


class GeminiSettings(BaseModel):
    """Generation model and pacing."""
    api_key: Optional[str] = Field(None, description="Gemini API key")
    model: str = Field(DEFAULT_MODEL, description="Gemini model name")
    temperature: float = Field(0.7, description="Sampling temperature (0.0-1.0)")
    delay: Optional[float] = Field(None, description="Seconds between requests (default: per model)")
    max_output_tokens: int = Field(4000, gt=0)

    @field_validator('temperature')
    @classmethod
    def temperature_in_range(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("temperature must be between 0.0 and 1.0")
        return v

    @field_validator('model')
    @classmethod
    def model_is_gemini(cls, v: str) -> str:
        if not re.match(r'^gemini-[\w.\-]+$', v):
            raise ValueError(f"unsupported model '{v}' (expected a gemini-* model)")
        return v

    @field_validator('delay')
    @classmethod
    def delay_not_negative(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("delay must not be negative")
        return v

    @property
    def limits(self) -> ModelLimits:
        return get_model_limits(self.model)

    @property
    def effective_delay(self) -> float:
        return self.delay if self.delay is not None else self.limits.delay_seconds


class GhostSettings(BaseModel):
    """Publishing target: a Ghost site's Admin API."""
    admin_api_key: Optional[str] = Field(None, description="Admin API key in id:secret form")
    url: Optional[str] = Field(None, description="Ghost site URL")
    content_type: str = Field("post", description="post or page")
    status: str = Field("draft", description="draft or published")
    author_id: Optional[str] = Field(None, description="Author id for created content")
    dry_run: bool = Field(False, description="Build payloads without uploading or creating")
    delay: float = Field(1.0, ge=0.0, description="Seconds between items")

    @field_validator('admin_api_key')
    @classmethod
    def admin_key_format(cls, v: Optional[str]) -> Optional[str]:
        if v and not GHOST_KEY_PATTERN.match(v):
            raise ValueError("Ghost Admin API key must be in format 'id:secret' with a hex secret")
        return v

    @field_validator('url')
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        return v.rstrip('/') if v else v

    @field_validator('content_type')
    @classmethod
    def content_type_known(cls, v: str) -> str:
        if v not in ('post', 'page'):
            raise ValueError("content type must be 'post' or 'page'")
        return v

    @field_validator('status')
    @classmethod
    def status_known(cls, v: str) -> str:
        if v not in ('draft', 'published'):
            raise ValueError("status must be 'draft' or 'published'")
        return v


class PathSettings(BaseModel):
    """Explicit artifact locations. Anything unset is resolved by convention."""
    work_dir: Optional[Path] = None
    listing: Optional[Path] = None
    enriched: Optional[Path] = None
    report: Optional[Path] = None
    log_dir: Optional[Path] = None


class PipelineConfig(BaseModel):
    unsplash: UnsplashSettings = Field(default_factory=UnsplashSettings)
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    ghost: GhostSettings = Field(default_factory=GhostSettings)
    paths: PathSettings = Field(default_factory=PathSettings)
    skip: List[str] = Field(default_factory=list, description="Stages to skip")
    verbose: bool = False

    @field_validator('skip')
    @classmethod
    def skip_known_stages(cls, v: List[str]) -> List[str]:
        unknown = [name for name in v if name not in STAGE_NAMES]
        if unknown:
            raise ValueError(f"unknown stage(s): {', '.join(unknown)}")
        return list(dict.fromkeys(v))

    def active_stages(self) -> List[str]:
        return [name for name in STAGE_NAMES if name not in self.skip]

    def require_credentials(self, stages: Optional[Iterable[str]] = None) -> None:
        """Fail before any work starts if a stage that will run lacks its credentials."""
        stages = list(stages) if stages is not None else self.active_stages()
        missing = []

        if 'fetch' in stages:
            if not self.unsplash.api_key:
                missing.append("Unsplash API key (--unsplash-api-key or UNSPLASH_API_KEY)")
            if not self.unsplash.collection_id:
                missing.append("collection id (--collection-id)")

        if 'generate' in stages and not self.gemini.api_key:
            missing.append("Gemini API key (--gemini-api-key or GEMINI_API_KEY)")

        if 'publish' in stages:
            if not self.ghost.admin_api_key:
                missing.append("Ghost Admin API key (--ghost-api-key or GHOST_ADMIN_API_KEY)")
            if not self.ghost.url:
                missing.append("Ghost URL (--ghost-url or GHOST_URL)")

        if missing:
            raise ConfigurationError("Missing required settings: " + "; ".join(missing))


def resolve_env_vars(value):
    """
    Resolve ${ENV_VAR} references in a string.

    Examples:
        "${GEMINI_API_KEY}" -> actual value from environment
        "literal-value" -> "literal-value"
        "${MISSING_VAR}" -> "" (empty string if not set)
    """
    if not isinstance(value, str):
        return value

    pattern = r'\$\{([^}]+)\}'

    def replace(match):
        return os.environ.get(match.group(1), "")

    return re.sub(pattern, replace, value)
