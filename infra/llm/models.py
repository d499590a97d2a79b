#!/usr/bin/env python3
"""
Result types for content generation.

GenerationResult is a closed sum type with two variants:
    GenerationSuccess(title, body)
    GenerationFailure(kind, message)

Construct through GenerationResult.success() / GenerationResult.failure().
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any


class FailureKind(str, Enum):
    """Item-local failure classes for content generation."""
    NOT_FOUND = "NotFound"              # Source media missing
    EMPTY_RESPONSE = "EmptyResponse"    # No response / no candidate text
    PROVIDER_ERROR = "ProviderError"    # Provider returned a structured error
    PARSE_ERROR = "ParseError"          # Response is not the expected JSON shape
    TRUNCATED = "Truncated"             # Hit the output token ceiling and could not be parsed


class GenerationResult:
    ok: bool = False

    @staticmethod
    def success(title: str, body: str) -> "GenerationSuccess":
        return GenerationSuccess(title=title, body=body)

    @staticmethod
    def failure(kind: FailureKind, message: str) -> "GenerationFailure":
        return GenerationFailure(kind=kind, message=message)


@dataclass(frozen=True)
class GenerationSuccess(GenerationResult):
    title: str
    body: str
    ok = True

    def __post_init__(self):
        if not self.title or not self.body:
            raise ValueError("GenerationSuccess requires a non-empty title and body")


@dataclass(frozen=True)
class GenerationFailure(GenerationResult):
    kind: FailureKind
    message: str
    ok = False

    @property
    def marker(self) -> str:
        return f"Error: {self.message}"


@dataclass
class GeminiResponse:
    """Parsed generateContent response."""
    text: str
    finish_reason: Optional[str] = None
    usage: Optional[Dict[str, Any]] = None

    @property
    def truncated(self) -> bool:
        return self.finish_reason == "MAX_TOKENS"

    @property
    def total_tokens(self) -> int:
        if not isinstance(self.usage, dict):
            return 0
        try:
            return int(self.usage.get('totalTokenCount') or 0)
        except (TypeError, ValueError):
            return 0
