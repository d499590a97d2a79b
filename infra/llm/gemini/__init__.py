"""
Gemini generateContent client components.

Clean separation of concerns:
- transport.py: HTTP requests
- response_parser.py: Response parsing
- limits.py: Per-model request pacing and token ceilings
"""

from .transport import GeminiTransport
from .response_parser import ResponseParser
from .client import GeminiClient
from .limits import ModelLimits, get_model_limits, SUPPORTED_MODELS, DEFAULT_MODEL
from .errors import GeminiError, EmptyResponseError, ProviderResponseError, MalformedResponseError

__all__ = [
    'GeminiTransport',
    'ResponseParser',
    'GeminiClient',
    'ModelLimits',
    'get_model_limits',
    'SUPPORTED_MODELS',
    'DEFAULT_MODEL',
    'GeminiError',
    'EmptyResponseError',
    'ProviderResponseError',
    'MalformedResponseError',
]
