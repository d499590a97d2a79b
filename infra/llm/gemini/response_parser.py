import logging
from typing import Dict, Any, Optional

from infra.llm.models import GeminiResponse
from .errors import EmptyResponseError, MalformedResponseError, ProviderResponseError


class ResponseParser:
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def parse_generate_content(self, result: Optional[Dict[str, Any]], model: str) -> GeminiResponse:
        if not result:
            raise EmptyResponseError("Empty response from Gemini API")
        if not isinstance(result, dict):
            raise MalformedResponseError(f"Unexpected Gemini response body: {type(result).__name__}")

        error = result.get('error')
        if error:
            if isinstance(error, dict):
                message = error.get('message') or error.get('status') or str(error)
                raise ProviderResponseError(
                    f"Gemini API error: {message}",
                    status_code=error.get('code'),
                    code=error.get('status')
                )
            raise ProviderResponseError(f"Gemini API error: {error}")

        candidates = result.get('candidates')
        candidate = {}
        if isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
            candidate = candidates[0]
        finish_reason = candidate.get('finishReason')

        text = None
        try:
            text = candidate['content']['parts'][0]['text']
        except (KeyError, IndexError, TypeError):
            pass

        if not text or not isinstance(text, str):
            feedback = result.get('promptFeedback')
            block_reason = feedback.get('blockReason') if isinstance(feedback, dict) else None
            self.logger.debug(
                f"No candidate text in Gemini response: model={model}, "
                f"finish_reason={finish_reason}, block_reason={block_reason}, "
                f"response_keys={list(result.keys())}"
            )
            raise EmptyResponseError(
                f"Could not extract content from Gemini response "
                f"(finish reason: {finish_reason or block_reason or 'unknown'})",
                finish_reason=finish_reason
            )

        usage = result.get('usageMetadata')
        if not isinstance(usage, dict):
            usage = {}

        self.logger.debug(
            f"Parsed generateContent: model={model}, finish_reason={finish_reason}, "
            f"content_length={len(text)}, total_tokens={usage.get('totalTokenCount')}"
        )

        return GeminiResponse(text=text, finish_reason=finish_reason, usage=usage)
