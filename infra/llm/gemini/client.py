#!/usr/bin/env python3
"""
Gemini client for image-grounded content generation.

Orchestrates transport and parsing layers:
- GeminiTransport: HTTP requests
- ResponseParser: Error payloads, candidate text extraction

No retries: a failed request is reported to the caller, which records it
as an item-local failure.
"""

import base64
import logging
from typing import Dict, Any, Optional

import requests

from infra.llm.models import GeminiResponse
from .transport import GeminiTransport
from .response_parser import ResponseParser

MAX_OUTPUT_TOKENS = 4000


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: str,
        logger: Optional[logging.Logger] = None,
        max_output_tokens: int = MAX_OUTPUT_TOKENS,
        timeout: int = 120,
        session: Optional[requests.Session] = None
    ):
        self.model = model
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout
        self.transport = GeminiTransport(api_key, model, logger=logger, session=session)
        self.parser = ResponseParser(logger=logger)

    def build_payload(
        self,
        prompt: str,
        media_bytes: Optional[bytes],
        mime_type: str,
        temperature: float
    ) -> Dict[str, Any]:
        parts = [{"text": prompt}]

        if media_bytes:
            parts.append({
                "inline_data": {
                    "mime_type": mime_type,
                    "data": base64.b64encode(media_bytes).decode('utf-8')
                }
            })

        return {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": self.max_output_tokens
            }
        }

    def generate(
        self,
        prompt: str,
        media_bytes: Optional[bytes],
        mime_type: str = "image/jpeg",
        temperature: float = 0.7
    ) -> GeminiResponse:
        """
        Generate content for a prompt with an optional inline attachment.

        Raises:
            EmptyResponseError: Empty body or no candidate text
            ProviderResponseError: Response carried an `error` object
            MalformedResponseError: Body was not a JSON object
            requests.exceptions.RequestException: Transport failure
        """
        payload = self.build_payload(prompt, media_bytes, mime_type, temperature)
        result = self.transport.post(payload, timeout=self.timeout)
        return self.parser.parse_generate_content(result, self.model)
