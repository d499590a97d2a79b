#!/usr/bin/env python3
import logging
import requests
from typing import Dict, Any, Optional

from .errors import MalformedResponseError

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiTransport:
    def __init__(
        self,
        api_key: str,
        model: str,
        logger: Optional[logging.Logger] = None,
        base_url: str = GEMINI_API_URL,
        session: Optional[requests.Session] = None
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def post(self, payload: Dict[str, Any], timeout: int = 120) -> Optional[Dict[str, Any]]:
        """POST a generateContent payload.

        Returns the decoded JSON body, or None when the body is empty.
        Error statuses are not raised: Gemini reports them in an `error` object
        that the response parser classifies.
        """
        self.logger.debug(f"Gemini API request: model={self.model}, timeout={timeout}")

        response = self.session.post(
            self.endpoint,
            params={"key": self.api_key},
            headers={"Content-Type": "application/json"},
            json=payload,
            timeout=timeout
        )

        self.logger.debug(
            f"Gemini API response: model={self.model}, status_code={response.status_code}"
        )

        if not response.content or not response.content.strip():
            return None

        try:
            data = response.json()
        except ValueError:
            preview = response.text[:500]
            raise MalformedResponseError(
                f"Non-JSON response from Gemini (HTTP {response.status_code}): {preview}"
            )

        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Unexpected response type from Gemini: {type(data).__name__}"
            )

        if not response.ok and 'error' not in data:
            data['error'] = {
                'code': response.status_code,
                'message': f"HTTP {response.status_code}",
            }

        return data
