#!/usr/bin/env python3
import logging
import mimetypes
import requests
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .auth import GhostTokenSigner

ADMIN_API_PATH = "/ghost/api/admin"


class GhostClient:
    def __init__(
        self,
        url: str,
        signer: GhostTokenSigner,
        logger: Optional[logging.Logger] = None,
        session: Optional[requests.Session] = None,
        timeout: int = 60
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.base_url = url.rstrip('/') + ADMIN_API_PATH
        self.signer = signer
        self.session = session or requests.Session()
        self.timeout = timeout

    def create_endpoint(self, content_type: str) -> str:
        resource = "posts" if content_type == "post" else "pages"
        return f"{self.base_url}/{resource}/?source=html"

    def upload(self, path: Path) -> str:
        """Upload an image and return its hosted URL, or "" when the upload fails."""
        path = Path(path)
        if not path.exists():
            return ""

        mime_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"

        try:
            with open(path, 'rb') as f:
                response = self.session.post(
                    f"{self.base_url}/images/upload/",
                    headers=self.signer.authorization_header(),
                    files={"file": (path.name, f, mime_type)},
                    data={"purpose": "image"},
                    timeout=self.timeout
                )
        except (requests.RequestException, OSError) as e:
            self.logger.warning(f"Failed to upload image {path.name}: {e}")
            return ""

        try:
            data = response.json()
        except ValueError:
            data = {}

        images = data.get('images') if isinstance(data, dict) else None
        first = images[0] if isinstance(images, list) and images else None
        url = first.get('url') if isinstance(first, dict) else None
        if response.ok and isinstance(url, str) and url:
            self.logger.debug(f"Image uploaded: {url}")
            return url

        self.logger.warning(f"Failed to upload image {path.name} (HTTP {response.status_code})")
        return ""

    def create(self, payload: Dict[str, Any], content_type: str = "post") -> Tuple[int, Any]:
        """POST a post/page. Returns (status, decoded body or raw text).

        Transport failures propagate as requests.RequestException.
        """
        endpoint = self.create_endpoint(content_type)
        self.logger.debug(f"Posting to Ghost: {endpoint}")

        response = self.session.post(
            endpoint,
            headers={**self.signer.authorization_header(), "Content-Type": "application/json"},
            json=payload,
            timeout=self.timeout
        )

        try:
            body = response.json()
        except ValueError:
            body = response.text

        return response.status_code, body
