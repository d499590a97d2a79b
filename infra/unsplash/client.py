#!/usr/bin/env python3
import logging
import requests
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from infra.errors import SourceCollectionError
from infra.pipeline.storage.artifact import partial_path_for

UNSPLASH_API_URL = "https://api.unsplash.com"


@dataclass
class ListingPage:
    items: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass
class CollectionInfo:
    id: str
    title: str
    total_photos: int


def _error_messages(data: Any) -> List[str]:
    if not isinstance(data, dict) or 'errors' not in data:
        return []
    errors = data['errors']
    if isinstance(errors, list):
        return [e.get('message', str(e)) if isinstance(e, dict) else str(e) for e in errors]
    return [str(errors)]


class UnsplashClient:
    def __init__(
        self,
        api_key: str,
        logger: Optional[logging.Logger] = None,
        base_url: str = UNSPLASH_API_URL,
        session: Optional[requests.Session] = None,
        timeout: int = 30
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get(self, path: str, **params) -> Any:
        response = self.session.get(
            f"{self.base_url}{path}",
            params={**params, "client_id": self.api_key},
            headers={"Accept": "application/json"},
            timeout=self.timeout
        )
        self.logger.debug(f"Unsplash GET {path}: status_code={response.status_code}")

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.ok and not _error_messages(data):
            data = {'errors': [f"HTTP {response.status_code}"]}

        return data

    def collection_info(self, collection_id: str) -> CollectionInfo:
        try:
            data = self._get(f"/collections/{collection_id}")
        except requests.RequestException as e:
            raise SourceCollectionError(f"Could not reach Unsplash for collection {collection_id}: {e}") from e

        errors = _error_messages(data)
        if errors:
            raise SourceCollectionError(
                f"Collection not found or access denied: {'; '.join(errors)}"
            )
        if not isinstance(data, dict):
            raise SourceCollectionError("Invalid JSON response from collection info API")

        return CollectionInfo(
            id=str(collection_id),
            title=data.get('title') or "Unknown",
            total_photos=int(data.get('total_photos') or 0)
        )

    def fetch(self, collection_id: str, page: int, per_page: int = 30) -> ListingPage:
        """One page of a collection's photos. Errors are returned, not raised."""
        try:
            data = self._get(
                f"/collections/{collection_id}/photos",
                page=page,
                per_page=per_page
            )
        except requests.RequestException as e:
            return ListingPage(errors=[f"Request failed: {e}"])

        errors = _error_messages(data)
        if errors:
            return ListingPage(errors=errors)
        if not isinstance(data, list):
            return ListingPage(errors=[f"Failed to fetch page {page}"])

        return ListingPage(items=data)

    def download(self, url: str, dest: Path) -> bool:
        dest = Path(dest)
        temp_path = partial_path_for(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)

        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                with open(temp_path, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=65536):
                        if chunk:
                            f.write(chunk)
            temp_path.replace(dest)
        except (requests.RequestException, OSError) as e:
            self.logger.warning(f"Failed to download {dest.name}: {e}")
            if temp_path.exists():
                temp_path.unlink()
            return False

        return True
