"""
In-memory stand-ins for the clock and the three HTTP services.

Nothing here sleeps or touches the network.
"""

import json
import requests
from typing import Any, Dict, List, Optional

from infra.llm.models import GeminiResponse
from infra.unsplash import CollectionInfo, ListingPage


class FakeClock:
    """time()/sleep() pair where sleeping just advances the clock."""

    def __init__(self, start: float = 1_000.0):
        self.now = start
        self.sleeps: List[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    """Subset of requests.Response used by the adapters."""

    def __init__(self, status_code: int = 200, json_data: Any = None, text: Optional[str] = None,
                 content: Optional[bytes] = None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        self.text = text
        self.content = content if content is not None else text.encode()

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"HTTP {self.status_code}", response=self)

    def iter_content(self, chunk_size: int = 1024):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeSession:
    """Returns queued responses (or raises queued exceptions) and records calls."""

    def __init__(self, responses: Optional[List[Any]] = None):
        self.responses = list(responses or [])
        self.calls: List[Dict[str, Any]] = []

    def _next(self, method: str, url: str, **kwargs):
        self.calls.append({'method': method, 'url': url, **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        return self._next('GET', url, **kwargs)

    def post(self, url, **kwargs):
        files = kwargs.get('files')
        if files:
            # Read uploads now; the file handle is closed after the call
            kwargs['files'] = {k: (v[0], v[1].read(), v[2]) for k, v in files.items()}
        return self._next('POST', url, **kwargs)


def gemini_body(text: str, finish_reason: str = "STOP", total_tokens: int = 900) -> Dict[str, Any]:
    return {
        "candidates": [{
            "content": {"parts": [{"text": text}], "role": "model"},
            "finishReason": finish_reason,
        }],
        "usageMetadata": {"totalTokenCount": total_tokens},
    }


def post_json(title: str = "Golden Hour Over the Harbor", content: str = "<p>Light falls.</p>") -> str:
    return json.dumps({"title": title, "content": content})


class FakeGeminiClient:
    """Queued outcomes: a str (response text), a GeminiResponse, or an exception."""

    def __init__(self, outcomes: Optional[List[Any]] = None):
        self.outcomes = list(outcomes or [])
        self.calls: List[Dict[str, Any]] = []

    def generate(self, prompt, media_bytes, mime_type="image/jpeg", temperature=0.7):
        self.calls.append({
            'prompt': prompt,
            'media_bytes': media_bytes,
            'mime_type': mime_type,
            'temperature': temperature,
        })
        outcome = self.outcomes.pop(0) if self.outcomes else post_json()
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, GeminiResponse):
            return outcome
        return GeminiResponse(text=outcome, finish_reason="STOP", usage={"totalTokenCount": 900})


def unsplash_photo(photo_id: str, description: Optional[str] = "A quiet street at dawn") -> Dict[str, Any]:
    return {
        "id": photo_id,
        "description": description,
        "alt_description": "street with lamps",
        "user": {"name": "Ana Lens", "username": "analens"},
        "width": 4000,
        "height": 3000,
        "likes": 12,
        "downloads": None,
        "created_at": "2023-01-02T03:04:05Z",
        "updated_at": "2023-02-02T03:04:05Z",
        "color": "#a0b0c0",
        "blur_hash": "LKO2?U%2Tw=w]~RBVZRi};RPxuwH",
        "urls": {"full": f"https://images.example/{photo_id}.jpg"},
        "links": {"html": f"https://unsplash.com/photos/{photo_id}"},
    }


class FakeUnsplashClient:
    def __init__(self, title: str = "City Nights", total_photos: int = 3,
                 pages: Optional[List[ListingPage]] = None, failing_downloads=()):
        self.info = CollectionInfo(id="123", title=title, total_photos=total_photos)
        self.pages = list(pages or [])
        self.failing_downloads = set(failing_downloads)
        self.fetch_calls: List[Dict[str, Any]] = []
        self.downloads: List[str] = []

    def collection_info(self, collection_id):
        return CollectionInfo(id=str(collection_id), title=self.info.title,
                              total_photos=self.info.total_photos)

    def fetch(self, collection_id, page, per_page=30):
        self.fetch_calls.append({'page': page, 'per_page': per_page})
        if page - 1 < len(self.pages):
            return self.pages[page - 1]
        return ListingPage()

    def download(self, url, dest):
        self.downloads.append(url)
        if url in self.failing_downloads:
            return False
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(b"\xff\xd8jpeg")
        return True


class FakeGhostClient:
    """Records uploads and creates; create() answers with queued (status, body) or exceptions."""

    def __init__(self, create_outcomes: Optional[List[Any]] = None, upload_url: str = "https://blog.example/content/images/x.jpg"):
        self.create_outcomes = list(create_outcomes or [])
        self.upload_url = upload_url
        self.uploads: List[str] = []
        self.created: List[Dict[str, Any]] = []

    def create_endpoint(self, content_type: str) -> str:
        return f"https://blog.example/ghost/api/admin/{content_type}s/?source=html"

    def upload(self, path):
        self.uploads.append(str(path))
        return self.upload_url

    def create(self, payload, content_type="post"):
        self.created.append({'payload': payload, 'content_type': content_type})
        outcome = self.create_outcomes.pop(0) if self.create_outcomes else (
            201, {f"{content_type}s": [{"url": "https://blog.example/p/"}]}
        )
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
