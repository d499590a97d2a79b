"""
Tests for infra/unsplash/client.py
"""

import pytest
import requests

from infra.errors import SourceCollectionError
from infra.pipeline.storage.artifact import partial_path_for
from infra.unsplash import UnsplashClient
from tests.fakes import FakeResponse, FakeSession, unsplash_photo


def make_client(*responses):
    session = FakeSession(list(responses))
    return UnsplashClient("access-key", session=session), session


class TestCollectionInfo:

    def test_info(self):
        client, session = make_client(FakeResponse(200, {"title": "City Nights", "total_photos": 42}))

        info = client.collection_info("123")

        assert info.title == "City Nights"
        assert info.total_photos == 42
        assert session.calls[0]['url'] == "https://api.unsplash.com/collections/123"
        assert session.calls[0]['params'] == {"client_id": "access-key"}

    def test_errors_raise(self):
        client, _ = make_client(FakeResponse(404, {"errors": ["Couldn't find Collection"]}))
        with pytest.raises(SourceCollectionError) as exc:
            client.collection_info("999")
        assert "Couldn't find Collection" in str(exc.value)

    def test_network_failure_raises(self):
        client, _ = make_client(requests.ConnectionError("down"))
        with pytest.raises(SourceCollectionError):
            client.collection_info("123")


class TestFetchPage:

    def test_items(self):
        photos = [unsplash_photo("a"), unsplash_photo("b")]
        client, session = make_client(FakeResponse(200, photos))

        page = client.fetch("123", page=2, per_page=30)

        assert [p["id"] for p in page.items] == ["a", "b"]
        assert page.errors == []
        assert session.calls[0]['params'] == {"page": 2, "per_page": 30, "client_id": "access-key"}

    def test_errors_returned_not_raised(self):
        client, _ = make_client(FakeResponse(403, {"errors": ["Rate Limit Exceeded"]}))

        page = client.fetch("123", page=1)

        assert page.items == []
        assert page.errors == ["Rate Limit Exceeded"]

    def test_http_error_without_body(self):
        client, _ = make_client(FakeResponse(500, text="oops"))
        assert client.fetch("123", page=1).errors == ["HTTP 500"]


class TestDownload:

    def test_streams_to_destination(self, tmp_path):
        client, _ = make_client(FakeResponse(200, content=b"\xff\xd8" + b"x" * 100000))
        dest = tmp_path / "a.jpg"

        assert client.download("https://images.example/a.jpg", dest) is True
        assert dest.read_bytes().startswith(b"\xff\xd8")
        assert not partial_path_for(dest).exists()

    def test_failure_leaves_nothing(self, tmp_path):
        client, _ = make_client(FakeResponse(404, text="nope"))
        dest = tmp_path / "a.jpg"

        assert client.download("https://images.example/a.jpg", dest) is False
        assert not dest.exists()
        assert not partial_path_for(dest).exists()
