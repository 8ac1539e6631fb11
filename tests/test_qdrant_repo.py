from __future__ import annotations

from typing import Any

import pytest

from vegmenu.core.config import settings
from vegmenu.core.errors import QdrantError
from vegmenu.rag import qdrant_repo


class DummyResponse:
    def __init__(
        self, status_code: int, json_data: dict[str, Any] | None = None, text: str = ""
    ) -> None:
        self.status_code = status_code
        self._json_data = json_data or {}
        self.text = text

    def json(self) -> dict[str, Any]:
        return self._json_data


def test_qdrant_wrapper_create_upsert_search(monkeypatch) -> None:
    calls: list[tuple[str, str, dict[str, Any] | None, dict[str, str]]] = []

    def fake_request(method: str, url: str, json: dict[str, Any] | None, headers, timeout: float):
        calls.append((method, url, json, headers))
        if method == "GET":
            return DummyResponse(404)
        if method == "PUT" and url.endswith("/collections/test_collection"):
            return DummyResponse(201)
        if method == "PUT" and "/points" in url:
            return DummyResponse(200)
        if method == "POST":
            return DummyResponse(
                200, {"result": [{"id": 1, "score": 0.91, "payload": {"text": "Tofu"}}]}
            )
        raise AssertionError(f"Unexpected call {method} {url}")

    monkeypatch.setattr(settings, "qdrant_url", "http://qdrant/")
    monkeypatch.setattr(settings, "qdrant_api_key", "secret")
    monkeypatch.setattr(qdrant_repo.requests, "request", fake_request)

    qdrant_repo.create_collection_if_not_exists(
        "test_collection", vector_size=3, distance="Cosine"
    )
    qdrant_repo.upsert_points(
        "test_collection",
        [
            {"id": 1, "vector": [0.1, 0.2, 0.3], "payload": {"text": "Tofu"}},
        ],
    )
    results = qdrant_repo.search(
        "test_collection",
        [0.1, 0.2, 0.3],
        limit=3,
        score_threshold=0.5,
    )

    assert results == [{"id": 1, "score": 0.91, "payload": {"text": "Tofu"}}]
    assert calls[0][0] == "GET"
    assert calls[0][1] == "http://qdrant/collections/test_collection"
    assert calls[1][0] == "PUT"
    assert calls[1][2] == {"vectors": {"size": 3, "distance": "Cosine"}}
    assert calls[2][0] == "PUT"
    assert calls[3][0] == "POST"
    assert calls[3][2] == {
        "vector": [0.1, 0.2, 0.3],
        "limit": 3,
        "with_payload": True,
        "score_threshold": 0.5,
    }
    assert all(call[3] == {"api-key": "secret"} for call in calls)


def test_collection_exists(monkeypatch) -> None:
    statuses = iter([200, 404])
    monkeypatch.setattr(
        qdrant_repo.requests,
        "request",
        lambda *args, **kwargs: DummyResponse(next(statuses)),
    )

    assert qdrant_repo.collection_exists("ingredients") is True
    assert qdrant_repo.collection_exists("ingredients") is False


def test_search_is_a_single_attempt(monkeypatch) -> None:
    calls: list[str] = []

    def fake_request(method: str, url: str, **kwargs):
        calls.append(method)
        return DummyResponse(503, text="unavailable")

    monkeypatch.setattr(qdrant_repo.requests, "request", fake_request)

    with pytest.raises(QdrantError) as excinfo:
        qdrant_repo.search("ingredients", [0.1], limit=3, score_threshold=None)

    assert excinfo.value.status_code == 503
    assert calls == ["POST"]


def test_search_rejects_client_errors(monkeypatch) -> None:
    monkeypatch.setattr(
        qdrant_repo.requests,
        "request",
        lambda *args, **kwargs: DummyResponse(400, text="bad vector"),
    )

    with pytest.raises(QdrantError, match="Search failed: 400"):
        qdrant_repo.search("ingredients", [0.1], limit=3, score_threshold=None)
