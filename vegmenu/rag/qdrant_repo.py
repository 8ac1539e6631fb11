from __future__ import annotations

from typing import Any

import requests

from vegmenu.core.config import settings
from vegmenu.core.errors import QdrantError
from vegmenu.core.retry import retryable


def _headers() -> dict[str, str]:
    if settings.qdrant_api_key:
        return {"api-key": settings.qdrant_api_key}
    return {}


def _request(
    method: str,
    path: str,
    *,
    json: dict[str, Any] | None = None,
    timeout: float | None = None,
) -> requests.Response:
    url = f"{settings.qdrant_url.rstrip('/')}{path}"
    response = requests.request(
        method,
        url,
        json=json,
        headers=_headers(),
        timeout=timeout or settings.qdrant_timeout,
    )
    if response.status_code >= 500:
        raise QdrantError(
            f"Qdrant error {response.status_code}: {response.text}",
            status_code=response.status_code,
        )
    return response


_request_with_retry = retryable("qdrant")(_request)


def collection_exists(collection: str) -> bool:
    response = _request("GET", f"/collections/{collection}")
    if response.status_code == 200:
        return True
    if response.status_code == 404:
        return False
    raise QdrantError(
        f"Unexpected status {response.status_code}: {response.text}",
        status_code=response.status_code,
    )


def create_collection_if_not_exists(
    collection: str,
    vector_size: int,
    distance: str = "Cosine",
) -> None:
    response = _request_with_retry("GET", f"/collections/{collection}")
    if response.status_code == 200:
        return
    if response.status_code != 404:
        raise QdrantError(
            f"Unexpected status {response.status_code}: {response.text}",
            status_code=response.status_code,
        )
    payload = {"vectors": {"size": vector_size, "distance": distance}}
    create_response = _request_with_retry(
        "PUT",
        f"/collections/{collection}",
        json=payload,
    )
    if create_response.status_code not in {200, 201}:
        raise QdrantError(
            f"Create collection failed: {create_response.status_code} {create_response.text}",
            status_code=create_response.status_code,
        )


def upsert_points(collection: str, points: list[dict[str, Any]]) -> None:
    payload = {"points": points}
    response = _request_with_retry(
        "PUT",
        f"/collections/{collection}/points?wait=true",
        json=payload,
    )
    if response.status_code not in {200, 201}:
        raise QdrantError(
            f"Upsert failed: {response.status_code} {response.text}",
            status_code=response.status_code,
        )


def search(
    collection: str,
    query_vector: list[float],
    limit: int,
    score_threshold: float | None,
) -> list[dict[str, Any]]:
    payload: dict[str, Any] = {
        "vector": query_vector,
        "limit": limit,
        "with_payload": True,
    }
    if score_threshold is not None:
        payload["score_threshold"] = score_threshold
    response = _request(
        "POST",
        f"/collections/{collection}/points/search",
        json=payload,
    )
    if response.status_code != 200:
        raise QdrantError(
            f"Search failed: {response.status_code} {response.text}",
            status_code=response.status_code,
        )
    data = response.json()
    return data.get("result", [])
