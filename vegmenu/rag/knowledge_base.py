from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Callable

import structlog

from vegmenu.core.config import settings
from vegmenu.core.errors import QdrantError
from vegmenu.rag import qdrant_repo
from vegmenu.rag.embeddings import embed_text, get_model

logger = structlog.get_logger(__name__)

SearchFn = Callable[[str, list[float], int, float | None], list[dict[str, Any]]]


class KnowledgeBaseState(str, Enum):
    unknown = "unknown"
    ready = "ready"
    unavailable = "unavailable"


def _default_probe(collection: str) -> None:
    get_model()
    if not qdrant_repo.collection_exists(collection):
        raise QdrantError(f"Collection {collection!r} does not exist", status_code=404)


class IngredientKnowledgeBase:
    """Handle to the ingredient facts collection.

    Initialization (embedding model load plus a collection probe) happens once,
    on first use. A failed initialization is remembered as ``unavailable`` so
    later requests skip retrieval instead of repeating the failing round-trip.
    """

    def __init__(
        self,
        collection: str | None = None,
        *,
        score_threshold: float | None = None,
        embed: Callable[[str], list[float]] = embed_text,
        search_fn: SearchFn = qdrant_repo.search,
        probe: Callable[[str], None] = _default_probe,
    ) -> None:
        self.collection = collection or settings.ingredient_collection
        self.score_threshold = (
            settings.rag_score_threshold if score_threshold is None else score_threshold
        )
        self._embed = embed
        self._search = search_fn
        self._probe = probe
        self._state = KnowledgeBaseState.unknown
        self._lock = threading.Lock()

    @property
    def state(self) -> KnowledgeBaseState:
        return self._state

    def is_available(self) -> bool:
        if self._state is KnowledgeBaseState.unknown:
            with self._lock:
                if self._state is KnowledgeBaseState.unknown:
                    self._initialize()
        return self._state is KnowledgeBaseState.ready

    def _initialize(self) -> None:
        try:
            self._probe(self.collection)
        except Exception as exc:
            logger.warning(
                "knowledge_base_unavailable",
                collection=self.collection,
                error=str(exc),
            )
            self._state = KnowledgeBaseState.unavailable
            return
        logger.info("knowledge_base_ready", collection=self.collection)
        self._state = KnowledgeBaseState.ready

    def reset(self) -> None:
        with self._lock:
            self._state = KnowledgeBaseState.unknown

    def retrieve(self, query: str, top_k: int | None = None) -> list[str]:
        """Return up to ``top_k`` passages ranked by cosine similarity."""
        if not self.is_available():
            return []
        limit = top_k or settings.rag_top_k
        results = self._search(
            self.collection,
            self._embed(query),
            limit,
            self.score_threshold,
        )
        passages: list[str] = []
        for result in results[:limit]:
            payload = result.get("payload") or {}
            text = payload.get("text")
            if isinstance(text, str) and text.strip():
                passages.append(text.strip())
        return passages
