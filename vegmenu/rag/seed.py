from __future__ import annotations

import uuid
from typing import Iterable

import structlog

from vegmenu.core.config import settings
from vegmenu.rag.embeddings import embed_texts
from vegmenu.rag.ingredients import INGREDIENT_FACTS, IngredientFact
from vegmenu.rag.qdrant_repo import create_collection_if_not_exists, upsert_points

logger = structlog.get_logger(__name__)

_POINT_NAMESPACE = uuid.UUID("5d7c2a4e-8f1b-4c3a-9e6d-0b2f7a1c9e44")


def _point_id(fact: IngredientFact) -> str:
    # Stable ids so reseeding overwrites instead of duplicating.
    return str(uuid.uuid5(_POINT_NAMESPACE, fact.name.lower()))


def seed_knowledge_base(
    collection: str | None = None,
    facts: Iterable[IngredientFact] = INGREDIENT_FACTS,
) -> int:
    collection = collection or settings.ingredient_collection
    items = list(facts)
    if not items:
        return 0
    vectors = embed_texts(fact.text for fact in items)
    create_collection_if_not_exists(collection, vector_size=len(vectors[0]))
    points = [
        {
            "id": _point_id(fact),
            "vector": vector,
            "payload": fact.model_dump(),
        }
        for fact, vector in zip(items, vectors, strict=True)
    ]
    upsert_points(collection, points)
    logger.info("knowledge_base_seeded", collection=collection, count=len(points))
    return len(points)
