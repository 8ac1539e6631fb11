from __future__ import annotations

import threading
from typing import Iterable

from sentence_transformers import SentenceTransformer

from vegmenu.core.config import settings

_MODEL: SentenceTransformer | None = None
_MODEL_LOCK = threading.Lock()


def get_model() -> SentenceTransformer:
    global _MODEL
    if _MODEL is None:
        with _MODEL_LOCK:
            if _MODEL is None:
                _MODEL = SentenceTransformer(settings.embedding_model)
    return _MODEL


def embed_texts(texts: Iterable[str]) -> list[list[float]]:
    model = get_model()
    return model.encode(list(texts), normalize_embeddings=True).tolist()


def embed_text(text: str) -> list[float]:
    return embed_texts([text])[0]
