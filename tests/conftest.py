from __future__ import annotations

import pytest

from vegmenu.core.config import settings


@pytest.fixture(autouse=True)
def offline_settings(monkeypatch) -> None:
    """No test may reach OpenAI, whatever the local .env says."""
    monkeypatch.setattr(settings, "openai_api_key", None)
    monkeypatch.setattr(settings, "review_confidence_threshold", 0.7)


@pytest.fixture()
def sample_menu_text() -> str:
    return "\n".join(
        [
            "STARTERS",
            "Chicken Wings 11",
            "Greek Salad ............. 8",
            "* all prices in UAH",
            "Карпачо лосось 180 680",
            "Сирники зі сметаною 150/50 210",
        ]
    )


class FakeKnowledgeBase:
    def __init__(self, passages: list[str] | None = None, error: Exception | None = None) -> None:
        self.passages = passages or []
        self.error = error
        self.queries: list[str] = []

    def retrieve(self, query: str, top_k: int | None = None) -> list[str]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.passages[: top_k or 3]


@pytest.fixture()
def fake_knowledge_base() -> type[FakeKnowledgeBase]:
    return FakeKnowledgeBase

