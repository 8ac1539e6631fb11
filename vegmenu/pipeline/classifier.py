from __future__ import annotations

import json
from typing import Callable, Sequence

import anyio
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from vegmenu.core.config import settings
from vegmenu.llm import openai_chat
from vegmenu.pipeline.keywords import ALL_NON_VEG_KEYWORDS, ALL_VEG_KEYWORDS, first_match
from vegmenu.pipeline.models import Classification, ClassifiedMenuItem, MenuItem
from vegmenu.rag.knowledge_base import IngredientKnowledgeBase

logger = structlog.get_logger(__name__)

NON_VEG_CONFIDENCE = 0.95
VEG_CONFIDENCE = 0.85
NO_CONTEXT = "No ingredient database available."


def safe_default() -> Classification:
    return Classification(
        is_vegetarian=False,
        confidence=0.0,
        reasoning="Error during classification",
        flags=["error"],
    )


class LLMVerdict(BaseModel):
    # No coercion of untyped model output.
    model_config = ConfigDict(strict=True, str_strip_whitespace=True)

    is_vegetarian: bool
    confidence: float = Field(..., allow_inf_nan=False)
    reasoning: str = Field(..., min_length=1)
    flags: list[str] | None = None

    @field_validator("confidence")
    @classmethod
    def clamp_confidence(cls, value: float) -> float:
        return min(1.0, max(0.0, value))

    def to_classification(self) -> Classification:
        return Classification(
            is_vegetarian=self.is_vegetarian,
            confidence=self.confidence,
            reasoning=self.reasoning,
            flags=self.flags or [],
        )


def build_classification_prompt(item: MenuItem, context: str) -> str:
    return (
        "You are a multilingual food analyst. Determine if this menu item is vegetarian.\n\n"
        f"Item Name: {item.name}\n"
        f"Description: {item.description or 'N/A'}\n\n"
        f"Knowledge Base: {context}\n\n"
        "Rules:\n"
        "- Vegetarian = NO meat, poultry, fish, seafood\n"
        "- Dairy (сир, молоко) and eggs ARE vegetarian\n"
        "- Common NON-VEG Ukrainian: креветка (shrimp), курка/куряч (chicken), "
        "лосось (salmon), тунець (tuna), краб (crab), м'ясом (meat), вугр (eel), "
        "телятин (veal), каперс (capers with anchovies), боніто (bonito fish)\n"
        "- Common VEG Ukrainian: салат, овочі (vegetables), сир (cheese), "
        "томати (tomatoes), баклажан (eggplant), рукола (arugula), авокадо (avocado)\n\n"
        "Return ONLY valid JSON with no markdown:\n"
        '{"is_vegetarian": true/false, "confidence": 0.0-1.0, '
        '"reasoning": "brief explanation", "flags": []}'
    )


def strip_code_fences(raw: str) -> str:
    return raw.replace("```json", "").replace("```", "").strip()


def decode_verdict(raw: str) -> Classification:
    """Decode an LLM reply into a Classification; raises on schema mismatch."""
    payload = json.loads(strip_code_fences(raw))
    if not isinstance(payload, dict):
        raise ValueError("classification payload is not a JSON object")
    return LLMVerdict.model_validate(payload).to_classification()


def _item_text(item: MenuItem) -> str:
    return f"{item.name} {item.description or ''}".casefold()


def keyword_classification(item: MenuItem) -> Classification | None:
    text = _item_text(item)
    keyword = first_match(text, ALL_NON_VEG_KEYWORDS)
    if keyword is not None:
        return Classification(
            is_vegetarian=False,
            confidence=NON_VEG_CONFIDENCE,
            reasoning=f"Contains non-vegetarian ingredient: '{keyword}'",
        )
    keyword = first_match(text, ALL_VEG_KEYWORDS)
    if keyword is not None:
        return Classification(
            is_vegetarian=True,
            confidence=VEG_CONFIDENCE,
            reasoning=f"Contains vegetarian ingredient: '{keyword}'",
        )
    return None


def _retrieve_context(item: MenuItem, knowledge_base: IngredientKnowledgeBase | None) -> str:
    if knowledge_base is None:
        return NO_CONTEXT
    try:
        passages = knowledge_base.retrieve(_item_text(item).strip(), top_k=settings.rag_top_k)
    except Exception as exc:
        logger.warning("knowledge_base_search_failed", item=item.name, error=str(exc))
        return NO_CONTEXT
    return "\n".join(passages) if passages else NO_CONTEXT


def _default_llm(prompt: str) -> str:
    return openai_chat.chat_completion(
        prompt,
        model=settings.llm_classify_model,
        temperature=0.0,
        max_tokens=256,
        json_mode=True,
    )


def classify_item(
    item: MenuItem,
    *,
    knowledge_base: IngredientKnowledgeBase | None = None,
    llm: Callable[[str], str] | None = None,
) -> Classification:
    """
    Decide whether a single menu item is vegetarian.

    Tiers run in order and the first one that fires wins: non-vegetarian
    keywords, vegetarian keywords, then an LLM verdict grounded on ingredient
    facts retrieved from the knowledge base. Any failure of the LLM tier yields
    the non-vegetarian safe default flagged with "error".
    """
    classification = keyword_classification(item)
    if classification is not None:
        return classification

    context = _retrieve_context(item, knowledge_base)
    llm = llm or _default_llm
    raw = ""
    try:
        raw = llm(build_classification_prompt(item, context))
        classification = decode_verdict(raw)
    except (json.JSONDecodeError, ValidationError, ValueError) as exc:
        logger.warning(
            "classification_parse_error",
            item=item.name,
            error=str(exc),
            raw_response=raw[:500],
        )
        return safe_default()
    except Exception as exc:
        logger.warning("classification_failed", item=item.name, error=str(exc))
        return safe_default()

    return classification


async def classify_items(
    items: Sequence[MenuItem],
    *,
    knowledge_base: IngredientKnowledgeBase | None = None,
    llm: Callable[[str], str] | None = None,
) -> list[ClassifiedMenuItem]:
    """Classify items concurrently; output order always matches input order."""
    if not items:
        return []

    results: list[Classification | None] = [None] * len(items)
    limiter = anyio.CapacityLimiter(len(items))

    async def _classify_at(index: int, item: MenuItem) -> None:
        results[index] = await anyio.to_thread.run_sync(
            lambda: classify_item(item, knowledge_base=knowledge_base, llm=llm),
            limiter=limiter,
        )

    async with anyio.create_task_group() as task_group:
        for index, item in enumerate(items):
            task_group.start_soon(_classify_at, index, item)

    return [
        ClassifiedMenuItem.from_item(item, classification)
        for item, classification in zip(items, results, strict=True)
    ]
