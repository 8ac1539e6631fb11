from __future__ import annotations

from typing import Callable, Sequence

import anyio
import structlog

from vegmenu.core.logging import request_id_ctx
from vegmenu.pipeline.aggregator import aggregate, sum_vegetarian_prices
from vegmenu.pipeline.classifier import classify_items
from vegmenu.pipeline.models import ClassifyResponse, MenuItem, MenuProcessingResult
from vegmenu.pipeline.normalizer import normalize_ocr_text
from vegmenu.pipeline.parser import parse_menu_text
from vegmenu.rag.knowledge_base import IngredientKnowledgeBase

logger = structlog.get_logger(__name__)


async def process_menu_text(
    raw_text: str,
    request_id: str,
    *,
    knowledge_base: IngredientKnowledgeBase | None = None,
    correction_llm: Callable[[str], str] | None = None,
    classification_llm: Callable[[str], str] | None = None,
) -> MenuProcessingResult:
    """Run normalize -> parse -> classify -> aggregate for one request."""
    token = request_id_ctx.set(request_id)
    try:
        logger.info("menu_processing_started", text_length=len(raw_text))
        cleaned = await anyio.to_thread.run_sync(
            lambda: normalize_ocr_text(raw_text, llm=correction_llm)
        )
        items = parse_menu_text(cleaned)
        logger.info("menu_parsed", items=len(items))

        classified = await classify_items(
            items, knowledge_base=knowledge_base, llm=classification_llm
        )
        result = aggregate(classified, request_id)
        logger.info(
            "menu_processing_completed",
            items=len(classified),
            vegetarian_items=len(result.vegetarian_items),
            total_sum=result.total_sum,
            requires_review=result.uncertainty_card is not None,
        )
        return result
    finally:
        request_id_ctx.reset(token)


async def classify_menu_items(
    items: Sequence[MenuItem],
    request_id: str,
    *,
    knowledge_base: IngredientKnowledgeBase | None = None,
    llm: Callable[[str], str] | None = None,
) -> ClassifyResponse:
    token = request_id_ctx.set(request_id)
    try:
        logger.info("classification_started", items=len(items))
        classified = await classify_items(items, knowledge_base=knowledge_base, llm=llm)
        return ClassifyResponse(
            classified_items=classified,
            total_sum=sum_vegetarian_prices(classified),
        )
    finally:
        request_id_ctx.reset(token)
