from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, Sequence

from vegmenu.core.config import settings
from vegmenu.pipeline.models import ClassifiedMenuItem, MenuProcessingResult, UncertaintyCard


def exact_sum(prices: Iterable[int | float]) -> int | float:
    """Sum prices without float drift; integer prices give an integer total."""
    values = list(prices)
    if all(isinstance(price, int) for price in values):
        return sum(values)
    total = sum((Decimal(str(price)) for price in values), Decimal(0))
    return float(total)


def sum_vegetarian_prices(items: Iterable[ClassifiedMenuItem]) -> int | float:
    return exact_sum(item.price for item in items if item.is_vegetarian)


def _review_reason(item: ClassifiedMenuItem, threshold: float) -> str | None:
    classification = item.classification
    if classification is None:
        return "unclassified"
    if classification.flags:
        return "flagged"
    if classification.confidence < threshold:
        return "low_confidence"
    return None


def _flagged_entry(item: ClassifiedMenuItem, reason: str) -> dict[str, Any]:
    classification = item.classification
    return {
        "name": item.name,
        "price": item.price,
        "reason": reason,
        "is_vegetarian": classification.is_vegetarian if classification else None,
        "confidence": classification.confidence if classification else None,
        "reasoning": classification.reasoning if classification else None,
        "flags": list(classification.flags) if classification else [],
    }


def build_uncertainty_card(
    items: Iterable[ClassifiedMenuItem], threshold: float
) -> UncertaintyCard | None:
    flagged: list[dict[str, Any]] = []
    for item in items:
        reason = _review_reason(item, threshold)
        if reason is not None:
            flagged.append(_flagged_entry(item, reason))
    if not flagged:
        return None
    return UncertaintyCard(flagged_items=flagged)


def aggregate(
    items: Sequence[ClassifiedMenuItem],
    request_id: str,
    *,
    review_threshold: float | None = None,
) -> MenuProcessingResult:
    threshold = (
        settings.review_confidence_threshold if review_threshold is None else review_threshold
    )
    vegetarian_items = [item for item in items if item.is_vegetarian]
    return MenuProcessingResult(
        vegetarian_items=vegetarian_items,
        total_sum=exact_sum(item.price for item in vegetarian_items),
        uncertainty_card=build_uncertainty_card(items, threshold),
        request_id=request_id,
    )
