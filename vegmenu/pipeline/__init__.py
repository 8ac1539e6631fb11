from vegmenu.pipeline.aggregator import aggregate
from vegmenu.pipeline.classifier import classify_item, classify_items
from vegmenu.pipeline.models import (
    Classification,
    ClassifiedMenuItem,
    ClassifyResponse,
    MenuItem,
    MenuProcessingResult,
    UncertaintyCard,
)
from vegmenu.pipeline.normalizer import normalize_ocr_text
from vegmenu.pipeline.parser import parse_menu_text
from vegmenu.pipeline.runner import classify_menu_items, process_menu_text

__all__ = [
    "Classification",
    "ClassifiedMenuItem",
    "ClassifyResponse",
    "MenuItem",
    "MenuProcessingResult",
    "UncertaintyCard",
    "aggregate",
    "classify_item",
    "classify_items",
    "classify_menu_items",
    "normalize_ocr_text",
    "parse_menu_text",
    "process_menu_text",
]
