from __future__ import annotations

from typing import Callable

import structlog

from vegmenu.core.config import settings
from vegmenu.llm import openai_chat

logger = structlog.get_logger(__name__)


def build_cleanup_prompt(raw_text: str) -> str:
    return (
        "You are an OCR correction expert. Fix OCR errors in this menu text "
        "while preserving the exact structure.\n\n"
        "Common OCR errors to fix:\n"
        '- "3" read instead of the Ukrainian preposition "з"\n'
        '- Mixed Latin/Cyrillic look-alike letters (e.g. "Kapnauo" -> "Карпачо")\n'
        "- Misspelled words and wrong characters that break words\n\n"
        "Rules:\n"
        "1. Keep all prices and every other number exactly as-is\n"
        "2. Keep line breaks\n"
        "3. Only fix obvious OCR errors\n"
        "4. Don't add, remove or reorder lines\n"
        "5. Return ONLY the corrected text, no explanations\n\n"
        f"Raw OCR text:\n{raw_text}\n\n"
        "Corrected text:"
    )


def _content_lines(text: str) -> int:
    return sum(1 for line in text.splitlines() if line.strip())


def _default_llm() -> Callable[[str], str] | None:
    if not settings.llm_cleanup_enabled or not openai_chat.is_configured():
        return None

    def _call(prompt: str) -> str:
        return openai_chat.chat_completion(
            prompt,
            model=settings.llm_cleanup_model,
            temperature=0.0,
            max_tokens=4096,
        )

    return _call


def normalize_ocr_text(raw_text: str, llm: Callable[[str], str] | None = None) -> str:
    """
    Repair OCR noise in menu text with one LLM correction pass.

    Never raises: when correction is not configured, the call fails, or the
    reply changes the number of lines, the input is returned unchanged.
    """
    if not raw_text.strip():
        return raw_text

    llm = llm or _default_llm()
    if llm is None:
        logger.info("ocr_cleanup_skipped", reason="not_configured")
        return raw_text

    try:
        corrected = llm(build_cleanup_prompt(raw_text)).strip()
    except Exception as exc:
        logger.warning("ocr_cleanup_failed", error=str(exc))
        return raw_text

    if not corrected:
        logger.warning("ocr_cleanup_rejected", reason="empty_response")
        return raw_text
    expected, actual = _content_lines(raw_text), _content_lines(corrected)
    if expected != actual:
        logger.warning(
            "ocr_cleanup_rejected",
            reason="line_count_changed",
            expected_lines=expected,
            actual_lines=actual,
        )
        return raw_text

    logger.info("ocr_cleanup_applied", lines=actual)
    return corrected
