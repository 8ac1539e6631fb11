from __future__ import annotations

import re

from vegmenu.pipeline.models import MenuItem

MIN_LINE_LENGTH = 3
MAX_HEADER_LENGTH = 30
MIN_NAME_LENGTH = 3

PRICE_PATTERN = re.compile(r"([0-9]+)\s*$")
PORTION_PATTERN = re.compile(r"^[0-9]+(?:/[0-9]+)?$")
LEADER_CHARS = ".…-–—_·"
LEADER_PATTERN = re.compile(rf"^[{re.escape(LEADER_CHARS)}]+$")
ANNOTATION_PREFIXES = ("*", '"')


def _is_header(line: str) -> bool:
    return line == line.upper() and len(line) < MAX_HEADER_LENGTH


def _extract_name(prefix: str) -> str:
    """Drop trailing portion/weight numbers and dot leaders from the name part.

    "Карпачо лосось 180" -> "Карпачо лосось", "Caesar Salad ......" -> "Caesar Salad".
    """
    tokens = prefix.split()
    end = len(tokens)
    while end > 0 and (
        PORTION_PATTERN.match(tokens[end - 1]) or LEADER_PATTERN.match(tokens[end - 1])
    ):
        end -= 1
    name = " ".join(tokens[:end])
    return name.rstrip(LEADER_CHARS).rstrip()


def parse_line(line: str) -> MenuItem | None:
    trimmed = line.strip()
    if len(trimmed) < MIN_LINE_LENGTH:
        return None
    if _is_header(trimmed):
        return None
    if trimmed.startswith(ANNOTATION_PREFIXES):
        return None

    match = PRICE_PATTERN.search(trimmed)
    if match is None:
        return None

    name = _extract_name(trimmed[: match.start()])
    if len(name) < MIN_NAME_LENGTH:
        return None
    return MenuItem(name=name, price=int(match.group(1)), raw_text=trimmed)


def parse_menu_text(text: str) -> list[MenuItem]:
    """Turn normalized menu text into items, one per priced line, in line order."""
    items: list[MenuItem] = []
    for line in text.split("\n"):
        item = parse_line(line)
        if item is not None:
            items.append(item)
    return items
