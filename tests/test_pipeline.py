from __future__ import annotations

import json
from functools import partial

import anyio

from vegmenu.pipeline import MenuItem, classify_menu_items, process_menu_text


def _run(raw_text: str, request_id: str = "req-e2e", **kwargs):
    return anyio.run(partial(process_menu_text, raw_text, request_id, **kwargs))


def test_meat_and_vegetable_items_without_uncertainty() -> None:
    result = _run("MAINS\nBeef Burger 15\nTomato Soup 7")

    assert [item.name for item in result.vegetarian_items] == ["Tomato Soup"]
    assert result.total_sum == 7
    assert result.uncertainty_card is None
    assert result.request_id == "req-e2e"


def test_correction_runs_before_parsing() -> None:
    def correction(prompt: str) -> str:
        return "Карпачо лосось 180 680\nСалат з томатами 150"

    result = _run(
        "Kapnauo лосось 180 680\nCaлaт 3 томатами 150",
        correction_llm=correction,
    )

    assert [item.name for item in result.vegetarian_items] == ["Салат з томатами"]
    assert result.total_sum == 150


def test_everything_down_still_returns_result(sample_menu_text: str) -> None:
    def broken(prompt: str) -> str:
        raise ConnectionError("no network")

    result = _run(
        sample_menu_text + "\nMargherita 14",
        correction_llm=broken,
        classification_llm=broken,
    )

    assert [item.name for item in result.vegetarian_items] == ["Greek Salad", "Сирники зі сметаною"]
    assert result.total_sum == 218
    assert result.uncertainty_card is not None
    [entry] = result.uncertainty_card.flagged_items
    assert entry["name"] == "Margherita"
    assert entry["flags"] == ["error"]
    assert entry["is_vegetarian"] is False


def test_knowledge_augmented_verdict_reaches_result(fake_knowledge_base) -> None:
    kb = fake_knowledge_base(["Agar agar is a plant-based gelatin substitute, vegetarian."])

    def classification(prompt: str) -> str:
        return json.dumps(
            {"is_vegetarian": True, "confidence": 0.9, "reasoning": "Set with agar", "flags": []}
        )

    result = _run("Panna cotta 6", knowledge_base=kb, classification_llm=classification)

    assert result.total_sum == 6
    assert result.vegetarian_items[0].classification.reasoning == "Set with agar"
    assert result.uncertainty_card is None


def test_unparseable_text_gives_empty_result() -> None:
    result = _run("WELCOME\n* enjoy\n\n")

    assert result.vegetarian_items == []
    assert result.total_sum == 0
    assert result.uncertainty_card is None


def test_classify_menu_items_returns_all_items_in_order() -> None:
    items = [
        MenuItem(name="Chicken Wings", price=11),
        MenuItem(name="Greek Salad", price=8.5),
        MenuItem(name="Caesar Salad", price=9.0),
    ]

    response = anyio.run(classify_menu_items, items, "req-classify")

    assert [item.name for item in response.classified_items] == [
        "Chicken Wings",
        "Greek Salad",
        "Caesar Salad",
    ]
    assert response.total_sum == 17.5
