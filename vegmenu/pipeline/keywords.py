from __future__ import annotations

# Matching is substring based on case-folded text, so stems ("куряч", "креветк")
# cover inflected forms. Lists are scanned language by language, in the order
# written here; the first hit decides.
NON_VEG_KEYWORDS: dict[str, tuple[str, ...]] = {
    "en": (
        "steak",
        "chicken",
        "beef",
        "pork",
        "bacon",
        "fish",
        "salmon",
        "tuna",
        "shrimp",
        "lamb",
        "meat",
        "crab",
        "eel",
    ),
    "uk": (
        "стейк",
        "курка",
        "куряч",
        "яловичина",
        "свинина",
        "бекон",
        "риба",
        "лосос",
        "тунець",
        "креветка",
        "креветк",
        "краб",
        "м'яс",
        "м’яс",
        "вугр",
        "телятин",
        "каперс",
        "боніто",
    ),
    "ru": (
        "куриц",
        "курин",
        "говядин",
        "свинин",
        "рыба",
        "рыбн",
        "тунец",
        "мяс",
        "угорь",
        "баранин",
    ),
}

VEG_KEYWORDS: dict[str, tuple[str, ...]] = {
    "en": (
        "tofu",
        "seitan",
        "tempeh",
        "vegetable",
        "vegan",
        "cheese",
        "tomato",
        "eggplant",
        "mushroom",
        "salad",
    ),
    "uk": (
        "тофу",
        "сейтан",
        "темпе",
        "овоч",
        "веган",
        "сир",
        "страчателла",
        "буррата",
        "томат",
        "баклажан",
        "грібк",
        "рукол",
        "авокадо",
        "салат",
    ),
    "ru": (
        "овощ",
        "сыр",
        "гриб",
        "помидор",
    ),
}

LANGUAGE_ORDER: tuple[str, ...] = ("en", "uk", "ru")


def _flatten(keywords: dict[str, tuple[str, ...]]) -> tuple[str, ...]:
    return tuple(keyword for language in LANGUAGE_ORDER for keyword in keywords[language])


ALL_NON_VEG_KEYWORDS = _flatten(NON_VEG_KEYWORDS)
ALL_VEG_KEYWORDS = _flatten(VEG_KEYWORDS)


def first_match(text: str, keywords: tuple[str, ...]) -> str | None:
    for keyword in keywords:
        if keyword in text:
            return keyword
    return None
