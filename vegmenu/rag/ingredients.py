from __future__ import annotations

from pydantic import BaseModel


class IngredientFact(BaseModel):
    name: str
    text: str
    is_vegetarian: bool
    category: str = "ingredient"


INGREDIENT_FACTS: tuple[IngredientFact, ...] = (
    IngredientFact(
        name="Parmesan",
        text="Parmesan cheese often contains animal rennet and is not vegetarian.",
        is_vegetarian=False,
        category="dairy",
    ),
    IngredientFact(
        name="Gelatin",
        text="Gelatin is derived from animal collagen and is not vegetarian.",
        is_vegetarian=False,
    ),
    IngredientFact(
        name="Tofu",
        text="Tofu is made from soybeans and is vegetarian.",
        is_vegetarian=True,
        category="protein",
    ),
    IngredientFact(
        name="Chicken Stock",
        text="Chicken stock is made from chicken bones and meat, not vegetarian.",
        is_vegetarian=False,
        category="broth",
    ),
    IngredientFact(
        name="Fish Sauce",
        text="Fish sauce is made from fermented fish, not vegetarian.",
        is_vegetarian=False,
        category="sauce",
    ),
    IngredientFact(
        name="Worcestershire Sauce",
        text="Worcestershire sauce often contains anchovies (fish).",
        is_vegetarian=False,
        category="sauce",
    ),
    IngredientFact(
        name="Lard",
        text="Lard is pig fat, not vegetarian.",
        is_vegetarian=False,
        category="fat",
    ),
    IngredientFact(
        name="Agar Agar",
        text="Agar agar is a plant-based gelatin substitute, vegetarian.",
        is_vegetarian=True,
    ),
    IngredientFact(
        name="Seitan",
        text="Seitan is wheat gluten, vegetarian meat substitute.",
        is_vegetarian=True,
        category="protein",
    ),
    IngredientFact(
        name="Tempeh",
        text="Tempeh is fermented soy, vegetarian.",
        is_vegetarian=True,
        category="protein",
    ),
    IngredientFact(
        name="Paneer",
        text="Paneer is an Indian fresh cheese set with acid, vegetarian.",
        is_vegetarian=True,
        category="dairy",
    ),
    IngredientFact(
        name="Halloumi",
        text="Halloumi is a grilling cheese; some brands use animal rennet.",
        is_vegetarian=True,
        category="dairy",
    ),
    IngredientFact(
        name="Falafel",
        text="Falafel are fried chickpea or fava bean balls, vegetarian.",
        is_vegetarian=True,
        category="prepared",
    ),
    IngredientFact(
        name="Hummus",
        text="Hummus is a chickpea and tahini spread, vegetarian.",
        is_vegetarian=True,
        category="prepared",
    ),
    IngredientFact(
        name="Dashi",
        text="Dashi broth is usually made with bonito fish flakes, not vegetarian.",
        is_vegetarian=False,
        category="broth",
    ),
    IngredientFact(
        name="Caesar Dressing",
        text="Classic Caesar dressing contains anchovies, not vegetarian.",
        is_vegetarian=False,
        category="sauce",
    ),
    IngredientFact(
        name="Pesto",
        text="Traditional pesto uses Parmigiano with animal rennet; check for vegetarian cheese.",
        is_vegetarian=False,
        category="sauce",
    ),
    IngredientFact(
        name="Borscht",
        text="Ukrainian borscht is often cooked on meat broth unless marked as lenten.",
        is_vegetarian=False,
        category="soup",
    ),
    IngredientFact(
        name="Varenyky",
        text="Varenyky with potato, cabbage or cottage cheese filling are vegetarian.",
        is_vegetarian=True,
        category="prepared",
    ),
    IngredientFact(
        name="Eggs",
        text="Eggs and dairy products such as milk, butter and cheese are vegetarian.",
        is_vegetarian=True,
        category="dairy",
    ),
)
