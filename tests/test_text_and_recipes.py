"""Tests for natural-language logging and recipe reimagining."""

import asyncio

import pytest

from calorie_tracker.domain.ai import ParsedItem
from calorie_tracker.domain.errors import InvalidInputError
from calorie_tracker.services.recipes import RecipeService
from calorie_tracker.services.structured import StructuredModel
from calorie_tracker.services.text_log import TextLogService, drafts_from_parsed
from tests.conftest import FakeStructuredClient

_NUTRITION = {"calories": 800, "protein_g": 30, "carbs_g": 90, "fat_g": 35}


def test_parse_returns_items_and_drafts(
    structured_model: StructuredModel, model_client: FakeStructuredClient
) -> None:
    model_client.queue(
        "food_log",
        {
            "items": [
                {
                    "name": "chicken breast",
                    "weight_g": 150,
                    "calories": 248,
                    "protein_g": 46,
                    "carbs_g": 0,
                    "fat_g": 5,
                },
                {
                    "name": "rice",
                    "weight_g": 185,
                    "calories": 240,
                    "protein_g": 4,
                    "carbs_g": 53,
                    "fat_g": 0.4,
                },
            ]
        },
    )

    items = asyncio.run(
        TextLogService(structured_model).parse("150g chicken and a cup of rice")
    )
    drafts = drafts_from_parsed(items, "Dinner")

    assert [item.name for item in items] == ["chicken breast", "rice"]
    assert "150g chicken and a cup of rice" in model_client.calls[0]["prompt"]
    assert drafts[1].weight_g == 185
    assert drafts[1].meal_type == "Dinner"
    assert drafts[0].calories == 248


def test_parse_rejects_blank_query(structured_model: StructuredModel) -> None:
    with pytest.raises(InvalidInputError):
        asyncio.run(TextLogService(structured_model).parse("   "))


def test_reimagine_uses_goal_description(
    structured_model: StructuredModel, model_client: FakeStructuredClient
) -> None:
    model_client.queue(
        "recipe_makeover",
        {
            "original_nutrition": _NUTRITION,
            "reimagined_recipe": {
                "title": "Light Carbonara",
                "description": "Creamy without the cream.",
                "ingredients": ["200 g spaghetti", "2 eggs"],
                "instructions": ["Boil pasta.", "Toss with eggs."],
                "nutrition_analysis": "Less fat from skipping the cream.",
            },
            "reimagined_nutrition": {**_NUTRITION, "calories": 550},
        },
    )

    result = asyncio.run(
        RecipeService(structured_model).reimagine(
            "spaghetti, eggs, cream", "Boil and mix.", "lower-calorie"
        )
    )

    assert result.reimagined_recipe.title == "Light Carbonara"
    assert result.reimagined_nutrition.calories == 550
    assert "lower in calories" in model_client.calls[0]["prompt"]


def test_reimagine_rejects_unknown_goal(structured_model: StructuredModel) -> None:
    with pytest.raises(InvalidInputError):
        asyncio.run(
            RecipeService(structured_model).reimagine(
                "eggs", "fry", "keto"  # type: ignore[arg-type]
            )
        )


def test_parsed_items_without_calories_are_not_logged() -> None:
    items = [
        ParsedItem(
            name="black coffee",
            weight_g=240,
            calories=0,
            protein_g=0,
            carbs_g=0,
            fat_g=0,
        ),
        ParsedItem(
            name="banana",
            weight_g=120,
            calories=107,
            protein_g=1.3,
            carbs_g=27,
            fat_g=0.4,
        ),
    ]

    drafts = drafts_from_parsed(items, "Breakfast")

    assert [draft.name for draft in drafts] == ["banana"]
