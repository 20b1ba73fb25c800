"""Natural-language food logging."""

import logging
from dataclasses import dataclass

from calorie_tracker.domain.ai import ParsedItem, ParsedLog
from calorie_tracker.domain.errors import InvalidInputError
from calorie_tracker.domain.models import FoodDraft, MealType
from calorie_tracker.domain.nutrition import MacroProfile
from calorie_tracker.services.scaling import draft_from_portion
from calorie_tracker.services.structured import (
    StructuredModel,
    items_schema,
    object_schema,
)

_NUMBER = {"type": "number", "minimum": 0}

_logger = logging.getLogger(__name__)

PARSE_SCHEMA = items_schema(
    object_schema(
        {
            "name": {"type": "string"},
            "weight_g": {"type": "number", "exclusiveMinimum": 0},
            "calories": _NUMBER,
            "protein_g": _NUMBER,
            "carbs_g": _NUMBER,
            "fat_g": _NUMBER,
        }
    )
)


@dataclass
class TextLogService:
    """Turns a free-text meal description into loggable items."""

    model: StructuredModel

    async def parse(self, query: str) -> list[ParsedItem]:
        """Identify foods, their weight in grams and their nutrition."""
        query = query.strip()
        if not query:
            raise InvalidInputError("Describe what you ate")
        result = await self.model.request(
            ParsedLog,
            prompt=_parse_prompt(query),
            schema=PARSE_SCHEMA,
            schema_name="food_log",
        )
        return result.items


def drafts_from_parsed(items: list[ParsedItem], meal_type: MealType) -> list[FoodDraft]:
    """Convert parsed items into log drafts, skipping items with no calories."""
    drafts = []
    for item in items:
        if not item.calories:
            _logger.info("Skipping parsed item without calories %s", item.name)
            continue
        drafts.append(
            draft_from_portion(
                item.name,
                meal_type,
                item.weight_g,
                MacroProfile(item.calories, item.protein_g, item.carbs_g, item.fat_g),
            )
        )
    return drafts


def _parse_prompt(query: str) -> str:
    return (
        "You are an expert nutrition logging assistant. The user described a "
        "meal in plain text. Identify each food item, its weight in grams and "
        "its calories, protein, carbs and fat.\n"
        "- Use verified nutrition data.\n"
        '- If a quantity is vague (e.g. "a splash of milk"), estimate it.\n'
        "- Convert all amounts to grams: 1 cup of rice is about 185 g, "
        "1 tbsp of olive oil about 14 g.\n\n"
        f'User query: "{query}"'
    )
