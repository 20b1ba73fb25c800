"""Meal photo estimation using LLMs."""

import base64
import logging
from dataclasses import dataclass

from calorie_tracker.domain.ai import (
    AugmentedItem,
    AugmentRequestItem,
    AugmentResult,
    EstimatedItem,
    ImageEstimate,
    ScanItem,
    ScanResult,
)
from calorie_tracker.domain.errors import InvalidInputError
from calorie_tracker.domain.models import FoodDraft, MealType
from calorie_tracker.domain.nutrition import MacroProfile
from calorie_tracker.services.scaling import draft_from_portion
from calorie_tracker.services.structured import (
    StructuredModel,
    items_schema,
    nullable,
    object_schema,
)

_logger = logging.getLogger(__name__)

_NUMBER = {"type": "number", "minimum": 0}

ESTIMATE_SCHEMA = items_schema(
    object_schema(
        {
            "name": {"type": "string"},
            "weight_g": nullable(_NUMBER),
            "calories": _NUMBER,
            "protein_g": _NUMBER,
            "carbs_g": _NUMBER,
            "fat_g": _NUMBER,
        }
    ),
    total_calories=_NUMBER,
)

AUGMENT_SCHEMA = items_schema(
    object_schema(
        {
            "food_item": {"type": "string"},
            "quantity": nullable({"type": "string"}),
            "weight_g": nullable(_NUMBER),
            "reason": {"type": "string"},
        }
    )
)

ESTIMATE_PROMPT = (
    "You are an assistant specialized in estimating the calorie and "
    "macronutrient content of meals from images. Identify the food items in "
    "the image. For each item estimate calories, protein, carbs and fat in "
    "grams and, if possible, its weight in grams. If the weight is not obvious, "
    "suggest one based on common serving sizes. Also estimate the total "
    "calories of the whole meal."
)


@dataclass
class VisionService:
    """Estimates meals from photos and fills in missing portion details."""

    model: StructuredModel

    async def estimate(self, image_bytes: bytes) -> ImageEstimate:
        """Estimate food items and macros from a meal photo."""
        return await self.model.request(
            ImageEstimate,
            prompt=ESTIMATE_PROMPT,
            schema=ESTIMATE_SCHEMA,
            schema_name="meal_estimate",
            image_data_url=_to_data_url(image_bytes),
        )

    async def augment_details(
        self, items: list[AugmentRequestItem]
    ) -> list[AugmentedItem]:
        """Suggest quantity and weight where missing, keeping given values."""
        if not items:
            return []
        result = await self.model.request(
            AugmentResult,
            prompt=_augment_prompt(items),
            schema=AUGMENT_SCHEMA,
            schema_name="food_details",
        )
        given = {item.food_item: item for item in items}
        return [
            _keep_given(suggestion, given.get(suggestion.food_item))
            for suggestion in result.items
        ]

    async def estimate_and_augment(self, image_bytes: bytes) -> ScanResult:
        """Estimate a photo, then complete portion details for every item."""
        estimate = await self.estimate(image_bytes)
        if not estimate.items:
            return ScanResult(items=[], total_calories=0)
        augmented = await self.augment_details(
            [
                AugmentRequestItem(food_item=item.name, weight_g=item.weight_g)
                for item in estimate.items
            ]
        )
        by_name: dict[str, EstimatedItem] = {}
        for item in estimate.items:
            by_name.setdefault(item.name, item)
        items = []
        for suggestion in augmented:
            original = by_name.get(suggestion.food_item)
            items.append(
                ScanItem(
                    food_item=suggestion.food_item,
                    quantity=suggestion.quantity,
                    weight_g=suggestion.weight_g,
                    calories=original.calories if original else None,
                    protein_g=original.protein_g if original else None,
                    carbs_g=original.carbs_g if original else None,
                    fat_g=original.fat_g if original else None,
                    reason=suggestion.reason,
                )
            )
        return ScanResult(items=items, total_calories=estimate.total_calories)


def drafts_from_scan(items: list[ScanItem], meal_type: MealType) -> list[FoodDraft]:
    """Convert accepted scan items into log drafts.

    Items without a weight, with no calories or missing a macro are skipped.
    """
    drafts = []
    for item in items:
        values = (item.calories, item.protein_g, item.carbs_g, item.fat_g)
        if not item.weight_g or not item.calories or None in values:
            _logger.info("Skipping incomplete scan item %s", item.food_item)
            continue
        drafts.append(
            draft_from_portion(
                item.food_item, meal_type, item.weight_g, MacroProfile(*values)
            )
        )
    return drafts


def _keep_given(
    suggestion: AugmentedItem, given: AugmentRequestItem | None
) -> AugmentedItem:
    if given is None:
        return suggestion
    return suggestion.model_copy(
        update={
            "quantity": given.quantity or suggestion.quantity,
            "weight_g": given.weight_g or suggestion.weight_g,
        }
    )


def _augment_prompt(items: list[AugmentRequestItem]) -> str:
    lines = []
    for item in items:
        lines.append(f"- Food item: {item.food_item}")
        if item.quantity:
            lines.append(f"  Quantity: {item.quantity}")
        if item.weight_g:
            lines.append(f"  Weight: {item.weight_g:g} grams")
    return (
        "Suggest reasonable quantities and weights for the food items of a meal. "
        "Some items are missing quantity or weight. Fill in the missing fields "
        "from typical serving sizes and explain each suggestion. If quantity "
        "and weight are present, return them unchanged.\n\n" + "\n".join(lines)
    )


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    if not image_bytes:
        raise InvalidInputError("The uploaded image is empty")
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
