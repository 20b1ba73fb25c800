"""Serving-size scaling of per-100g nutrition values."""

import math
from collections.abc import Iterable
from dataclasses import replace

from calorie_tracker.domain.errors import InvalidInputError
from calorie_tracker.domain.models import FoodDraft, FoodLogEntry, MealType
from calorie_tracker.domain.nutrition import (
    GRAM_UNIT,
    CatalogFood,
    MacroProfile,
    ServingUnit,
)

REFERENCE_GRAMS = 100.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def scale_macros(base: MacroProfile, grams: float) -> MacroProfile:
    """Scale per-100g values to a portion of ``grams``, rounded to integers."""
    if grams <= 0:
        raise InvalidInputError(f"Weight must be positive, got {grams:g} g")
    factor = grams / REFERENCE_GRAMS
    return MacroProfile(
        calories=round_half_up(base.calories * factor),
        protein_g=round_half_up(base.protein_g * factor),
        carbs_g=round_half_up(base.carbs_g * factor),
        fat_g=round_half_up(base.fat_g * factor),
    )


def base_from_portion(portion: MacroProfile, grams: float) -> MacroProfile:
    """Derive per-100g values from an absolute portion."""
    if grams <= 0:
        raise InvalidInputError(f"Weight must be positive, got {grams:g} g")
    factor = REFERENCE_GRAMS / grams
    return MacroProfile(
        calories=portion.calories * factor,
        protein_g=portion.protein_g * factor,
        carbs_g=portion.carbs_g * factor,
        fat_g=portion.fat_g * factor,
    )


def with_gram_unit(units: Iterable[ServingUnit]) -> tuple[ServingUnit, ...]:
    """Return ``units`` led by the 1 g unit; other units named "g" are dropped."""
    return (GRAM_UNIT, *(unit for unit in units if unit.name != GRAM_UNIT.name))


def resolve_serving_grams(
    units: Iterable[ServingUnit], unit_name: str, count: float
) -> float:
    """Return the grams of ``count`` servings of the named unit."""
    if count <= 0:
        raise InvalidInputError(f"Serving count must be positive, got {count:g}")
    for unit in units:
        if unit.name == unit_name:
            return unit.grams * count
    raise InvalidInputError(f"Unknown serving unit: {unit_name}")


def scale_serving(food: CatalogFood, unit_name: str, count: float) -> MacroProfile:
    """Scale a catalog food to ``count`` servings of the named unit."""
    grams = resolve_serving_grams(food.serving_units, unit_name, count)
    return scale_macros(food.per_100g, grams)


def draft_from_catalog(
    food: CatalogFood, meal_type: MealType, unit_name: str, count: float
) -> FoodDraft:
    """Build a log draft for a selected catalog food."""
    grams = resolve_serving_grams(food.serving_units, unit_name, count)
    portion = scale_macros(food.per_100g, grams)
    return _draft(food.name, meal_type, grams, portion, food.per_100g)


def draft_from_portion(
    name: str, meal_type: MealType, grams: float, portion: MacroProfile
) -> FoodDraft:
    """Build a log draft from absolute values, keeping derived base values."""
    if portion.calories < 0 or min(
        portion.protein_g, portion.carbs_g, portion.fat_g
    ) < 0:
        raise InvalidInputError("Calories and macros cannot be negative")
    return _draft(name, meal_type, grams, portion, base_from_portion(portion, grams))


def rescale_entry(entry: FoodLogEntry, grams: float) -> FoodLogEntry:
    """Return the entry at a new weight, recomputed from its base values."""
    portion = scale_macros(entry_base(entry), grams)
    return _with_portion(entry, grams, portion)


def replace_entry_food(entry: FoodLogEntry, food: CatalogFood) -> FoodLogEntry:
    """Swap the entry's food, keeping its id, date, meal and weight."""
    portion = scale_macros(food.per_100g, entry.weight_g)
    return replace(
        _with_portion(entry, entry.weight_g, portion),
        name=food.name,
        base_calories=food.per_100g.calories,
        base_protein_g=food.per_100g.protein_g,
        base_carbs_g=food.per_100g.carbs_g,
        base_fat_g=food.per_100g.fat_g,
    )


def entry_base(entry: FoodLogEntry) -> MacroProfile:
    """Return the per-100g values stored on an entry."""
    return MacroProfile(
        calories=entry.base_calories,
        protein_g=entry.base_protein_g,
        carbs_g=entry.base_carbs_g,
        fat_g=entry.base_fat_g,
    )


def _draft(
    name: str,
    meal_type: MealType,
    grams: float,
    portion: MacroProfile,
    base: MacroProfile,
) -> FoodDraft:
    if not name.strip():
        raise InvalidInputError("Food name cannot be empty")
    if grams <= 0:
        raise InvalidInputError(f"Weight must be positive, got {grams:g} g")
    return FoodDraft(
        name=name.strip(),
        meal_type=meal_type,
        weight_g=grams,
        calories=portion.calories,
        protein_g=portion.protein_g,
        carbs_g=portion.carbs_g,
        fat_g=portion.fat_g,
        base_calories=base.calories,
        base_protein_g=base.protein_g,
        base_carbs_g=base.carbs_g,
        base_fat_g=base.fat_g,
    )


def _with_portion(
    entry: FoodLogEntry, grams: float, portion: MacroProfile
) -> FoodLogEntry:
    return replace(
        entry,
        weight_g=grams,
        calories=portion.calories,
        protein_g=portion.protein_g,
        carbs_g=portion.carbs_g,
        fat_g=portion.fat_g,
    )
