"""Nutrition domain models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MacroProfile:
    """Calories and macronutrients, either per 100 g or for a portion."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


ZERO_MACROS = MacroProfile(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class ServingUnit:
    """Named serving unit and its weight in grams."""

    name: str
    grams: float


GRAM_UNIT = ServingUnit(name="g", grams=1.0)


@dataclass(frozen=True)
class CatalogFood:
    """Food reference data with per-100g macros and serving units."""

    name: str
    per_100g: MacroProfile
    brand: str | None = None
    serving_units: tuple[ServingUnit, ...] = field(default=(GRAM_UNIT,))
