"""Models for structured language model results."""

from typing import Literal

from pydantic import BaseModel, Field

RecipeGoal = Literal[
    "lower-calorie",
    "higher-protein",
    "lower-fat",
    "lower-carb",
    "vegan",
    "vegetarian",
]


class EstimatedItem(BaseModel):
    """Single food item estimated from a meal photo."""

    name: str
    weight_g: float | None = Field(default=None, ge=0)
    calories: float = Field(ge=0)
    protein_g: float = Field(ge=0)
    carbs_g: float = Field(ge=0)
    fat_g: float = Field(ge=0)


class ImageEstimate(BaseModel):
    """Structured output for meal photo estimation."""

    items: list[EstimatedItem]
    total_calories: float = Field(ge=0)


class AugmentRequestItem(BaseModel):
    """Food item whose quantity or weight may be missing."""

    food_item: str
    quantity: str | None = None
    weight_g: float | None = Field(default=None, ge=0)


class AugmentedItem(BaseModel):
    """Food item with suggested quantity and weight."""

    food_item: str
    quantity: str | None = None
    weight_g: float | None = Field(default=None, ge=0)
    reason: str


class AugmentResult(BaseModel):
    """Structured output for detail augmentation."""

    items: list[AugmentedItem]


class ScanItem(BaseModel):
    """Photo estimate merged with the augmented details."""

    food_item: str
    quantity: str | None = None
    weight_g: float | None = None
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None
    reason: str | None = None


class ScanResult(BaseModel):
    """Items found on a meal photo and the estimated meal total."""

    items: list[ScanItem]
    total_calories: float


class CatalogServingUnit(BaseModel):
    """Serving unit returned by a food search."""

    name: str
    grams: float = Field(gt=0)


class CatalogItem(BaseModel):
    """Food search hit with per-100g macros."""

    name: str
    brand: str | None = None
    calories: float = Field(ge=0)
    protein_g: float = Field(ge=0)
    carbs_g: float = Field(ge=0)
    fat_g: float = Field(ge=0)
    serving_units: list[CatalogServingUnit]


class CatalogSearchResult(BaseModel):
    """Structured output for food search."""

    items: list[CatalogItem]


class ParsedItem(BaseModel):
    """Food item resolved from a free-text meal description."""

    name: str
    weight_g: float = Field(gt=0)
    calories: float = Field(ge=0)
    protein_g: float = Field(ge=0)
    carbs_g: float = Field(ge=0)
    fat_g: float = Field(ge=0)


class ParsedLog(BaseModel):
    """Structured output for natural-language logging."""

    items: list[ParsedItem]


class NutritionInfo(BaseModel):
    """Nutrition totals for a whole dish."""

    calories: float = Field(ge=0)
    protein_g: float = Field(ge=0)
    carbs_g: float = Field(ge=0)
    fat_g: float = Field(ge=0)


class ReimaginedRecipe(BaseModel):
    """A recipe rewritten towards a dietary goal."""

    title: str
    description: str
    ingredients: list[str]
    instructions: list[str]
    nutrition_analysis: str


class RecipeMakeover(BaseModel):
    """Structured output for recipe reimagining."""

    original_nutrition: NutritionInfo
    reimagined_recipe: ReimaginedRecipe
    reimagined_nutrition: NutritionInfo
