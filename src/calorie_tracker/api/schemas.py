"""Request and response models for the HTTP API."""

import base64
import binascii
from datetime import date

from pydantic import BaseModel, Field, field_validator, model_validator

from calorie_tracker.domain.ai import (
    CatalogItem,
    CatalogServingUnit,
    ParsedItem,
    RecipeGoal,
    ScanItem,
)
from calorie_tracker.domain.energy import TdeeEstimate
from calorie_tracker.domain.models import (
    ActivityLevel,
    FoodLogEntry,
    Gender,
    MacroGoal,
    MacroSplit,
    MealType,
    UserProfile,
    WeeklyGoal,
)
from calorie_tracker.domain.nutrition import ServingUnit
from calorie_tracker.domain.stats import (
    DailySummary,
    GoalProgress,
    MacroDistribution,
)
from calorie_tracker.services.scaling import with_gram_unit
from calorie_tracker.services.stats import PeriodSummary


class SelectDateRequest(BaseModel):
    day: date


class SelectedDateResponse(BaseModel):
    day: date


class ManualEntryRequest(BaseModel):
    """Food entered by hand with absolute values for the portion."""

    name: str = Field(min_length=1)
    meal_type: MealType
    weight_g: float = Field(gt=0)
    calories: float = Field(gt=0)
    protein_g: float = Field(ge=0)
    carbs_g: float = Field(ge=0)
    fat_g: float = Field(ge=0)


class AddEntriesRequest(BaseModel):
    entries: list[ManualEntryRequest] = Field(min_length=1)


class CatalogEntryRequest(BaseModel):
    """A search result logged as a number of servings."""

    food: CatalogItem
    meal_type: MealType
    unit: str = "g"
    count: float = Field(gt=0)


class ScanEntriesRequest(BaseModel):
    items: list[ScanItem]
    meal_type: MealType


class RescaleRequest(BaseModel):
    """New portion, either in grams or as servings of a named unit."""

    weight_g: float | None = Field(default=None, gt=0)
    unit: str | None = None
    count: float | None = Field(default=None, gt=0)
    serving_units: list[CatalogServingUnit] = Field(default_factory=list)

    @model_validator(mode="after")
    def _one_portion(self) -> "RescaleRequest":
        by_unit = self.unit is not None and self.count is not None
        if (self.weight_g is not None) != by_unit:
            return self
        raise ValueError("Provide either weight_g or unit and count")

    def units(self) -> tuple[ServingUnit, ...]:
        """Return the serving units, always including the 1 g unit."""
        return with_gram_unit(
            ServingUnit(name=unit.name, grams=unit.grams)
            for unit in self.serving_units
        )


class ReplaceFoodRequest(BaseModel):
    food: CatalogItem


class EntriesResponse(BaseModel):
    entries: list[FoodLogEntry]


class SummaryResponse(BaseModel):
    summary: DailySummary
    goals: GoalProgress


class ProgressResponse(BaseModel):
    period: PeriodSummary
    distribution: MacroDistribution


class MacroGoalModel(BaseModel):
    protein_g: float = Field(ge=0)
    carbs_g: float = Field(ge=0)
    fat_g: float = Field(ge=0)


class ProfileModel(BaseModel):
    """User profile as accepted and returned by the API."""

    current_weight_kg: float = Field(gt=0)
    goal_weight_kg: float = Field(gt=0)
    daily_goal: float = Field(gt=0)
    macro_goal: MacroGoalModel
    age: float | None = Field(default=None, gt=0)
    gender: Gender | None = None
    height_cm: float | None = Field(default=None, gt=0)
    activity_level: ActivityLevel | None = None
    maintenance_calories: float | None = None
    weekly_goal: WeeklyGoal | None = None

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "ProfileModel":
        return cls(
            current_weight_kg=profile.current_weight_kg,
            goal_weight_kg=profile.goal_weight_kg,
            daily_goal=profile.daily_goal,
            macro_goal=MacroGoalModel(
                protein_g=profile.macro_goal.protein_g,
                carbs_g=profile.macro_goal.carbs_g,
                fat_g=profile.macro_goal.fat_g,
            ),
            age=profile.age,
            gender=profile.gender,
            height_cm=profile.height_cm,
            activity_level=profile.activity_level,
            maintenance_calories=profile.maintenance_calories,
            weekly_goal=profile.weekly_goal,
        )

    def to_domain(self) -> UserProfile:
        return UserProfile(
            current_weight_kg=self.current_weight_kg,
            goal_weight_kg=self.goal_weight_kg,
            daily_goal=self.daily_goal,
            macro_goal=MacroGoal(
                protein_g=self.macro_goal.protein_g,
                carbs_g=self.macro_goal.carbs_g,
                fat_g=self.macro_goal.fat_g,
            ),
            age=self.age,
            gender=self.gender,
            height_cm=self.height_cm,
            activity_level=self.activity_level,
            maintenance_calories=self.maintenance_calories,
            weekly_goal=self.weekly_goal,
        )


class MacroSplitRequest(BaseModel):
    protein_pct: float
    carbs_pct: float
    fat_pct: float

    def to_domain(self) -> MacroSplit:
        return MacroSplit(
            protein_pct=self.protein_pct,
            carbs_pct=self.carbs_pct,
            fat_pct=self.fat_pct,
        )


class TdeeRequest(BaseModel):
    """Body metrics for the estimate; omitted values come from the profile."""

    weekly_goal: WeeklyGoal = "maintain"
    weight_kg: float | None = None
    height_cm: float | None = None
    age: float | None = None
    gender: Gender | None = None
    activity_level: ActivityLevel | None = None


class TdeeResponse(BaseModel):
    estimate: TdeeEstimate


class ScanRequest(BaseModel):
    """Meal photo encoded as base64, optionally as a data URL."""

    image_base64: str = Field(min_length=1)

    @field_validator("image_base64")
    @classmethod
    def _decodable(cls, value: str) -> str:
        if value.startswith("data:") and "," in value:
            value = value.split(",", 1)[1]
        try:
            base64.b64decode(value, validate=True)
        except binascii.Error as exc:
            raise ValueError("image_base64 is not valid base64") from exc
        return value

    def image_bytes(self) -> bytes:
        return base64.b64decode(self.image_base64)


class SearchRequest(BaseModel):
    query: str


class SearchResponse(BaseModel):
    items: list[CatalogItem]


class ParseRequest(BaseModel):
    query: str = Field(min_length=1)
    meal_type: MealType = "Snacks"
    log: bool = False


class ParseResponse(BaseModel):
    items: list[ParsedItem]
    logged: list[FoodLogEntry] = Field(default_factory=list)
    stale: bool = False


class RecipeRequest(BaseModel):
    ingredients: str = Field(min_length=1)
    instructions: str = Field(min_length=1)
    goal: RecipeGoal
