"""Domain models for the calorie tracker."""

from dataclasses import dataclass
from datetime import date
from typing import Literal

MealType = Literal["Breakfast", "Lunch", "Dinner", "Snacks"]
Gender = Literal["male", "female"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "veryActive"]
WeeklyGoal = Literal[
    "lose1", "lose0.75", "lose0.5", "maintain", "gain0.5", "gain0.75", "gain1"
]

MEAL_TYPES: tuple[MealType, ...] = ("Breakfast", "Lunch", "Dinner", "Snacks")
GENDERS: tuple[Gender, ...] = ("male", "female")


@dataclass(frozen=True)
class FoodDraft:
    """Food about to be logged; the log assigns its id and date."""

    name: str
    meal_type: MealType
    weight_g: float
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    base_calories: float
    base_protein_g: float
    base_carbs_g: float
    base_fat_g: float


@dataclass(frozen=True)
class FoodLogEntry:
    """A logged food with absolute and per-100g nutrition."""

    id: str
    name: str
    meal_type: MealType
    date: date
    weight_g: float
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    base_calories: float
    base_protein_g: float
    base_carbs_g: float
    base_fat_g: float


@dataclass(frozen=True)
class MacroGoal:
    """Daily macronutrient targets in grams."""

    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class MacroSplit:
    """Share of daily calories per macronutrient, in percent."""

    protein_pct: float
    carbs_pct: float
    fat_pct: float


@dataclass(frozen=True)
class UserProfile:
    """Body metrics and nutrition goals of the user."""

    current_weight_kg: float
    goal_weight_kg: float
    daily_goal: float
    macro_goal: MacroGoal
    age: float | None = None
    gender: Gender | None = None
    height_cm: float | None = None
    activity_level: ActivityLevel | None = None
    maintenance_calories: float | None = None
    weekly_goal: WeeklyGoal | None = None


DEFAULT_PROFILE = UserProfile(
    current_weight_kg=75,
    goal_weight_kg=72,
    daily_goal=2200,
    macro_goal=MacroGoal(protein_g=150, carbs_g=250, fat_g=70),
    age=30,
    gender="male",
    height_cm=180,
    activity_level="moderate",
)
