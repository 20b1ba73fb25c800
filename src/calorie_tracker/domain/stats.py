"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date

from calorie_tracker.domain.models import FoodLogEntry, MealType
from calorie_tracker.domain.nutrition import MacroProfile


@dataclass(frozen=True)
class MealGroup:
    """Entries of one meal category with their totals."""

    meal_type: MealType
    entries: list[FoodLogEntry]
    totals: MacroProfile


@dataclass(frozen=True)
class DailySummary:
    """A day's log grouped by meal category."""

    day: date
    meals: list[MealGroup]
    totals: MacroProfile

    def meal(self, meal_type: MealType) -> MealGroup:
        """Return the group for a meal category."""
        return next(group for group in self.meals if group.meal_type == meal_type)


@dataclass(frozen=True)
class DailyTotals:
    """Daily total macros."""

    day: date
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class GoalProgress:
    """Totals compared against the user's goals."""

    total_calories: float
    daily_goal: float
    remaining_calories: float
    progress_percent: float
    remaining_protein_g: float
    remaining_carbs_g: float
    remaining_fat_g: float


@dataclass(frozen=True)
class MacroDistribution:
    """Summed macro grams and their share of the macro total."""

    protein_g: float
    carbs_g: float
    fat_g: float
    protein_share: float
    carbs_share: float
    fat_share: float
