"""Goal evaluation and macro goal derivation."""

import math

from calorie_tracker.domain.errors import InvalidInputError
from calorie_tracker.domain.models import MacroGoal, MacroSplit, UserProfile
from calorie_tracker.domain.nutrition import MacroProfile
from calorie_tracker.domain.stats import GoalProgress
from calorie_tracker.services.scaling import round_half_up

KCAL_PER_GRAM_PROTEIN = 4
KCAL_PER_GRAM_CARBS = 4
KCAL_PER_GRAM_FAT = 9


def evaluate_goals(totals: MacroProfile, profile: UserProfile) -> GoalProgress:
    """Compare totals with the profile goals.

    Remaining calories are clamped at zero; remaining macros go negative
    once a macro goal is exceeded.
    """
    goal = profile.daily_goal
    progress = totals.calories / goal * 100 if goal > 0 else 0.0
    return GoalProgress(
        total_calories=totals.calories,
        daily_goal=goal,
        remaining_calories=max(0.0, goal - totals.calories),
        progress_percent=progress,
        remaining_protein_g=profile.macro_goal.protein_g - totals.protein_g,
        remaining_carbs_g=profile.macro_goal.carbs_g - totals.carbs_g,
        remaining_fat_g=profile.macro_goal.fat_g - totals.fat_g,
    )


def macro_goal_from_percentages(daily_goal: float, split: MacroSplit) -> MacroGoal:
    """Convert a calorie split into gram targets."""
    percentages = (split.protein_pct, split.carbs_pct, split.fat_pct)
    if any(value < 0 for value in percentages):
        raise InvalidInputError("Macro percentages cannot be negative.")
    total = sum(percentages)
    if not math.isclose(total, 100):
        raise InvalidInputError(
            f"Macro percentages must add up to 100. Current total: {total:g}%."
        )
    if daily_goal <= 0:
        raise InvalidInputError("Daily calorie goal must be positive.")
    return MacroGoal(
        protein_g=round_half_up(
            daily_goal * split.protein_pct / 100 / KCAL_PER_GRAM_PROTEIN
        ),
        carbs_g=round_half_up(daily_goal * split.carbs_pct / 100 / KCAL_PER_GRAM_CARBS),
        fat_g=round_half_up(daily_goal * split.fat_pct / 100 / KCAL_PER_GRAM_FAT),
    )
