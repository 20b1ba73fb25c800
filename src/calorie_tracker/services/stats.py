"""Aggregation of logged food by day and meal."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from calorie_tracker.domain.models import MEAL_TYPES, FoodLogEntry
from calorie_tracker.domain.nutrition import ZERO_MACROS, MacroProfile
from calorie_tracker.domain.stats import (
    DailySummary,
    DailyTotals,
    MacroDistribution,
    MealGroup,
)


@dataclass
class PeriodSummary:
    """Aggregated totals for a period."""

    daily: list[DailyTotals]
    avg_calories: float
    avg_protein_g: float
    avg_carbs_g: float
    avg_fat_g: float


def entries_for(entries: Iterable[FoodLogEntry], day: date) -> list[FoodLogEntry]:
    """Return the entries logged on ``day`` in insertion order."""
    return [entry for entry in entries if entry.date == day]


def aggregate_day(entries: Iterable[FoodLogEntry], day: date) -> DailySummary:
    """Group a day's entries by meal category and sum their nutrition."""
    day_entries = entries_for(entries, day)
    meals = []
    for meal_type in MEAL_TYPES:
        meal_entries = [entry for entry in day_entries if entry.meal_type == meal_type]
        meals.append(
            MealGroup(
                meal_type=meal_type,
                entries=meal_entries,
                totals=sum_entries(meal_entries),
            )
        )
    return DailySummary(day=day, meals=meals, totals=sum_entries(day_entries))


def aggregate_period(
    entries: Iterable[FoodLogEntry], end_day: date, days: int = 7
) -> PeriodSummary:
    """Return daily totals for ``days`` days ending on ``end_day``, oldest first."""
    snapshot = list(entries)
    start = end_day - timedelta(days=max(days, 1) - 1)
    daily = []
    for offset in range(max(days, 1)):
        day = start + timedelta(days=offset)
        totals = sum_entries(entries_for(snapshot, day))
        daily.append(
            DailyTotals(
                day=day,
                calories=totals.calories,
                protein_g=totals.protein_g,
                carbs_g=totals.carbs_g,
                fat_g=totals.fat_g,
            )
        )

    total_days = len(daily)
    return PeriodSummary(
        daily=daily,
        avg_calories=sum(item.calories for item in daily) / total_days,
        avg_protein_g=sum(item.protein_g for item in daily) / total_days,
        avg_carbs_g=sum(item.carbs_g for item in daily) / total_days,
        avg_fat_g=sum(item.fat_g for item in daily) / total_days,
    )


def macro_distribution(entries: Iterable[FoodLogEntry]) -> MacroDistribution:
    """Sum macro grams over all entries and compute each macro's share."""
    totals = sum_entries(entries)
    macro_total = totals.protein_g + totals.carbs_g + totals.fat_g
    if macro_total <= 0:
        return MacroDistribution(
            protein_g=totals.protein_g,
            carbs_g=totals.carbs_g,
            fat_g=totals.fat_g,
            protein_share=0.0,
            carbs_share=0.0,
            fat_share=0.0,
        )
    return MacroDistribution(
        protein_g=totals.protein_g,
        carbs_g=totals.carbs_g,
        fat_g=totals.fat_g,
        protein_share=totals.protein_g / macro_total,
        carbs_share=totals.carbs_g / macro_total,
        fat_share=totals.fat_g / macro_total,
    )


def sum_entries(entries: Iterable[FoodLogEntry]) -> MacroProfile:
    """Sum absolute calories and macros."""
    total = ZERO_MACROS
    for entry in entries:
        total = MacroProfile(
            calories=total.calories + entry.calories,
            protein_g=total.protein_g + entry.protein_g,
            carbs_g=total.carbs_g + entry.carbs_g,
            fat_g=total.fat_g + entry.fat_g,
        )
    return total
