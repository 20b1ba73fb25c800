"""Energy expenditure domain models."""

from dataclasses import dataclass

from calorie_tracker.domain.models import ActivityLevel, Gender, WeeklyGoal


@dataclass(frozen=True)
class BodyMetrics:
    """Inputs for a basal metabolic rate estimate."""

    weight_kg: float | None
    height_cm: float | None
    age: float | None
    gender: Gender | None
    activity_level: ActivityLevel | None


@dataclass(frozen=True)
class TdeeEstimate:
    """Maintenance estimate and the suggested daily goal."""

    bmr: float
    maintenance_calories: int
    weekly_goal: WeeklyGoal
    adjustment: int
    suggested_daily_goal: int
