"""Maintenance calorie estimation (Mifflin-St Jeor)."""

from calorie_tracker.domain.energy import BodyMetrics, TdeeEstimate
from calorie_tracker.domain.errors import InvalidInputError
from calorie_tracker.domain.models import (
    ActivityLevel,
    Gender,
    UserProfile,
    WeeklyGoal,
)
from calorie_tracker.services.scaling import round_half_up

ACTIVITY_FACTORS: dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "veryActive": 1.9,
}

# About 7700 kcal per kg of body mass, spread over a week.
WEEKLY_GOAL_ADJUSTMENTS: dict[str, int] = {
    "lose1": -1100,
    "lose0.75": -825,
    "lose0.5": -550,
    "maintain": 0,
    "gain0.5": 550,
    "gain0.75": 825,
    "gain1": 1100,
}

_GENDER_OFFSETS: dict[str, float] = {"male": 5.0, "female": -161.0}


def metrics_from_profile(
    profile: UserProfile,
    *,
    weight_kg: float | None = None,
    height_cm: float | None = None,
    age: float | None = None,
    gender: Gender | None = None,
    activity_level: ActivityLevel | None = None,
) -> BodyMetrics:
    """Merge explicit metrics with the ones stored on the profile."""
    return BodyMetrics(
        weight_kg=weight_kg if weight_kg is not None else profile.current_weight_kg,
        height_cm=height_cm if height_cm is not None else profile.height_cm,
        age=age if age is not None else profile.age,
        gender=gender if gender is not None else profile.gender,
        activity_level=(
            activity_level if activity_level is not None else profile.activity_level
        ),
    )


def estimate_bmr(metrics: BodyMetrics) -> float:
    """Return the basal metabolic rate in kcal/day."""
    weight = _require_positive("weight", metrics.weight_kg)
    height = _require_positive("height", metrics.height_cm)
    age = _require_positive("age", metrics.age)
    if metrics.gender not in _GENDER_OFFSETS:
        raise InvalidInputError(f"Unknown gender: {metrics.gender}")
    return 10 * weight + 6.25 * height - 5 * age + _GENDER_OFFSETS[metrics.gender]


def estimate_maintenance(metrics: BodyMetrics) -> int:
    """Return the maintenance calories for the activity level."""
    bmr = estimate_bmr(metrics)
    return round_half_up(bmr * _activity_factor(metrics.activity_level))


def estimate_tdee(metrics: BodyMetrics, weekly_goal: WeeklyGoal) -> TdeeEstimate:
    """Estimate maintenance calories and the goal adjusted for a weekly rate."""
    if weekly_goal not in WEEKLY_GOAL_ADJUSTMENTS:
        raise InvalidInputError(f"Unknown weekly goal: {weekly_goal}")
    bmr = estimate_bmr(metrics)
    maintenance = round_half_up(bmr * _activity_factor(metrics.activity_level))
    adjustment = WEEKLY_GOAL_ADJUSTMENTS[weekly_goal]
    return TdeeEstimate(
        bmr=bmr,
        maintenance_calories=maintenance,
        weekly_goal=weekly_goal,
        adjustment=adjustment,
        suggested_daily_goal=maintenance + adjustment,
    )


def _activity_factor(activity_level: str | None) -> float:
    if activity_level not in ACTIVITY_FACTORS:
        raise InvalidInputError(f"Unknown activity level: {activity_level}")
    return ACTIVITY_FACTORS[activity_level]


def _require_positive(label: str, value: float | None) -> float:
    if value is None:
        raise InvalidInputError(f"Missing {label} for the calorie estimate")
    if value <= 0:
        raise InvalidInputError(f"{label.capitalize()} must be positive")
    return float(value)
