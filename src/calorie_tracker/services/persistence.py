"""Snapshot persistence over a key-value store."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from calorie_tracker.domain.errors import PersistenceError
from calorie_tracker.domain.models import (
    DEFAULT_PROFILE,
    ActivityLevel,
    FoodLogEntry,
    Gender,
    MacroGoal,
    MealType,
    UserProfile,
    WeeklyGoal,
)
from calorie_tracker.domain.nutrition import MacroProfile
from calorie_tracker.services.scaling import base_from_portion

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String key-value storage."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    def set(self, key: str, value: str) -> None:
        """Store a value under the key."""


class _StoredModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoredFoodItem(_StoredModel):
    """Persisted food log entry."""

    id: str
    name: str
    weight: float = Field(gt=0)
    calories: float
    protein: float
    carbs: float
    fat: float
    meal_type: MealType
    date: date
    base_calories: float | None = None
    base_protein: float | None = None
    base_carbs: float | None = None
    base_fat: float | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _date_prefix(cls, value: object) -> object:
        # Older snapshots stored full ISO timestamps.
        if isinstance(value, str):
            return value[:10]
        return value


_FOOD_ITEMS = TypeAdapter(list[StoredFoodItem])


class StoredMacros(_StoredModel):
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)


class StoredProfile(_StoredModel):
    """Persisted user profile."""

    current_weight: float = Field(gt=0)
    goal_weight: float = Field(gt=0)
    daily_goal: float = Field(gt=0)
    macro_goal: StoredMacros
    age: float | None = Field(default=None, gt=0)
    gender: Gender | None = None
    height: float | None = Field(default=None, gt=0)
    activity_level: ActivityLevel | None = None
    maintenance_calories: float | None = None
    weekly_goal: WeeklyGoal | None = None


@dataclass
class SnapshotRepository:
    """Reads and writes the food log and profile snapshots."""

    store: KeyValueStore
    entries_key: str = "foodItems"
    profile_key: str = "userProfile"

    def load_entries(self) -> tuple[FoodLogEntry, ...]:
        """Return stored entries, or an empty log when missing or malformed."""
        raw = self.store.get(self.entries_key)
        if raw is None:
            return ()
        try:
            stored = _FOOD_ITEMS.validate_json(raw)
        except ValidationError as exc:
            _logger.warning(
                "Discarding malformed food log snapshot: %s", exc.error_count()
            )
            return ()
        return tuple(_entry_from_stored(item) for item in stored)

    def load_profile(self) -> UserProfile:
        """Return the stored profile, or the default when missing or malformed."""
        raw = self.store.get(self.profile_key)
        if raw is None:
            return DEFAULT_PROFILE
        try:
            stored = StoredProfile.model_validate_json(raw)
        except ValidationError as exc:
            _logger.warning(
                "Discarding malformed profile snapshot: %s", exc.error_count()
            )
            return DEFAULT_PROFILE
        return _profile_from_stored(stored)

    def save_entries(self, entries: tuple[FoodLogEntry, ...]) -> None:
        """Persist the full food log."""
        stored = [_entry_to_stored(entry) for entry in entries]
        self._write(
            self.entries_key,
            _FOOD_ITEMS.dump_json(stored, by_alias=True).decode("utf-8"),
        )

    def save_profile(self, profile: UserProfile) -> None:
        """Persist the user profile."""
        stored = _profile_to_stored(profile)
        self._write(
            self.profile_key,
            stored.model_dump_json(by_alias=True, exclude_none=True),
        )

    def _write(self, key: str, value: str) -> None:
        try:
            self.store.set(key, value)
        except Exception as exc:
            _logger.exception("Failed to persist snapshot", extra={"key": key})
            raise PersistenceError(f"Could not save {key}") from exc


def _entry_from_stored(item: StoredFoodItem) -> FoodLogEntry:
    stored_base = (item.base_calories, item.base_protein, item.base_carbs, item.base_fat)
    if None in stored_base:
        # Entries logged without base values get them from the portion.
        base = base_from_portion(
            MacroProfile(item.calories, item.protein, item.carbs, item.fat),
            item.weight,
        )
    else:
        base = MacroProfile(*stored_base)
    return FoodLogEntry(
        id=item.id,
        name=item.name,
        meal_type=item.meal_type,
        date=item.date,
        weight_g=item.weight,
        calories=item.calories,
        protein_g=item.protein,
        carbs_g=item.carbs,
        fat_g=item.fat,
        base_calories=base.calories,
        base_protein_g=base.protein_g,
        base_carbs_g=base.carbs_g,
        base_fat_g=base.fat_g,
    )


def _entry_to_stored(entry: FoodLogEntry) -> StoredFoodItem:
    return StoredFoodItem(
        id=entry.id,
        name=entry.name,
        weight=entry.weight_g,
        calories=entry.calories,
        protein=entry.protein_g,
        carbs=entry.carbs_g,
        fat=entry.fat_g,
        meal_type=entry.meal_type,
        date=entry.date,
        base_calories=entry.base_calories,
        base_protein=entry.base_protein_g,
        base_carbs=entry.base_carbs_g,
        base_fat=entry.base_fat_g,
    )


def _profile_from_stored(stored: StoredProfile) -> UserProfile:
    return UserProfile(
        current_weight_kg=stored.current_weight,
        goal_weight_kg=stored.goal_weight,
        daily_goal=stored.daily_goal,
        macro_goal=MacroGoal(
            protein_g=stored.macro_goal.protein,
            carbs_g=stored.macro_goal.carbs,
            fat_g=stored.macro_goal.fat,
        ),
        age=stored.age,
        gender=stored.gender,
        height_cm=stored.height,
        activity_level=stored.activity_level,
        maintenance_calories=stored.maintenance_calories,
        weekly_goal=stored.weekly_goal,
    )


def _profile_to_stored(profile: UserProfile) -> StoredProfile:
    return StoredProfile(
        current_weight=profile.current_weight_kg,
        goal_weight=profile.goal_weight_kg,
        daily_goal=profile.daily_goal,
        macro_goal=StoredMacros(
            protein=profile.macro_goal.protein_g,
            carbs=profile.macro_goal.carbs_g,
            fat=profile.macro_goal.fat_g,
        ),
        age=profile.age,
        gender=profile.gender,
        height=profile.height_cm,
        activity_level=profile.activity_level,
        maintenance_calories=profile.maintenance_calories,
        weekly_goal=profile.weekly_goal,
    )
