"""Tests for snapshot persistence."""

import json
from dataclasses import replace
from datetime import date

import pytest

from calorie_tracker.domain.errors import PersistenceError
from calorie_tracker.domain.models import DEFAULT_PROFILE, FoodLogEntry
from calorie_tracker.services.persistence import SnapshotRepository
from tests.conftest import InMemoryKeyValueStore

ENTRY = FoodLogEntry(
    id="entry-1",
    name="Greek yogurt",
    meal_type="Breakfast",
    date=date(2024, 5, 10),
    weight_g=150,
    calories=146,
    protein_g=15,
    carbs_g=6,
    fat_g=7,
    base_calories=97,
    base_protein_g=10,
    base_carbs_g=3.6,
    base_fat_g=5,
)


def test_missing_keys_load_defaults(repository: SnapshotRepository) -> None:
    assert repository.load_entries() == ()
    assert repository.load_profile() == DEFAULT_PROFILE


def test_malformed_snapshots_fall_back_to_defaults() -> None:
    store = InMemoryKeyValueStore(
        values={"foodItems": "{not json", "userProfile": '{"dailyGoal": "lots"}'}
    )
    repository = SnapshotRepository(store)

    assert repository.load_entries() == ()
    assert repository.load_profile() == DEFAULT_PROFILE


def test_entries_with_wrong_shape_are_discarded() -> None:
    store = InMemoryKeyValueStore(values={"foodItems": '[{"id": "1", "name": "x"}]'})

    assert SnapshotRepository(store).load_entries() == ()


def test_entries_are_stored_with_camel_case_keys(
    repository: SnapshotRepository, store: InMemoryKeyValueStore
) -> None:
    repository.save_entries((ENTRY,))

    stored = json.loads(store.values["foodItems"])
    assert stored[0]["mealType"] == "Breakfast"
    assert stored[0]["date"] == "2024-05-10"
    assert stored[0]["weight"] == 150
    assert stored[0]["baseCarbs"] == 3.6
    assert repository.load_entries() == (ENTRY,)


def test_legacy_entries_get_base_values_and_day() -> None:
    legacy = [
        {
            "id": "old-1",
            "name": "Toast",
            "weight": 50,
            "calories": 130,
            "protein": 4,
            "carbs": 24,
            "fat": 2,
            "mealType": "Breakfast",
            "date": "2024-05-09T07:45:00.000Z",
        }
    ]
    store = InMemoryKeyValueStore(values={"foodItems": json.dumps(legacy)})

    (entry,) = SnapshotRepository(store).load_entries()

    assert entry.date == date(2024, 5, 9)
    assert entry.base_calories == pytest.approx(260)
    assert entry.base_carbs_g == pytest.approx(48)


def test_profile_round_trip(
    repository: SnapshotRepository, store: InMemoryKeyValueStore
) -> None:
    profile = replace(
        DEFAULT_PROFILE, daily_goal=1900, maintenance_calories=2400, weekly_goal="lose1"
    )

    repository.save_profile(profile)

    stored = json.loads(store.values["userProfile"])
    assert stored["dailyGoal"] == 1900
    assert stored["macroGoal"] == {"protein": 150, "carbs": 250, "fat": 70}
    assert stored["activityLevel"] == "moderate"
    assert repository.load_profile() == profile


def test_custom_keys_are_used() -> None:
    store = InMemoryKeyValueStore()
    repository = SnapshotRepository(store, entries_key="log", profile_key="me")

    repository.save_entries((ENTRY,))
    repository.save_profile(DEFAULT_PROFILE)

    assert set(store.values) == {"log", "me"}


def test_write_failure_raises_persistence_error() -> None:
    repository = SnapshotRepository(InMemoryKeyValueStore(fail_writes=True))

    with pytest.raises(PersistenceError):
        repository.save_entries((ENTRY,))
