"""Food log state transitions.

State is immutable. Every change goes through :func:`reduce`, which returns
a new :class:`AppState` or raises before anything is changed.
"""

from collections.abc import Callable
from dataclasses import replace
from datetime import date
from uuid import uuid4

from calorie_tracker.domain.errors import EntryNotFoundError, InvalidInputError
from calorie_tracker.domain.models import FoodDraft, FoodLogEntry, UserProfile
from calorie_tracker.domain.state import (
    AddEntries,
    AppState,
    ApplyMacroSplit,
    ApplyTdeeEstimate,
    DeleteEntry,
    Message,
    ReplaceEntryFood,
    RescaleEntry,
    SelectDate,
    UpdateEntry,
    UpdateProfile,
)
from calorie_tracker.services.goals import macro_goal_from_percentages
from calorie_tracker.services.scaling import replace_entry_food, rescale_entry
from calorie_tracker.services.stats import entries_for


def new_entry_id() -> str:
    """Return a fresh opaque entry identifier."""
    return uuid4().hex


def reduce(  # noqa: PLR0911
    state: AppState,
    message: Message,
    *,
    id_factory: Callable[[], str] = new_entry_id,
) -> AppState:
    """Apply a message and return the resulting state."""
    if isinstance(message, AddEntries):
        added = tuple(
            _entry_from_draft(draft, id_factory(), state.selected_date)
            for draft in message.drafts
        )
        return replace(state, entries=state.entries + added)
    if isinstance(message, UpdateEntry):
        _validate_entry(message.entry)
        return _replace_entry(state, message.entry.id, lambda _: message.entry)
    if isinstance(message, RescaleEntry):
        return _replace_entry(
            state,
            message.entry_id,
            lambda entry: rescale_entry(entry, message.weight_g),
        )
    if isinstance(message, ReplaceEntryFood):
        return _replace_entry(
            state,
            message.entry_id,
            lambda entry: replace_entry_food(entry, message.food),
        )
    if isinstance(message, DeleteEntry):
        find_entry(state, message.entry_id)
        remaining = tuple(e for e in state.entries if e.id != message.entry_id)
        return replace(state, entries=remaining)
    if isinstance(message, SelectDate):
        return replace(state, selected_date=message.day)
    if isinstance(message, UpdateProfile):
        validate_profile(message.profile)
        return replace(state, profile=message.profile)
    if isinstance(message, ApplyMacroSplit):
        macro_goal = macro_goal_from_percentages(
            state.profile.daily_goal, message.split
        )
        return replace(state, profile=replace(state.profile, macro_goal=macro_goal))
    if isinstance(message, ApplyTdeeEstimate):
        estimate = message.estimate
        profile = replace(
            state.profile,
            daily_goal=estimate.suggested_daily_goal,
            maintenance_calories=estimate.maintenance_calories,
            weekly_goal=estimate.weekly_goal,
        )
        validate_profile(profile)
        return replace(state, profile=profile)
    raise TypeError(f"Unsupported message: {type(message).__name__}")


def entries_on(state: AppState, day: date | None = None) -> list[FoodLogEntry]:
    """Return entries of ``day`` (default: the selected date) in insertion order."""
    return entries_for(state.entries, day or state.selected_date)


def find_entry(state: AppState, entry_id: str) -> FoodLogEntry:
    """Return the entry with ``entry_id`` or raise ``EntryNotFoundError``."""
    for entry in state.entries:
        if entry.id == entry_id:
            return entry
    raise EntryNotFoundError(entry_id)


def validate_profile(profile: UserProfile) -> None:
    """Reject profiles with non-positive goals or negative macro targets."""
    if profile.current_weight_kg <= 0 or profile.goal_weight_kg <= 0:
        raise InvalidInputError("Weights must be positive.")
    if profile.daily_goal <= 0:
        raise InvalidInputError("Daily calorie goal must be positive.")
    macros = profile.macro_goal
    if min(macros.protein_g, macros.carbs_g, macros.fat_g) < 0:
        raise InvalidInputError("Macro goals cannot be negative.")
    for label, value in (("Age", profile.age), ("Height", profile.height_cm)):
        if value is not None and value <= 0:
            raise InvalidInputError(f"{label} must be positive.")


def _validate_entry(entry: FoodLogEntry) -> None:
    if not entry.name.strip():
        raise InvalidInputError("Food name cannot be empty.")
    if entry.weight_g <= 0:
        raise InvalidInputError("Weight must be positive.")
    if entry.calories < 0 or min(entry.protein_g, entry.carbs_g, entry.fat_g) < 0:
        raise InvalidInputError("Calories and macros cannot be negative.")


def _entry_from_draft(draft: FoodDraft, entry_id: str, day: date) -> FoodLogEntry:
    entry = FoodLogEntry(
        id=entry_id,
        name=draft.name,
        meal_type=draft.meal_type,
        date=day,
        weight_g=draft.weight_g,
        calories=draft.calories,
        protein_g=draft.protein_g,
        carbs_g=draft.carbs_g,
        fat_g=draft.fat_g,
        base_calories=draft.base_calories,
        base_protein_g=draft.base_protein_g,
        base_carbs_g=draft.base_carbs_g,
        base_fat_g=draft.base_fat_g,
    )
    _validate_entry(entry)
    return entry


def _replace_entry(
    state: AppState,
    entry_id: str,
    update: Callable[[FoodLogEntry], FoodLogEntry],
) -> AppState:
    updated = update(find_entry(state, entry_id))
    entries = tuple(updated if e.id == entry_id else e for e in state.entries)
    return replace(state, entries=entries)
