"""Application state and the messages that transform it."""

from dataclasses import dataclass
from datetime import date

from calorie_tracker.domain.energy import TdeeEstimate
from calorie_tracker.domain.models import (
    FoodDraft,
    FoodLogEntry,
    MacroSplit,
    UserProfile,
)
from calorie_tracker.domain.nutrition import CatalogFood


@dataclass(frozen=True)
class AppState:
    """Everything the tracker knows at one point in time."""

    entries: tuple[FoodLogEntry, ...]
    profile: UserProfile
    selected_date: date


@dataclass(frozen=True)
class AddEntries:
    drafts: tuple[FoodDraft, ...]


@dataclass(frozen=True)
class UpdateEntry:
    entry: FoodLogEntry


@dataclass(frozen=True)
class RescaleEntry:
    entry_id: str
    weight_g: float


@dataclass(frozen=True)
class ReplaceEntryFood:
    entry_id: str
    food: CatalogFood


@dataclass(frozen=True)
class DeleteEntry:
    entry_id: str


@dataclass(frozen=True)
class SelectDate:
    day: date


@dataclass(frozen=True)
class UpdateProfile:
    profile: UserProfile


@dataclass(frozen=True)
class ApplyMacroSplit:
    split: MacroSplit


@dataclass(frozen=True)
class ApplyTdeeEstimate:
    estimate: TdeeEstimate


Message = (
    AddEntries
    | UpdateEntry
    | RescaleEntry
    | ReplaceEntryFood
    | DeleteEntry
    | SelectDate
    | UpdateProfile
    | ApplyMacroSplit
    | ApplyTdeeEstimate
)
