"""Domain exceptions."""


class TrackerError(Exception):
    """Base exception for calorie tracker errors."""


class InvalidInputError(TrackerError, ValueError):
    """Input rejected before any state change."""


class EntryNotFoundError(TrackerError, LookupError):
    """No log entry exists for the given id."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(f"Food log entry {entry_id} not found")
        self.entry_id = entry_id


class AIServiceError(TrackerError):
    """The language model call failed or returned unusable data."""


class PersistenceError(TrackerError):
    """A snapshot could not be written to the key-value store."""
