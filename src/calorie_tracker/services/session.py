"""Tracker session: the committed application state and its persistence."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from calorie_tracker.domain.state import AppState, Message, SelectDate
from calorie_tracker.services.log_store import new_entry_id, reduce
from calorie_tracker.services.persistence import SnapshotRepository

_logger = logging.getLogger(__name__)


@dataclass
class TrackerSession:
    """Holds the current state and commits changes only once they are saved."""

    repository: SnapshotRepository
    state: AppState
    id_factory: Callable[[], str] = new_entry_id
    _generation: int = field(default=0, init=False)

    @classmethod
    def load(
        cls,
        repository: SnapshotRepository,
        selected_date: date,
        id_factory: Callable[[], str] = new_entry_id,
    ) -> "TrackerSession":
        """Build a session from the stored snapshots."""
        state = AppState(
            entries=repository.load_entries(),
            profile=repository.load_profile(),
            selected_date=selected_date,
        )
        _logger.info("Loaded %s food log entries", len(state.entries))
        return cls(repository=repository, state=state, id_factory=id_factory)

    def dispatch(self, message: Message) -> AppState:
        """Reduce, persist the changed snapshots, then commit the new state."""
        current = self.state
        updated = reduce(current, message, id_factory=self.id_factory)
        if updated.entries is not current.entries:
            self.repository.save_entries(updated.entries)
        if updated.profile is not current.profile:
            self.repository.save_profile(updated.profile)
        self.state = updated
        if isinstance(message, SelectDate):
            self._generation += 1
        return updated

    def begin_request(self) -> int:
        """Start an AI request and return its generation token."""
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        """Return whether no newer request or date change superseded ``token``."""
        return token == self._generation

    def dispatch_if_current(self, token: int, message: Message) -> AppState | None:
        """Dispatch only when ``token`` is still current."""
        if not self.is_current(token):
            _logger.info(
                "Discarding stale result (token=%s, current=%s)",
                token,
                self._generation,
            )
            return None
        return self.dispatch(message)
