import logging
from typing import Callable, List, Optional

from db import EntryStorage
from errors import EntryValidationError
from workout_entry import WorkoutEntry, WorkoutEntryFactory

logger = logging.getLogger(__name__)


class WorkoutService:
    """Query and mutation operations over the stored workout entries.

    Every call re-reads storage; nothing is cached between calls.
    """

    def __init__(
        self, storage: EntryStorage, factory: Optional[WorkoutEntryFactory] = None
    ) -> None:
        self.storage = storage
        self.factory = factory or WorkoutEntryFactory()

    @staticmethod
    def _newest_first(entries: List[WorkoutEntry]) -> List[WorkoutEntry]:
        return sorted(entries, key=lambda e: e.created_at, reverse=True)

    def get_all(self) -> List[WorkoutEntry]:
        return self._newest_first(self.storage.read_all())

    def get_by_date(self, date: Optional[str]) -> List[WorkoutEntry]:
        """Return entries whose ``date`` equals ``date`` exactly, newest first."""
        if not date:
            return self.get_all()
        entries = [e for e in self.storage.read_all() if e.date == date]
        return self._newest_first(entries)

    def get(self, entry_id: str) -> Optional[WorkoutEntry]:
        for entry in self.storage.read_all():
            if entry.id == entry_id:
                return entry
        return None

    def dates(self) -> List[str]:
        return sorted({e.date for e in self.storage.read_all()}, reverse=True)

    def summary(self, date: Optional[str] = None) -> dict:
        entries = self.get_by_date(date)
        return {
            "count": len(entries),
            "total_minutes": sum(e.minutes for e in entries),
            "total_value": sum(e.value for e in entries),
        }

    def add(
        self, form_data: dict, on_warning: Optional[Callable[[str], None]] = None
    ) -> WorkoutEntry:
        """Validate and store a new entry built from ``form_data``.

        Non-blocking warnings are logged and passed to ``on_warning``.
        """
        entry = self.factory.create(form_data)
        result = entry.check()
        if not result.is_valid:
            raise EntryValidationError(result.errors, result.warnings)
        self.storage.transaction(lambda entries: entries + [entry])
        logger.info("added entry %s (%s on %s)", entry.id, entry.type, entry.date)
        for warning in result.warnings:
            logger.warning("entry %s: %s", entry.id, warning)
            if on_warning is not None:
                on_warning(warning)
        return entry

    def delete(self, entry_id: Optional[str]) -> None:
        if not entry_id:
            return
        if all(e.id != entry_id for e in self.storage.read_all()):
            return
        self.storage.transaction(
            lambda entries: [e for e in entries if e.id != entry_id]
        )
        logger.info("deleted entry %s", entry_id)

    def clear_all(self) -> None:
        self.storage.clear()
        logger.info("cleared all entries")
