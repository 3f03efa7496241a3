import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from errors import EntryValidationError, StorageError
from tools import DateFormatter
from workout_entry import WorkoutEntry
from workout_service import WorkoutService

logger = logging.getLogger(__name__)

CLEAR_ALL_PROMPT = "Delete every stored workout entry?"
CLEARED_MESSAGE = "all entries deleted"


@dataclass
class ViewContext:
    """Callbacks a front end hands to ``WorkoutController``."""

    render: Callable[[List[WorkoutEntry]], None]
    show_error: Callable[[str], None]
    show_info: Callable[[str], None] = lambda message: None
    confirm: Callable[[str], bool] = lambda message: False
    today: Callable[[], str] = field(default=DateFormatter.today)


class WorkoutController:
    """Translate user intents into service calls and report back to the view."""

    def __init__(self, service: WorkoutService, context: ViewContext) -> None:
        self.service = service
        self.context = context
        self.filter_date: Optional[str] = None

    def initialize(self) -> None:
        self.refresh()

    def default_date(self) -> str:
        return self.context.today()

    def refresh(self) -> List[WorkoutEntry]:
        try:
            entries = self.service.get_by_date(self.filter_date)
        except StorageError as e:
            self.context.show_error(str(e))
            entries = []
        self.context.render(entries)
        return entries

    def submit_form(self, form_data: dict) -> bool:
        try:
            self.service.add(form_data, on_warning=self.context.show_info)
        except (EntryValidationError, StorageError) as e:
            logger.info("form rejected: %s", e)
            self.context.show_error(str(e))
            return False
        self.refresh()
        return True

    def request_filter(self, date: Optional[str]) -> None:
        self.filter_date = date or None
        self.refresh()

    def clear_filter(self) -> None:
        self.request_filter(None)

    def request_delete(self, entry_id: str) -> None:
        try:
            self.service.delete(entry_id)
        except StorageError as e:
            self.context.show_error(str(e))
        self.refresh()

    def request_clear_all(self) -> bool:
        if not self.context.confirm(CLEAR_ALL_PROMPT):
            return False
        try:
            self.service.clear_all()
        except StorageError as e:
            self.context.show_error(str(e))
            self.refresh()
            return False
        self.filter_date = None
        self.refresh()
        self.context.show_info(CLEARED_MESSAGE)
        return True
