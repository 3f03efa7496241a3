import math
import re
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")

WORKOUT_TYPES = (
    "ウォーキング",
    "ランニング",
    "通学の徒歩",
    "筋トレ",
    "なわとび",
)


def now_ms() -> int:
    """Return the current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class WorkoutEntry(BaseModel):
    """A single recorded workout. Instances are immutable."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    date: str = ""
    type: str = ""
    minutes: int = 0
    value: int = 0
    note: str = ""
    created_at: int = Field(alias="createdAt")
    version: int = 1

    @field_validator("id")
    @classmethod
    def _id_required(cls, v: str) -> str:
        if not v:
            raise ValueError("id is required")
        return v

    @field_validator("created_at")
    @classmethod
    def _created_at_required(cls, v: int) -> int:
        if not v:
            raise ValueError("createdAt is required")
        return v

    def check(self) -> ValidationResult:
        """Check field rules and collect every violation."""
        errors: List[str] = []
        warnings: List[str] = []
        if not self.type:
            errors.append("type is required")
        if not self.date:
            errors.append("date is required")
        elif not DATE_PATTERN.fullmatch(self.date):
            errors.append("date must be in YYYY-MM-DD format")
        if self.minutes < 0:
            errors.append("minutes must be 0 or greater")
        if self.value < 0:
            errors.append("value must be 0 or greater")
        if self.minutes == 0 and self.value == 0:
            warnings.append("consider entering minutes or a count/distance value")
        return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_record(cls, data: dict) -> "WorkoutEntry":
        return cls.model_validate(data)


class IdGenerator:
    """Produce entry ids from a millisecond timestamp plus random bits."""

    @staticmethod
    def generate(timestamp: Optional[int] = None) -> str:
        ts = now_ms() if timestamp is None else timestamp
        return f"{ts}-{uuid.uuid4().hex[:12]}"


class WorkoutEntryFactory:
    """Build ``WorkoutEntry`` objects from raw form input."""

    def __init__(self, clock: Callable[[], int] = now_ms) -> None:
        self.clock = clock

    @staticmethod
    def parse_number(raw) -> int:
        """Parse ``raw`` like ``parseInt(raw, 10)``; invalid or negative gives 0."""
        if raw is None or isinstance(raw, bool):
            return 0
        if isinstance(raw, int):
            return max(0, raw)
        if isinstance(raw, float):
            if not math.isfinite(raw):
                return 0
            return max(0, int(raw))
        match = _LEADING_INT.match(str(raw))
        if not match:
            return 0
        return max(0, int(match.group(1)))

    @staticmethod
    def sanitize_note(note) -> str:
        return str(note or "").strip()

    def create(self, form_data: dict) -> WorkoutEntry:
        created_at = self.clock()
        return WorkoutEntry(
            id=IdGenerator.generate(created_at),
            date=form_data.get("date") or "",
            type=form_data.get("type") or "",
            minutes=self.parse_number(form_data.get("minutes")),
            value=self.parse_number(form_data.get("value")),
            note=self.sanitize_note(form_data.get("note")),
            created_at=created_at,
        )
