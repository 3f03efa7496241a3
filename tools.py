import csv
import datetime
import io
import json
from typing import Iterable

from workout_entry import WorkoutEntry


class DateFormatter:
    """Date helpers producing ``YYYY-MM-DD`` strings."""

    @staticmethod
    def to_iso_date(value: datetime.date | datetime.datetime | str | int | float) -> str:
        """Return ``value`` formatted as ``YYYY-MM-DD``.

        Integers and floats are treated as epoch milliseconds in local time.
        """
        if isinstance(value, datetime.datetime):
            return value.date().isoformat()
        if isinstance(value, datetime.date):
            return value.isoformat()
        if isinstance(value, (int, float)):
            return datetime.datetime.fromtimestamp(value / 1000).date().isoformat()
        return datetime.datetime.fromisoformat(value).date().isoformat()

    @classmethod
    def today(cls) -> str:
        return cls.to_iso_date(datetime.date.today())


class EntryExporter:
    """Serialize entries for download or backup."""

    CSV_FIELDS = ["id", "date", "type", "minutes", "value", "note", "createdAt", "version"]

    @classmethod
    def to_csv(cls, entries: Iterable[WorkoutEntry]) -> str:
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=cls.CSV_FIELDS)
        writer.writeheader()
        for entry in entries:
            writer.writerow(entry.to_record())
        return buf.getvalue()

    @staticmethod
    def to_json(entries: Iterable[WorkoutEntry]) -> str:
        return json.dumps(
            [e.to_record() for e in entries], ensure_ascii=False, indent=2
        )
