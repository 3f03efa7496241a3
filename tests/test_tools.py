import csv
import datetime
import io
import json
import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from tools import DateFormatter, EntryExporter
from workout_entry import WorkoutEntry


class DateFormatterTestCase(unittest.TestCase):
    def test_to_iso_date(self) -> None:
        self.assertEqual(DateFormatter.to_iso_date(datetime.date(2024, 1, 5)), "2024-01-05")
        self.assertEqual(
            DateFormatter.to_iso_date(datetime.datetime(2024, 11, 15, 23, 59)), "2024-11-15"
        )
        self.assertEqual(DateFormatter.to_iso_date("2024-11-15T08:00:00"), "2024-11-15")
        ts = datetime.datetime(2024, 3, 2, 12, 0).timestamp() * 1000
        self.assertEqual(DateFormatter.to_iso_date(ts), "2024-03-02")

    def test_today(self) -> None:
        self.assertEqual(DateFormatter.today(), datetime.date.today().isoformat())


class EntryExporterTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.entries = [
            WorkoutEntry(id="a", date="2024-11-15", type="ランニング", minutes=30, value=5, note="朝, 公園", created_at=2),
            WorkoutEntry(id="b", date="2024-11-14", type="筋トレ", created_at=1),
        ]

    def test_csv(self) -> None:
        rows = list(csv.DictReader(io.StringIO(EntryExporter.to_csv(self.entries))))
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0]["note"], "朝, 公園")
        self.assertEqual(rows[0]["createdAt"], "2")
        self.assertEqual(list(rows[0].keys()), EntryExporter.CSV_FIELDS)

    def test_json(self) -> None:
        data = json.loads(EntryExporter.to_json(self.entries))
        self.assertEqual(data[1]["id"], "b")
        self.assertIn("ランニング", EntryExporter.to_json(self.entries))


if __name__ == "__main__":
    unittest.main()
