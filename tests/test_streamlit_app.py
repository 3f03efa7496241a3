import os
import sys
import unittest

from streamlit.testing.v1 import AppTest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(ROOT)
from db import EntryRepository, KeyValueStore, ThemeRepository
from workout_service import WorkoutService


class StreamlitAppTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = os.path.abspath("test_gui.db")
        self.yaml_path = os.path.abspath("test_gui_settings.yaml")
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)
        os.environ["DB_PATH"] = self.db_path
        os.environ["YAML_PATH"] = self.yaml_path
        self.store = KeyValueStore(self.db_path)
        self.service = WorkoutService(EntryRepository(self.store))
        self.at = AppTest.from_file(os.path.join(ROOT, "streamlit_app.py"), default_timeout=20)

    def tearDown(self) -> None:
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)
        os.environ.pop("DB_PATH", None)
        os.environ.pop("YAML_PATH", None)

    def test_renders_empty_log(self) -> None:
        self.at.run()
        self.assertFalse(self.at.exception)
        self.assertEqual(self.at.title[0].value, "Workout Log")
        self.assertIn("No entries", [m.value for m in self.at.markdown])

    def test_save_entry(self) -> None:
        self.at.run()
        self.at.selectbox(key="form_type").select("ランニング")
        self.at.text_input(key="form_minutes").input("30")
        self.at.text_input(key="form_value").input("5")
        self.at.text_area(key="form_note").input("test")
        self.at.button(key="save_entry").click().run()
        self.assertFalse(self.at.exception)
        entries = self.service.get_all()
        self.assertEqual(len(entries), 1)
        self.assertEqual((entries[0].minutes, entries[0].value, entries[0].note), (30, 5, "test"))
        self.assertEqual(entries[0].type, "ランニング")
        self.assertEqual(self.at.text_input(key="form_minutes").value, "")

    def test_zero_values_show_info(self) -> None:
        self.at.run()
        self.at.button(key="save_entry").click().run()
        self.assertEqual(len(self.service.get_all()), 1)
        self.assertEqual(len(self.at.info), 1)

    def test_filter_and_delete(self) -> None:
        first = self.service.add({"date": "2024-11-15", "type": "ランニング", "minutes": "30"})
        second = self.service.add({"date": "2024-11-14", "type": "筋トレ", "minutes": "10"})
        self.at.run()
        self.at.selectbox(key="filter_date").select("2024-11-14").run()
        delete_keys = [b.key for b in self.at.button if b.key and b.key.startswith("delete_")]
        self.assertEqual(delete_keys, [f"delete_{second.id}"])
        self.at.button(key=f"delete_{second.id}").click().run()
        self.assertEqual([e.id for e in self.service.get_all()], [first.id])

    def test_clear_all_requires_confirmation(self) -> None:
        self.service.add({"date": "2024-11-15", "type": "ランニング", "minutes": "30"})
        self.at.run()
        self.at.button(key="clear_all").click().run()
        self.assertEqual(len(self.service.get_all()), 1)
        self.at.checkbox(key="confirm_clear").check().run()
        self.at.button(key="clear_all").click().run()
        self.assertEqual(self.service.get_all(), [])
        self.assertIsNone(self.store.get_item("ichikaWorkoutLogEntries"))

    def test_corrupt_storage_shows_error(self) -> None:
        self.store.set_item("ichikaWorkoutLogEntries", "invalid json")
        self.at.run()
        self.assertFalse(self.at.exception)
        self.assertEqual(len(self.at.error), 1)
        self.assertIn("failed to read entries", self.at.error[0].value)
        self.assertIn("No entries", [m.value for m in self.at.markdown])
        self.assertEqual(self.store.get_item("ichikaWorkoutLogEntries"), "invalid json")

    def test_dark_mode_toggle(self) -> None:
        self.at.run()
        self.at.toggle(key="dark_mode").set_value(True).run()
        self.assertEqual(ThemeRepository(self.store).get_theme(), "dark")


if __name__ == "__main__":
    unittest.main()
