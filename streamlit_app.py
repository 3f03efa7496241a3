import datetime
import os

import pandas as pd
import streamlit as st

from config import DEFAULT_DB_PATH, DEFAULT_YAML_PATH, configure_logging, load_settings
from controller import ViewContext, WorkoutController
from db import EntryRepository, KeyValueStore, ThemeRepository
from errors import StorageError
from workout_entry import WORKOUT_TYPES, WorkoutEntry
from workout_service import WorkoutService

ALL_DATES = "All dates"


class WorkoutLogApp:
    """Streamlit application for the workout log."""

    def __init__(
        self, db_path: str = DEFAULT_DB_PATH, yaml_path: str = DEFAULT_YAML_PATH
    ) -> None:
        self.settings = load_settings(yaml_path)
        configure_logging(self.settings.log_level)
        self.store = KeyValueStore(db_path, self.settings.quota_bytes)
        self.entries_repo = EntryRepository(self.store, self.settings.storage_key)
        self.themes = ThemeRepository(self.store, self.settings.theme_key)
        self.service = WorkoutService(self.entries_repo)
        self.theme = self.themes.get_theme()
        self._state_init()
        self.controller = WorkoutController(
            self.service,
            ViewContext(
                render=self._collect_entries,
                show_error=lambda msg: self._flash("error", msg),
                show_info=lambda msg: self._flash("info", msg),
                confirm=lambda msg: bool(st.session_state.get("confirm_clear")),
            ),
        )

    def _state_init(self) -> None:
        if "visible_entries" not in st.session_state:
            st.session_state.visible_entries = []
        if "flash" not in st.session_state:
            st.session_state.flash = []
        if "filter_date" not in st.session_state:
            st.session_state.filter_date = self.settings.date_filter_default or ALL_DATES

    def _collect_entries(self, entries: list[WorkoutEntry]) -> None:
        st.session_state.visible_entries = entries

    def _flash(self, level: str, message: str) -> None:
        if (level, message) not in st.session_state.flash:
            st.session_state.flash.append((level, message))

    def _apply_theme(self) -> None:
        if self.theme == "dark":
            st.markdown(
                """
                <style>
                body {
                    background-color: #121212;
                    color: #eee;
                }
                :root {
                    --section-bg: #1f1f1f;
                    --border-color: #444444;
                }
                </style>
                """,
                unsafe_allow_html=True,
            )
        else:
            st.markdown(
                """
                <style>
                :root {
                    --section-bg: #fafafa;
                    --border-color: #cccccc;
                }
                </style>
                """,
                unsafe_allow_html=True,
            )

    def _toggle_theme(self) -> None:
        self.theme = "dark" if st.session_state.dark_mode else "light"
        try:
            self.themes.set_theme(self.theme)
        except StorageError as e:
            self._flash("error", str(e))

    def _submit_form(self) -> None:
        date = st.session_state.form_date
        saved = self.controller.submit_form(
            {
                "date": date.isoformat() if date else "",
                "type": st.session_state.form_type,
                "minutes": st.session_state.form_minutes,
                "value": st.session_state.form_value,
                "note": st.session_state.form_note,
            }
        )
        if saved:
            st.session_state.form_minutes = ""
            st.session_state.form_value = ""
            st.session_state.form_note = ""

    def _clear_filter(self) -> None:
        st.session_state.filter_date = ALL_DATES

    def _clear_all(self) -> None:
        if self.controller.request_clear_all():
            st.session_state.filter_date = ALL_DATES
            st.session_state.confirm_clear = False

    def _entry_form(self) -> None:
        st.header("Log Workout")
        st.date_input("Date", value=datetime.date.today(), key="form_date")
        st.selectbox("Type", WORKOUT_TYPES, key="form_type")
        st.text_input("Minutes", key="form_minutes")
        st.text_input("Count / Distance", key="form_value")
        st.text_area("Note", key="form_note")
        st.button("Save", key="save_entry", on_click=self._submit_form)

    def _show_flash(self) -> None:
        for level, message in st.session_state.flash:
            if level == "error":
                st.error(message)
            else:
                st.info(message)
        st.session_state.flash = []

    def _filter_controls(self) -> None:
        st.header("History")
        try:
            dates = self.service.dates()
        except StorageError as e:
            self._flash("error", str(e))
            dates = []
        options = [ALL_DATES] + dates
        if st.session_state.filter_date not in options:
            st.session_state.filter_date = ALL_DATES
        st.selectbox("Filter by date", options, key="filter_date")
        st.button("Clear filter", key="clear_filter", on_click=self._clear_filter)

    def _entry_list(self) -> None:
        entries = st.session_state.visible_entries
        if not entries:
            st.write("No entries")
            return
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        "Date": e.date,
                        "Type": e.type,
                        "Minutes": e.minutes,
                        "Count / Distance": e.value,
                        "Note": e.note,
                    }
                    for e in entries
                ]
            ),
            hide_index=True,
        )
        for e in entries:
            cols = st.columns([4, 1])
            cols[0].write(f"{e.date} {e.type} {e.minutes} min / {e.value}")
            cols[1].button(
                "Delete",
                key=f"delete_{e.id}",
                on_click=self.controller.request_delete,
                args=(e.id,),
            )

    def _debug_controls(self) -> None:
        with st.expander("Debug"):
            st.checkbox("I understand this deletes every entry", key="confirm_clear")
            st.button("Clear all data", key="clear_all", on_click=self._clear_all)

    def run(self) -> None:
        st.set_page_config(page_title="Workout Log")
        st.toggle("Dark mode", value=self.theme == "dark", key="dark_mode", on_change=self._toggle_theme)
        self._apply_theme()
        st.title("Workout Log")
        self._entry_form()
        self._filter_controls()
        selected = st.session_state.filter_date
        self.controller.request_filter(None if selected == ALL_DATES else selected)
        self._show_flash()
        self._entry_list()
        self._debug_controls()


if __name__ == "__main__":
    db_path = os.environ.get("DB_PATH", DEFAULT_DB_PATH)
    yaml_path = os.environ.get("YAML_PATH", DEFAULT_YAML_PATH)
    WorkoutLogApp(db_path=db_path, yaml_path=yaml_path).run()
