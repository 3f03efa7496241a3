import logging
import os
from typing import Optional, Union

from fastapi import APIRouter, FastAPI, HTTPException
from pydantic import BaseModel

from config import APP_VERSION, DEFAULT_DB_PATH, DEFAULT_YAML_PATH, load_settings
from db import EntryRepository, KeyValueStore, ThemeRepository
from errors import EntryValidationError, StorageError, StorageReadError, StorageWriteError
from workout_service import WorkoutService

logger = logging.getLogger(__name__)


class EntryForm(BaseModel):
    """Raw form input; numbers may arrive as strings."""

    date: Optional[str] = ""
    type: Optional[str] = ""
    minutes: Union[int, float, str, None] = 0
    value: Union[int, float, str, None] = 0
    note: Optional[str] = ""


class WorkoutLogAPI:
    """Provides REST endpoints for the workout log."""

    def __init__(
        self, db_path: str = DEFAULT_DB_PATH, yaml_path: str = DEFAULT_YAML_PATH
    ) -> None:
        self.db_path = db_path
        self.settings = load_settings(yaml_path)
        self.store = KeyValueStore(db_path, self.settings.quota_bytes)
        self.entries = EntryRepository(self.store, self.settings.storage_key)
        self.themes = ThemeRepository(self.store, self.settings.theme_key)
        self.service = WorkoutService(self.entries)
        self.app = FastAPI(
            title="Workout Log API",
            description="REST API for recording workout entries",
            version=APP_VERSION,
        )
        self._setup_routes()

    @staticmethod
    def _storage_failure(exc: Exception) -> HTTPException:
        logger.error("storage failure: %s", exc)
        if isinstance(exc, StorageWriteError):
            return HTTPException(status_code=507, detail=str(exc))
        return HTTPException(status_code=500, detail=str(exc))

    def _setup_routes(self) -> None:
        entries_router = APIRouter(prefix="/entries", tags=["Entries"])
        settings_router = APIRouter(prefix="/settings", tags=["Settings"])

        @self.app.get(
            "/health",
            summary="Health check",
            description="Verify API and storage connectivity.",
        )
        def health():
            try:
                self.entries.read_all()
                return {"status": "ok"}
            except StorageReadError as e:
                raise HTTPException(status_code=500, detail=str(e))

        @entries_router.get("")
        def list_entries(date: Optional[str] = None):
            try:
                return [e.to_record() for e in self.service.get_by_date(date)]
            except StorageReadError as e:
                raise self._storage_failure(e)

        @entries_router.get("/summary")
        def entries_summary(date: Optional[str] = None):
            try:
                return self.service.summary(date)
            except StorageReadError as e:
                raise self._storage_failure(e)

        @entries_router.get("/dates")
        def entry_dates():
            try:
                return self.service.dates()
            except StorageReadError as e:
                raise self._storage_failure(e)

        @entries_router.get("/{entry_id}")
        def get_entry(entry_id: str):
            try:
                entry = self.service.get(entry_id)
            except StorageReadError as e:
                raise self._storage_failure(e)
            if entry is None:
                raise HTTPException(status_code=404, detail="entry not found")
            return entry.to_record()

        @entries_router.post("")
        def add_entry(form: EntryForm):
            try:
                entry = self.service.add(form.model_dump())
            except EntryValidationError as e:
                raise HTTPException(
                    status_code=400,
                    detail={"errors": e.errors, "warnings": e.warnings},
                )
            except (StorageReadError, StorageWriteError) as e:
                raise self._storage_failure(e)
            return entry.to_record()

        @entries_router.delete("/{entry_id}")
        def delete_entry(entry_id: str):
            try:
                self.service.delete(entry_id)
            except (StorageReadError, StorageWriteError) as e:
                raise self._storage_failure(e)
            return {"status": "deleted"}

        @entries_router.delete("")
        def clear_entries():
            try:
                self.service.clear_all()
            except StorageError as e:
                raise self._storage_failure(e)
            return {"status": "cleared"}

        @settings_router.get("/theme")
        def get_theme():
            try:
                return {"theme": self.themes.get_theme()}
            except StorageError as e:
                raise self._storage_failure(e)

        @settings_router.put("/theme")
        def set_theme(theme: str):
            try:
                self.themes.set_theme(theme)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            except StorageError as e:
                raise self._storage_failure(e)
            return {"theme": theme}

        self.app.include_router(entries_router)
        self.app.include_router(settings_router)


if __name__ == "__main__":
    import uvicorn

    api = WorkoutLogAPI(
        db_path=os.environ.get("DB_PATH", DEFAULT_DB_PATH),
        yaml_path=os.environ.get("YAML_PATH", DEFAULT_YAML_PATH),
    )
    uvicorn.run(api.app)
