import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Callable, List, Optional, Protocol, Tuple, runtime_checkable

from pydantic import ValidationError

from errors import QuotaExceededError, StorageReadError, StorageWriteError
from workout_entry import WorkoutEntry

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "ichikaWorkoutLogEntries"
DEFAULT_THEME_KEY = "ichikaThemePreference"
DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "local_storage": (
            """CREATE TABLE local_storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
    }

    def __init__(self, db_path: str = "workout_log.db") -> None:
        self._db_path = db_path
        self._ensure_schema()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        conn.execute(f"DROP TABLE IF EXISTS {table}_old;")
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)
        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(common)
            conn.execute(f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;")
        conn.execute(f"DROP TABLE {table}_old;")


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()


class KeyValueStore(BaseRepository):
    """String key-value store modelled on browser ``localStorage``.

    ``quota_bytes`` caps the total size of all keys and values, counted in
    characters. A quota of 0 disables the check.
    """

    def __init__(
        self, db_path: str = "workout_log.db", quota_bytes: int = DEFAULT_QUOTA_BYTES
    ) -> None:
        super().__init__(db_path)
        self.quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        rows = self.fetch_all("SELECT value FROM local_storage WHERE key = ?;", (key,))
        return rows[0][0] if rows else None

    def set_item(self, key: str, value: str) -> None:
        with self._connection() as conn:
            if self.quota_bytes:
                row = conn.execute(
                    "SELECT COALESCE(SUM(LENGTH(key) + LENGTH(value)), 0) "
                    "FROM local_storage WHERE key != ?;",
                    (key,),
                ).fetchone()
                needed = row[0] + len(key) + len(value)
                if needed > self.quota_bytes:
                    raise QuotaExceededError(
                        f"writing {key!r} needs {needed} bytes, quota is {self.quota_bytes}"
                    )
            conn.execute(
                "INSERT INTO local_storage (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
                (key, value),
            )

    def remove_item(self, key: str) -> None:
        self.execute("DELETE FROM local_storage WHERE key = ?;", (key,))

    def keys(self) -> List[str]:
        return [r[0] for r in self.fetch_all("SELECT key FROM local_storage ORDER BY key;")]

    def used_bytes(self) -> int:
        rows = self.fetch_all(
            "SELECT COALESCE(SUM(LENGTH(key) + LENGTH(value)), 0) FROM local_storage;"
        )
        return int(rows[0][0])


@runtime_checkable
class EntryStorage(Protocol):
    """Storage capability the workout service depends on."""

    def read_all(self) -> List[WorkoutEntry]:
        ...

    def write_all(self, entries: List[WorkoutEntry]) -> None:
        ...

    def clear(self) -> None:
        ...

    def transaction(
        self, fn: Callable[[List[WorkoutEntry]], List[WorkoutEntry]]
    ) -> List[WorkoutEntry]:
        ...


class EntryRepository:
    """Persist the whole entry collection as one JSON array under one key."""

    def __init__(self, store: KeyValueStore, storage_key: str = DEFAULT_STORAGE_KEY) -> None:
        self.store = store
        self.storage_key = storage_key

    def read_all(self) -> List[WorkoutEntry]:
        try:
            raw = self.store.get_item(self.storage_key)
        except sqlite3.Error as exc:
            logger.error("failed to load %s: %s", self.storage_key, exc)
            raise StorageReadError(f"failed to read entries: {exc}") from exc
        if raw is None:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError(f"expected a JSON array, got {type(data).__name__}")
            entries = [WorkoutEntry.from_record(item) for item in data]
        except (ValueError, TypeError, ValidationError) as exc:
            logger.error("stored entries under %s are unreadable: %s", self.storage_key, exc)
            raise StorageReadError(f"failed to read entries: {exc}") from exc
        logger.debug("read %d entries", len(entries))
        return entries

    def write_all(self, entries: List[WorkoutEntry]) -> None:
        payload = json.dumps([e.to_record() for e in entries], ensure_ascii=False)
        try:
            self.store.set_item(self.storage_key, payload)
        except (QuotaExceededError, sqlite3.Error) as exc:
            logger.error("failed to write %d entries: %s", len(entries), exc)
            raise StorageWriteError(f"failed to save entries: {exc}") from exc
        logger.debug("wrote %d entries", len(entries))

    def clear(self) -> None:
        try:
            self.store.remove_item(self.storage_key)
        except sqlite3.Error as exc:
            logger.error("failed to remove %s: %s", self.storage_key, exc)
            raise StorageWriteError(f"failed to clear entries: {exc}") from exc

    def transaction(
        self, fn: Callable[[List[WorkoutEntry]], List[WorkoutEntry]]
    ) -> List[WorkoutEntry]:
        """Read, apply ``fn`` and write back. Nothing is written if ``fn`` raises."""
        entries = self.read_all()
        updated = fn(list(entries))
        self.write_all(updated)
        return updated


class ThemeRepository:
    """Light/dark theme preference kept in the key-value store."""

    THEMES = ("light", "dark")

    def __init__(self, store: KeyValueStore, theme_key: str = DEFAULT_THEME_KEY) -> None:
        self.store = store
        self.theme_key = theme_key

    def get_theme(self) -> str:
        try:
            stored = self.store.get_item(self.theme_key)
        except sqlite3.Error as exc:
            raise StorageReadError(f"failed to read theme: {exc}") from exc
        return "dark" if stored == "dark" else "light"

    def set_theme(self, theme: str) -> None:
        if theme not in self.THEMES:
            raise ValueError(f"theme must be one of {', '.join(self.THEMES)}")
        try:
            self.store.set_item(self.theme_key, theme)
        except (QuotaExceededError, sqlite3.Error) as exc:
            logger.error("failed to save theme: %s", exc)
            raise StorageWriteError(f"failed to save theme: {exc}") from exc
