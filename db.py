import sqlite3
import aiosqlite
import json
import logging
from contextlib import contextmanager, asynccontextmanager
from typing import List, Tuple, Optional, TYPE_CHECKING

from migrate import LegacyStoreBridge

if TYPE_CHECKING:
    from backup_service import BackupWriter

logger = logging.getLogger(__name__)

DATA_RECORD_KEY = "workouts"


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "data": (
            """CREATE TABLE data (
                    id TEXT PRIMARY KEY,
                    workouts TEXT NOT NULL
                );""",
            ["id", "workouts"],
        ),
    }

    def __init__(self, db_path: str = "replog.db") -> None:
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

    def vacuum(self) -> None:
        """Run SQLite VACUUM to reduce database size."""
        with self._connection() as conn:
            conn.execute("VACUUM;")


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


class LegacyStorage(BaseRepository):
    """Synchronous key/value slot used by releases before the workout store."""

    _TABLE_DEFINITIONS = {
        "local_storage": (
            """CREATE TABLE local_storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
    }

    def __init__(self, db_path: str = "replog_legacy.db") -> None:
        super().__init__(db_path)

    def get_item(self, key: str) -> Optional[str]:
        rows = self.fetch_all("SELECT value FROM local_storage WHERE key = ?;", (key,))
        return rows[0][0] if rows else None

    def set_item(self, key: str, value: str) -> None:
        self.execute(
            "INSERT INTO local_storage (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, value),
        )

    def remove_item(self, key: str) -> None:
        self.execute("DELETE FROM local_storage WHERE key = ?;", (key,))


PREFERENCES_KEY = "replog_user_preferences"
LANGUAGES = ("en", "pt-BR")


class UserPreferencesRepository(LegacyStorage):
    """Last visited workout and UI language, kept as one JSON item."""

    def _load(self) -> dict:
        defaults = {"lastVisitedWorkoutId": None, "language": "en"}
        raw = self.get_item(PREFERENCES_KEY)
        if raw is None:
            return defaults
        try:
            data = json.loads(raw)
        except (ValueError, RecursionError):
            logger.warning("Could not read user preferences", exc_info=True)
            return defaults
        if not isinstance(data, dict):
            return defaults
        return {**defaults, **data}

    def _save(self, prefs: dict) -> None:
        self.set_item(PREFERENCES_KEY, json.dumps(prefs))

    def get_last_visited_workout(self) -> Optional[str]:
        return self._load()["lastVisitedWorkoutId"]

    def set_last_visited_workout(self, workout_id: str) -> None:
        prefs = self._load()
        prefs["lastVisitedWorkoutId"] = workout_id
        self._save(prefs)

    def clear_last_visited_workout(self) -> None:
        prefs = self._load()
        prefs["lastVisitedWorkoutId"] = None
        self._save(prefs)

    def get_language(self) -> str:
        return self._load()["language"] or "en"

    def set_language(self, language: str) -> None:
        if language not in LANGUAGES:
            raise ValueError(f"unsupported language: {language}")
        prefs = self._load()
        prefs["language"] = language
        self._save(prefs)

    def clear_all_preferences(self) -> None:
        self._save({"lastVisitedWorkoutId": None, "language": "en"})


class AsyncDatabase(Database):
    """Provides asynchronous connection management."""

    @asynccontextmanager
    async def _async_connection(self):
        conn = await aiosqlite.connect(self._db_path)
        try:
            yield conn
            await conn.commit()
        finally:
            await conn.close()


class AsyncBaseRepository(AsyncDatabase):
    """Asynchronous variant of BaseRepository using aiosqlite."""

    async def execute(self, query: str, params: Tuple = ()) -> int:
        async with self._async_connection() as conn:
            cursor = await conn.execute(query, params)
            await conn.commit()
            return cursor.lastrowid

    async def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        async with self._async_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return rows


class WorkoutStore(AsyncBaseRepository):
    """Async store keeping the whole workout collection in one record.

    The first ``load`` of a store runs the legacy bridge. ``migrated`` stays
    False until the bridge completes, so a failed migration is retried by the
    next ``load``.
    """

    def __init__(
        self,
        db_path: str = "replog.db",
        backup: Optional["BackupWriter"] = None,
        legacy: Optional[LegacyStorage] = None,
    ) -> None:
        super().__init__(db_path)
        self.backup = backup
        self.legacy = legacy
        self.migrated = legacy is None

    async def read_record(self) -> Optional[list]:
        rows = await self.fetch_all(
            "SELECT workouts FROM data WHERE id = ?;", (DATA_RECORD_KEY,)
        )
        if not rows:
            return None
        return json.loads(rows[0][0])

    async def write_record(self, workouts: list) -> None:
        await self.execute(
            "INSERT INTO data (id, workouts) VALUES (?, ?) "
            "ON CONFLICT(id) DO UPDATE SET workouts=excluded.workouts;",
            (DATA_RECORD_KEY, json.dumps(workouts)),
        )

    async def _migrate_legacy(self) -> None:
        if self.migrated:
            return
        try:
            await LegacyStoreBridge(self.legacy, self).run()
        except Exception:
            logger.warning("Legacy migration failed, will retry", exc_info=True)
            return
        self.migrated = True

    async def load(self) -> list:
        """Return the stored collection, or an empty list when unreadable."""
        await self._migrate_legacy()
        try:
            data = await self.read_record()
        except (sqlite3.Error, ValueError, TypeError, RecursionError):
            logger.warning("Could not read workouts", exc_info=True)
            return []
        if not isinstance(data, list):
            return []
        return data

    async def save(self, workouts: list) -> None:
        """Persist ``workouts`` and queue a backup copy."""
        await self.write_record(workouts)
        if self.backup is None:
            return
        try:
            self.backup.backup(workouts)
        except Exception:
            logger.warning("Could not queue backup", exc_info=True)

    async def save_restored(self, workouts: list) -> None:
        """Persist a restored collection without queueing another backup."""
        await self.write_record(workouts)

    async def clear(self) -> None:
        await self.save([])
