"""SQLite storage for the persisted store.

Keeps the serialized store in a small key/value table.
"""

from datetime import datetime, timezone
from pathlib import Path

import aiosqlite
from pydantic import ValidationError

from feedkeep.exceptions import StorageError
from feedkeep.models.item import PersistedStore

SCHEMA = """
CREATE TABLE IF NOT EXISTS snapshots (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

STORE_KEY = "items"


class SQLiteSnapshotStorage:
    """SQLite-backed snapshot storage."""

    def __init__(self, db_path: Path):
        """Initialize SQLite storage.

        Args:
            db_path: Path to the SQLite database file.
        """
        self._db_path = db_path
        self._initialized = False

    async def initialize(self) -> None:
        """Create the schema if needed. Safe to call more than once."""
        if self._initialized:
            return

        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(self._db_path) as db:
                await db.executescript(SCHEMA)
                await db.commit()
        except (OSError, aiosqlite.Error) as e:
            raise StorageError(f"Cannot initialize {self._db_path}: {e}") from e

        self._initialized = True

    async def load(self) -> PersistedStore | None:
        await self.initialize()
        try:
            async with aiosqlite.connect(self._db_path) as db:
                async with db.execute(
                    "SELECT value FROM snapshots WHERE key = ?", (STORE_KEY,)
                ) as cursor:
                    row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StorageError(f"Cannot read {self._db_path}: {e}") from e

        if row is None:
            return None
        try:
            return PersistedStore.model_validate_json(row[0])
        except ValidationError as e:
            raise StorageError(f"Corrupt snapshot in {self._db_path}: {e}") from e

    async def save(self, store: PersistedStore) -> None:
        await self.initialize()
        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute(
                    """
                    INSERT INTO snapshots (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (
                        STORE_KEY,
                        store.model_dump_json(),
                        datetime.now(timezone.utc).isoformat(),
                    ),
                )
                await db.commit()
        except aiosqlite.Error as e:
            raise StorageError(f"Cannot write {self._db_path}: {e}") from e

    async def close(self) -> None:
        """Connections are opened per operation; nothing to release."""
        pass
