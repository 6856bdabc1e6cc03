"""JSON file storage for the persisted store."""

import asyncio
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from feedkeep.exceptions import StorageError
from feedkeep.models.item import PersistedStore


class JSONFileSnapshotStorage:
    """Stores the snapshot as a JSON document.

    Writes go to a temporary file that replaces the target, so readers never
    see a half-written snapshot.
    """

    def __init__(self, path: Path):
        self._path = path

    async def initialize(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create {self._path.parent}: {e}") from e

    async def load(self) -> PersistedStore | None:
        if not self._path.exists():
            return None
        try:
            data = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
            return PersistedStore.model_validate_json(data)
        except OSError as e:
            raise StorageError(f"Cannot read {self._path}: {e}") from e
        except ValidationError as e:
            raise StorageError(f"Corrupt snapshot in {self._path}: {e}") from e

    async def save(self, store: PersistedStore) -> None:
        try:
            await asyncio.to_thread(self._write, store.model_dump_json(indent=2))
        except OSError as e:
            raise StorageError(f"Cannot write {self._path}: {e}") from e

    async def close(self) -> None:
        pass

    def _write(self, data: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
