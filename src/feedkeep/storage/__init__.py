"""Storage package."""

from feedkeep.storage.base import SnapshotStorage
from feedkeep.storage.factory import create_storage
from feedkeep.storage.json_file import JSONFileSnapshotStorage
from feedkeep.storage.sqlite import SQLiteSnapshotStorage

__all__ = [
    "SnapshotStorage",
    "SQLiteSnapshotStorage",
    "JSONFileSnapshotStorage",
    "create_storage",
]
