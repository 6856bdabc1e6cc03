"""Storage factory for creating snapshot storage instances."""

from feedkeep.config.settings import Settings
from feedkeep.exceptions import ConfigurationError
from feedkeep.storage.base import SnapshotStorage
from feedkeep.storage.json_file import JSONFileSnapshotStorage
from feedkeep.storage.sqlite import SQLiteSnapshotStorage


def create_storage(settings: Settings) -> SnapshotStorage:
    """Create a storage instance based on configuration.

    Raises:
        ConfigurationError: If the storage type is unsupported.
    """
    db_type = settings.db_type.lower()

    if db_type == "sqlite":
        return SQLiteSnapshotStorage(settings.db_path)

    elif db_type == "json":
        return JSONFileSnapshotStorage(settings.json_path)

    else:
        raise ConfigurationError(
            f"Unsupported storage type: {db_type}. Supported types: sqlite, json"
        )
