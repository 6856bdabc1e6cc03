"""Abstract storage interface using Protocol.

The store is persisted as one opaque JSON blob; backends only decide where
that blob lives.
"""

from typing import Protocol

from feedkeep.models.item import PersistedStore


class SnapshotStorage(Protocol):
    """Persisted store abstraction protocol."""

    async def initialize(self) -> None:
        """Prepare the backend (create tables, directories)."""
        ...

    async def load(self) -> PersistedStore | None:
        """Load the persisted store.

        Returns:
            The store, or None if nothing was saved yet.

        Raises:
            StorageError: When the blob cannot be read or decoded.
        """
        ...

    async def save(self, store: PersistedStore) -> None:
        """Replace the persisted store.

        Raises:
            StorageError: When the write fails.
        """
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...
