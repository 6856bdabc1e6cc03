"""Small in-memory cache with per-entry expiry."""

import time
from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

V = TypeVar("V")


class TTLCache(Generic[V]):
    """Async get-or-compute cache.

    ``None`` results are not cached so failures are retried on the next call.
    A ttl of 0 disables caching.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, V]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: Hashable) -> V | None:
        """Return a live entry, dropping it when expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def put(self, key: Hashable, value: V, ttl: float | None = None) -> None:
        ttl = self._ttl if ttl is None else ttl
        if ttl <= 0:
            return
        self._entries[key] = (self._clock() + ttl, value)

    async def get_or_compute(
        self,
        key: Hashable,
        compute: Callable[[], Awaitable[V | None]],
        ttl: float | None = None,
    ) -> V | None:
        value = self.get(key)
        if value is not None:
            return value
        value = await compute()
        if value is not None:
            self.put(key, value, ttl)
        return value

    def invalidate(self, key: Hashable | None = None) -> None:
        """Drop one entry, or everything when no key is given."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)
