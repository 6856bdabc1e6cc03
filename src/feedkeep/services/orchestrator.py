"""Refresh cycle orchestration - the top of the core.

Coordinates parallel fetching, reconciliation, indexing, filtering and
persistence.
"""

import asyncio
import time
from collections.abc import Iterable
from enum import Enum

import structlog

from feedkeep.events import EventBus, FeedEvent
from feedkeep.exceptions import StorageError
from feedkeep.models.feed import FeedSource
from feedkeep.models.filter import FilterSpec
from feedkeep.models.item import FeedSnapshot, PersistedStore
from feedkeep.notifiers.base import Notifier
from feedkeep.notifiers.log import LogNotifier
from feedkeep.services.fetcher import FeedFetcher
from feedkeep.services.filters import FilterResult, apply_filters
from feedkeep.services.index import FeedIndex, build_index
from feedkeep.services.reconcile import ReconciliationEngine
from feedkeep.storage.base import SnapshotStorage
from feedkeep.utils.cancellation import CancellationToken

logger = structlog.get_logger()


class RefreshState(str, Enum):
    """Refresh cycle states.

    IDLE -> FETCHING -> RECONCILING -> INDEXING -> PERSISTING -> IDLE, with
    CANCELLED reachable from FETCHING only.
    """

    IDLE = "idle"
    FETCHING = "fetching"
    RECONCILING = "reconciling"
    INDEXING = "indexing"
    PERSISTING = "persisting"
    CANCELLED = "cancelled"


class UpdateOrchestrator:
    """Owns the persisted store and its published index.

    At most one refresh runs at a time; a request made while one is running
    is dropped, not queued. Readers only ever see a fully built index.
    """

    def __init__(
        self,
        fetcher: FeedFetcher,
        storage: SnapshotStorage,
        feeds: Iterable[FeedSource] = (),
        filters: Iterable[FilterSpec] = (),
        engine: ReconciliationEngine | None = None,
        events: EventBus | None = None,
        notifier: Notifier | None = None,
        feed_timeout: float | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            fetcher: Fetches single feeds.
            storage: Persistence boundary.
            feeds: Configured feed sources.
            filters: Filter definitions re-evaluated after every change.
            engine: Reconciliation engine, link matching by default.
            events: Event bus for UI notifications.
            notifier: User-visible notices, logged by default.
            feed_timeout: Per-feed time budget; the fetcher default when None.
        """
        self._fetcher = fetcher
        self._storage = storage
        self._feeds = list(feeds)
        self._filters = list(filters)
        self._engine = engine or ReconciliationEngine()
        self._events = events or EventBus()
        self._notifier = notifier or LogNotifier()
        self._feed_timeout = feed_timeout

        self._store = PersistedStore()
        self._index = FeedIndex()
        self._filtered: list[FilterResult] = []
        self._state = RefreshState.IDLE
        self._updating = False
        self._token: CancellationToken | None = None

    @property
    def state(self) -> RefreshState:
        return self._state

    @property
    def is_updating(self) -> bool:
        return self._updating

    @property
    def store(self) -> PersistedStore:
        return self._store

    @property
    def index(self) -> FeedIndex:
        return self._index

    @property
    def filtered(self) -> list[FilterResult]:
        return list(self._filtered)

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    @property
    def feeds(self) -> list[FeedSource]:
        return list(self._feeds)

    def set_feeds(self, feeds: Iterable[FeedSource]) -> None:
        """Replace the feed list; takes effect on the next cycle."""
        self._feeds = list(feeds)

    def set_filters(self, filters: Iterable[FilterSpec]) -> None:
        self._filters = list(filters)
        self._filtered = apply_filters(self._index.items(), self._filters)

    async def start(self) -> None:
        """Load the persisted store and publish its index."""
        await self._storage.initialize()
        loaded = await self._storage.load()
        self._store = loaded or PersistedStore()
        self._publish(self._store)
        logger.info(
            "Store loaded",
            feeds=len(self._store.feeds),
            items=len(self._index.all_items),
            unread=self._index.unread_total,
        )

    def cancel(self) -> None:
        """Cancel the running cycle's fetches, if any."""
        if self._token is not None:
            self._token.cancel()

    def reset(self) -> None:
        """Drop cached feed documents so the next cycle fetches everything."""
        self._fetcher.invalidate_cache()

    async def refresh(self) -> dict | None:
        """Run one refresh cycle.

        Returns:
            Cycle statistics, or None when a cycle was already running.

        Raises:
            StorageError: When the merged store could not be saved.
        """
        if self._updating:
            logger.info("Refresh skipped (already running)", state=self._state.value)
            return None

        self._updating = True
        if self._token is not None:
            self._token.cancel()
        token = CancellationToken()
        self._token = token
        started = time.perf_counter()

        try:
            self._state = RefreshState.FETCHING
            feeds = list(self._feeds)
            logger.info("Starting feed update", feeds=len(feeds))
            fresh = await self._fetch_all(feeds, token)

            stats = {
                "status": "completed",
                "feeds_total": len(feeds),
                "feeds_fetched": len(fresh),
                "feeds_failed": len(feeds) - len(fresh),
                "items_new": 0,
                "elapsed_ms": 0.0,
            }

            if token.cancelled:
                self._state = RefreshState.CANCELLED
                stats["status"] = "cancelled"
                stats["elapsed_ms"] = _elapsed_ms(started)
                logger.warning("Feed update cancelled", **stats)
                return stats

            self._state = RefreshState.RECONCILING
            # Read the store only now so changes made while fetching survive
            previous = self._store
            merged = self._engine.merge(previous, fresh)
            stats["items_new"] = _item_count(merged) - _item_count(previous)

            self._state = RefreshState.INDEXING
            self._store = merged
            self._publish(merged)

            self._state = RefreshState.PERSISTING
            await self._persist(merged)

            stats["elapsed_ms"] = _elapsed_ms(started)
            logger.info("Feed update completed", **stats)
            self._events.emit(FeedEvent.REFRESH_COMPLETED, stats=dict(stats))
            await self._notifier.send_message("Feeds refreshed")
            return stats

        finally:
            self._updating = False
            if self._state != RefreshState.CANCELLED:
                self._state = RefreshState.IDLE

    async def commit(self) -> None:
        """Publish and persist the current store after an in-place change.

        Raises:
            StorageError: When the store could not be saved.
        """
        self._publish(self._store)
        await self._persist(self._store)

    async def _fetch_all(
        self, feeds: list[FeedSource], token: CancellationToken
    ) -> list[FeedSnapshot]:
        """Fetch every feed in parallel and wait for all of them to settle."""
        results = await asyncio.gather(
            *[self._fetcher.fetch(feed, token, self._feed_timeout) for feed in feeds],
            return_exceptions=True,
        )

        fresh: list[FeedSnapshot] = []
        for feed, result in zip(feeds, results):
            if isinstance(result, BaseException):
                logger.error(
                    "Feed fetch crashed",
                    feed=feed.name,
                    folder=feed.folder,
                    error=repr(result),
                )
            elif result is not None:
                fresh.append(result)
        return fresh

    def _publish(self, store: PersistedStore) -> None:
        # Build fully before swapping references so no partial state is visible
        index = build_index(store)
        filtered = apply_filters(index.items(), self._filters)
        self._index = index
        self._filtered = filtered

    async def _persist(self, store: PersistedStore) -> None:
        try:
            await self._storage.save(store)
        except StorageError as e:
            logger.error("Failed to save feed content", error=str(e))
            await self._notifier.send_message(f"Could not save feeds: {e}", level="error")
            raise


def _item_count(store: PersistedStore) -> int:
    return sum(len(feed.items) for feed in store.feeds)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
