"""Named notifications emitted by the core for UI layers.

Delivery is fire-and-forget: a failing listener is logged and never
affects the emitter or the other listeners.
"""

import asyncio
import inspect
from collections.abc import Callable
from enum import Enum
from typing import Any

import structlog

logger = structlog.get_logger()

Listener = Callable[..., Any]


class FeedEvent(str, Enum):
    """Event names and their payload keywords."""

    REFRESH_COMPLETED = "refresh-completed"  # stats
    ITEM_READ_CHANGED = "item-read-changed"  # link, read
    ITEM_FAVORITE_CHANGED = "item-favorite-changed"  # link, favorite
    BULK_MARK_COMPLETED = "bulk-mark-completed"  # scope, name, links


class EventBus:
    """In-process publish/subscribe for ``FeedEvent`` notifications.

    Listeners may be plain callables or coroutine functions; coroutines are
    scheduled on the running loop and not awaited.
    """

    def __init__(self) -> None:
        self._listeners: dict[FeedEvent, list[Listener]] = {}
        self._pending: set[asyncio.Task] = set()

    def subscribe(self, event: FeedEvent, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        listeners = self._listeners.setdefault(event, [])
        listeners.append(listener)

        def unsubscribe() -> None:
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def emit(self, event: FeedEvent, **payload: Any) -> None:
        for listener in list(self._listeners.get(event, ())):
            try:
                result = listener(**payload)
            except Exception as e:
                logger.warning("Event listener failed", event_name=event.value, error=str(e))
                continue
            if inspect.isawaitable(result):
                self._schedule(event, result)

    def _schedule(self, event: FeedEvent, awaitable: Any) -> None:
        """Run a coroutine listener on the running loop without awaiting it."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            # No running loop: the coroutine can never run
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            logger.warning("Event listener failed", event_name=event.value, error=str(e))
            return
        task = asyncio.ensure_future(awaitable, loop=loop)
        self._pending.add(task)
        task.add_done_callback(self._finish)

    def _finish(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Event listener failed", error=str(task.exception()))
