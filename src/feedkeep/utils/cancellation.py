"""Cooperative cancellation shared by the fetches of one refresh cycle."""

import asyncio


class CancellationToken:
    """One-shot cancellation signal.

    Cancelling is idempotent; fetches race ``wait()`` against their I/O.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()
