"""Single-feed fetching with timeout and cancellation."""

import asyncio
import time

import structlog

from feedkeep.exceptions import FetchError, FetchTimeoutError, ParseError
from feedkeep.models.feed import FeedSource
from feedkeep.models.item import FeedSnapshot
from feedkeep.parsers.base import FeedParser
from feedkeep.parsers.document import FeedDocumentParser
from feedkeep.sources.base import FeedTransport
from feedkeep.utils.cache import TTLCache
from feedkeep.utils.cancellation import CancellationToken

logger = structlog.get_logger()


class FeedFetcher:
    """Reads and parses one feed at a time.

    Every failure mode (transport error, parse error, timeout, cancellation)
    resolves to ``None`` so one feed can never abort a refresh batch. Parsed
    snapshots may be kept for a short time to skip redundant fetches.
    """

    def __init__(
        self,
        transport: FeedTransport,
        parser: FeedParser | None = None,
        timeout: float = 15.0,
        cache_ttl: float = 0.0,
    ):
        """Initialize the fetcher.

        Args:
            transport: Reads raw documents.
            parser: Document parser, FeedDocumentParser by default.
            timeout: Default per-feed time budget in seconds.
            cache_ttl: Seconds a parsed snapshot is reused (0 disables).
        """
        self._transport = transport
        self._parser = parser or FeedDocumentParser()
        self._timeout = timeout
        self._cache: TTLCache[FeedSnapshot] = TTLCache(cache_ttl)

    def invalidate_cache(self) -> None:
        """Forget every cached snapshot."""
        self._cache.invalidate()

    async def fetch(
        self,
        source: FeedSource,
        token: CancellationToken | None = None,
        timeout: float | None = None,
    ) -> FeedSnapshot | None:
        """Fetch and parse one feed.

        Args:
            source: Feed to fetch.
            token: Cancellation signal shared by the current cycle.
            timeout: Time budget in seconds, the fetcher default when omitted.

        Returns:
            Parsed snapshot, or None on timeout, cancellation or any error.
        """
        if token is not None and token.cancelled:
            logger.warning("Feed fetch aborted", feed=source.name, folder=source.folder)
            return None

        snapshot = await self._cache.get_or_compute(
            (source.url, source.name, source.folder),
            lambda: self._fetch_uncached(source, token, timeout or self._timeout),
        )
        # Callers may mutate what they get back; never hand out the cached copy
        return snapshot.model_copy(deep=True) if snapshot is not None else None

    async def _fetch_uncached(
        self,
        source: FeedSource,
        token: CancellationToken | None,
        timeout: float,
    ) -> FeedSnapshot | None:
        log = logger.bind(feed=source.name, folder=source.folder)
        started = time.perf_counter()

        read_task = asyncio.ensure_future(self._transport.read_feed_document(source.url))
        waiters: set[asyncio.Future] = {read_task}
        cancel_task = None
        if token is not None:
            cancel_task = asyncio.ensure_future(token.wait())
            waiters.add(cancel_task)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in waiters:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*waiters, return_exceptions=True)

        if cancel_task is not None and cancel_task in done:
            log.warning("Feed fetch aborted")
            return None

        if read_task not in done:
            log.warning("Feed timed out", timeout=timeout)
            return None

        try:
            raw_content = read_task.result()
        except FetchTimeoutError as e:
            log.warning("Feed timed out", error=str(e))
            return None
        except FetchError as e:
            log.error("Failed to load feed", error=str(e))
            return None

        try:
            snapshot = self._parser.parse(raw_content, source)
        except ParseError as e:
            log.error("Failed to parse feed", error=str(e))
            return None

        log.info(
            "Feed loaded",
            items=len(snapshot.items),
            elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return snapshot
