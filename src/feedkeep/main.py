"""Main application entry point.

Wires the components together and either runs one refresh cycle or keeps
refreshing on a schedule.
"""

import argparse
import asyncio
from pathlib import Path

from feedkeep.config.settings import Settings, settings
from feedkeep.exceptions import FeedkeepError
from feedkeep.models.feed import FeedCollection, load_feed_collection
from feedkeep.parsers.document import FeedDocumentParser
from feedkeep.scheduler import create_scheduler, run_once
from feedkeep.services.fetcher import FeedFetcher
from feedkeep.services.orchestrator import UpdateOrchestrator
from feedkeep.services.reconcile import ReconciliationEngine
from feedkeep.sources.http import HttpFeedTransport
from feedkeep.storage.factory import create_storage
from feedkeep.utils.logger import configure_logging, get_logger


def build_orchestrator(
    config: Settings,
    collection: FeedCollection,
    transport: HttpFeedTransport,
) -> UpdateOrchestrator:
    """Create an orchestrator from settings and the feeds file."""
    fetcher = FeedFetcher(
        transport=transport,
        parser=FeedDocumentParser(),
        timeout=config.feed_timeout,
        cache_ttl=config.feed_cache_ttl,
    )
    return UpdateOrchestrator(
        fetcher=fetcher,
        storage=create_storage(config),
        feeds=collection.feeds,
        filters=collection.filters,
        engine=ReconciliationEngine(match_by_hash=config.match_by_hash),
        feed_timeout=config.feed_timeout,
    )


async def run(feeds_file: Path, once: bool, force: bool) -> dict | None:
    """Load state, refresh, and keep refreshing unless ``once`` is set."""
    logger = get_logger("cli")
    collection = load_feed_collection(feeds_file)
    logger.info(
        "Feeds file loaded",
        path=str(feeds_file),
        feeds=len(collection.feeds),
        filters=len(collection.filters),
    )

    transport = HttpFeedTransport(
        timeout=settings.request_timeout,
        user_agent=settings.user_agent,
    )
    orchestrator = build_orchestrator(settings, collection, transport)

    try:
        await orchestrator.start()
        stats = await run_once(orchestrator, force=force)
        if once:
            return stats

        scheduler = create_scheduler(orchestrator, settings.refresh_interval_minutes)
        scheduler.start()
        logger.info("Scheduler started")
        try:
            await asyncio.Event().wait()
        finally:
            scheduler.shutdown(wait=False)
        return stats
    finally:
        await transport.aclose()


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="feedkeep - RSS/Atom feed reconciliation")
    parser.add_argument(
        "--run-once",
        action="store_true",
        help="Run one refresh cycle and exit",
    )
    parser.add_argument(
        "--feeds",
        type=Path,
        default=settings.feeds_file,
        help=f"Feeds file (default: {settings.feeds_file})",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop cached feed documents before the first cycle",
    )
    args = parser.parse_args()

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.log_json,
    )
    logger = get_logger("cli")

    try:
        asyncio.run(run(args.feeds, once=args.run_once, force=args.reset))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except FeedkeepError as e:
        logger.error("Refresh failed", error=str(e))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
