"""Merging freshly fetched feeds into the persisted store."""

import structlog

from feedkeep.models.item import USER_FLAGS, USER_LISTS, FeedItem, FeedSnapshot, PersistedStore

logger = structlog.get_logger()

FEED_METADATA = ("title", "description", "image", "link")


class ReconciliationEngine:
    """Produces a new store from a previous one and a batch of fresh feeds.

    Items are matched by link. A matched item takes the fresh metadata and
    keeps the user-owned state of the stored one; unmatched fresh items are
    appended; stored items that the feed stopped publishing are kept at the
    end. Inputs are never mutated.
    """

    def __init__(self, match_by_hash: bool = False):
        """Initialize the engine.

        Args:
            match_by_hash: When a fresh item's link matches nothing, try the
                content hash before treating it as new.
        """
        self._match_by_hash = match_by_hash

    def merge(self, previous: PersistedStore, fresh: list[FeedSnapshot]) -> PersistedStore:
        """Merge fresh snapshots into a copy of ``previous``.

        Feeds are processed in the given order; feeds with no fresh snapshot
        are carried over unchanged.
        """
        merged = previous.model_copy(deep=True)
        new_count = 0

        for snapshot in fresh:
            existing = merged.get_feed(snapshot.name, snapshot.folder)
            if existing is None:
                feed = snapshot.model_copy(deep=True)
                for item in feed.items:
                    _apply_new_item_defaults(item)
                merged.feeds.append(feed)
                new_count += len(feed.items)
                continue

            items, added = self._merge_items(existing.items, snapshot.items)
            existing.items = items
            for field in FEED_METADATA:
                setattr(existing, field, getattr(snapshot, field))
            new_count += added

        logger.debug("Feeds merged", feeds=len(fresh), new_items=new_count)
        return merged

    def _merge_items(
        self, previous: list[FeedItem], fresh: list[FeedItem]
    ) -> tuple[list[FeedItem], int]:
        by_link: dict[str, FeedItem] = {}
        by_hash: dict[str, FeedItem] = {}
        # Last occurrence wins, matching find_item and the index
        for item in previous:
            by_link[item.link] = item
            if item.hash:
                by_hash[item.hash] = item

        merged: list[FeedItem] = []
        matched: set[int] = set()
        added = 0

        for item in fresh:
            old = by_link.get(item.link)
            if old is None and self._match_by_hash and item.hash:
                old = by_hash.get(item.hash)

            if old is None:
                new_item = item.model_copy(deep=True)
                _apply_new_item_defaults(new_item)
                merged.append(new_item)
                added += 1
                continue

            merged.append(_carry_user_state(old, item))
            matched.add(id(old))

        # Historical retention: items the feed no longer publishes stay
        fresh_links = {item.link for item in fresh}
        for old in previous:
            if id(old) not in matched and old.link not in fresh_links:
                merged.append(old)

        return merged, added


def _carry_user_state(old: FeedItem, fresh: FeedItem) -> FeedItem:
    """Fresh metadata with the stored item's user-owned fields."""
    updates = {}
    for name in USER_FLAGS:
        value = getattr(old, name)
        updates[name] = value if value is not None else getattr(fresh, name)
    for name in USER_LISTS:
        value = getattr(old, name)
        updates[name] = list(value) if value else list(getattr(fresh, name))
    return fresh.model_copy(update=updates, deep=True)


def _apply_new_item_defaults(item: FeedItem) -> None:
    """New items always start unread and not favorited."""
    item.read = False
    item.favorite = False
    if item.created is None:
        item.created = False
    if item.visited is None:
        item.visited = False
