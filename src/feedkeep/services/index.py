"""Lookup structures and unread counters derived from the store."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from feedkeep.models.item import FeedItem, PersistedStore


def folder_key(folder: str | None) -> str:
    """Normalized folder key used for lookups and counting."""
    return (folder or "").strip().lower()


@dataclass(frozen=True)
class FeedIndex:
    """Read-only view of a store, rebuilt after every change.

    A published index is never modified; consumers holding a reference keep
    seeing a complete, consistent picture.
    """

    by_link: Mapping[str, FeedItem] = field(default_factory=dict)
    by_hash: Mapping[str, FeedItem] = field(default_factory=dict)
    by_folder: Mapping[str, tuple[FeedItem, ...]] = field(default_factory=dict)
    unread_by_feed: Mapping[str, int] = field(default_factory=dict)
    unread_by_folder: Mapping[str, int] = field(default_factory=dict)
    folder_names: Mapping[str, str] = field(default_factory=dict)
    all_items: tuple[FeedItem, ...] = ()
    tags: tuple[str, ...] = ()
    unread_total: int = 0
    favorite_count: int = 0

    def items(self) -> list[FeedItem]:
        """All items in store order."""
        return list(self.all_items)

    def get_item_by_link(self, link: str) -> FeedItem | None:
        return self.by_link.get(link)

    def get_item_by_hash(self, item_hash: str) -> FeedItem | None:
        return self.by_hash.get(item_hash)

    def get_items_by_folder(self, folder: str) -> list[FeedItem]:
        return list(self.by_folder.get(folder_key(folder), ()))

    def get_unread_count_for_feed(self, feed_name: str) -> int:
        return self.unread_by_feed.get(feed_name, 0)

    def get_unread_count_for_folder(self, folder: str) -> int:
        return self.unread_by_folder.get(folder_key(folder), 0)

    def get_folders(self) -> list[str]:
        """Folder display names, in first-seen order."""
        return list(self.folder_names.values())

    def favorites(self) -> list[FeedItem]:
        """Favorited items, newest first."""
        found = [item for item in self.all_items if item.favorite is True]
        found.sort(key=lambda item: item.published_at, reverse=True)
        return found


def build_index(store: PersistedStore) -> FeedIndex:
    """Build every lookup map in one pass over the store.

    Link and hash collisions resolve last-write-wins. Missing ``read``
    counts as unread.
    """
    by_link: dict[str, FeedItem] = {}
    by_hash: dict[str, FeedItem] = {}
    by_folder: dict[str, list[FeedItem]] = {}
    unread_by_feed: dict[str, int] = {}
    unread_by_folder: dict[str, int] = {}
    folder_names: dict[str, str] = {}
    all_items: list[FeedItem] = []
    tags: set[str] = set()
    favorite_count = 0

    for feed in store.feeds:
        key = folder_key(feed.folder)
        folder_names.setdefault(key, feed.folder.strip())
        folder_items = by_folder.setdefault(key, [])

        unread = 0
        for item in feed.items:
            if item.link:
                by_link[item.link] = item
            if item.hash:
                by_hash[item.hash] = item
            if item.is_unread:
                unread += 1
            if item.favorite is True:
                favorite_count += 1
            tags.update(tag for tag in item.tags if tag)
            folder_items.append(item)
            all_items.append(item)

        unread_by_feed[feed.name] = unread_by_feed.get(feed.name, 0) + unread
        unread_by_folder[key] = unread_by_folder.get(key, 0) + unread

    return FeedIndex(
        by_link=MappingProxyType(by_link),
        by_hash=MappingProxyType(by_hash),
        by_folder=MappingProxyType({k: tuple(v) for k, v in by_folder.items()}),
        unread_by_feed=MappingProxyType(unread_by_feed),
        unread_by_folder=MappingProxyType(unread_by_folder),
        folder_names=MappingProxyType(folder_names),
        all_items=tuple(all_items),
        tags=tuple(sorted(tags)),
        unread_total=sum(unread_by_feed.values()),
        favorite_count=favorite_count,
    )
