"""Feed item and snapshot models.

``FeedItem`` is a plain record. User-owned fields (read, favorite, created,
visited, tags, highlights) are only changed through ``PersistedStore``
methods; everything else is metadata refreshed by every fetch.
"""

from collections.abc import Iterator
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from feedkeep.utils.dates import parse_instant

Scope = Literal["global", "folder", "feed"]

USER_FLAGS = ("read", "favorite", "created", "visited")
USER_LISTS = ("tags", "highlights")


class FeedItem(BaseModel):
    """One entry of a feed."""

    # Metadata from the feed document
    title: str = ""
    link: str = Field(default="", description="Identity key within a feed")
    item_id: str = Field(default="", description="Raw <id>/<guid> of the entry")
    creator: str = ""
    pub_date: str = Field(default="", description="Publication date as published")
    description: str = ""
    content: str = ""
    category: str = ""
    enclosure: str = ""
    enclosure_type: str = ""
    image: str = ""
    hash: str = Field(default="", description="md5 over title, folder and link")
    language: str = ""
    folder: str = ""
    feed: str = ""

    # User-owned state; None means "never set" (older snapshots)
    read: bool | None = None
    favorite: bool | None = None
    created: bool | None = None
    visited: bool | None = None
    tags: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)

    @property
    def published_at(self) -> datetime:
        """Publication instant, the epoch when missing or unparseable."""
        return parse_instant(self.pub_date)

    @property
    def is_unread(self) -> bool:
        return self.read is not True


class FeedSnapshot(BaseModel):
    """Parsed or reconciled state of one feed."""

    name: str
    folder: str = ""
    title: str = ""
    subtitle: str = ""
    link: str = ""
    image: str = ""
    description: str = ""
    language: str = ""
    items: list[FeedItem] = Field(default_factory=list)

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.folder)


class PersistedStore(BaseModel):
    """All feed snapshots, one per configured (name, folder) pair.

    This is the unit written to storage after every reconciliation.
    """

    feeds: list[FeedSnapshot] = Field(default_factory=list)

    def get_feed(self, name: str, folder: str) -> FeedSnapshot | None:
        for feed in self.feeds:
            if feed.name == name and feed.folder == folder:
                return feed
        return None

    def iter_items(self) -> Iterator[FeedItem]:
        for feed in self.feeds:
            yield from feed.items

    def find_item(self, link: str) -> FeedItem | None:
        """Return the item for a link.

        The last occurrence wins, matching the index.
        """
        found = None
        for item in self.iter_items():
            if item.link == link:
                found = item
        return found

    def update_item(self, link: str, **fields) -> FeedItem:
        """Set user-owned fields on the item with the given link.

        Raises:
            KeyError: If no item has this link.
            ValueError: If a field is not user-owned.
        """
        unknown = set(fields) - set(USER_FLAGS) - set(USER_LISTS)
        if unknown:
            raise ValueError(f"Not a user-owned field: {', '.join(sorted(unknown))}")

        item = self.find_item(link)
        if item is None:
            raise KeyError(link)
        for name, value in fields.items():
            setattr(item, name, list(value) if name in USER_LISTS else value)
        return item

    def select_items(self, scope: Scope, name: str | None = None) -> list[FeedItem]:
        """Return the items of a bulk-action scope.

        ``folder`` matches case-insensitively after trimming, ``feed`` matches
        the feed name exactly.
        """
        if scope == "global":
            return list(self.iter_items())
        if not name:
            raise ValueError(f"Scope {scope!r} requires a name")
        if scope == "folder":
            target = name.strip().lower()
            return [
                item
                for feed in self.feeds
                if feed.folder.strip().lower() == target
                for item in feed.items
            ]
        if scope == "feed":
            return [item for feed in self.feeds if feed.name == name for item in feed.items]
        raise ValueError(f"Unknown scope: {scope!r}")
