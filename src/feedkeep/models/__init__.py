"""Models package."""

from feedkeep.models.feed import FeedCollection, FeedSource, load_feed_collection
from feedkeep.models.filter import FilterSpec, SortOrder
from feedkeep.models.item import FeedItem, FeedSnapshot, PersistedStore

__all__ = [
    "FeedSource",
    "FeedCollection",
    "load_feed_collection",
    "FeedItem",
    "FeedSnapshot",
    "PersistedStore",
    "FilterSpec",
    "SortOrder",
]
