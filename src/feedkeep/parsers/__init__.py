"""Parsers package."""

from feedkeep.parsers.base import FeedParser
from feedkeep.parsers.document import FeedDocumentParser, item_hash

__all__ = [
    "FeedParser",
    "FeedDocumentParser",
    "item_hash",
]
