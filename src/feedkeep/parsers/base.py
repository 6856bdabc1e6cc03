"""Abstract feed parser interface using Protocol."""

from typing import Protocol

from feedkeep.models.feed import FeedSource
from feedkeep.models.item import FeedSnapshot


class FeedParser(Protocol):
    """Feed document parser abstraction protocol."""

    def parse(self, raw_content: str, source: FeedSource) -> FeedSnapshot:
        """Parse a raw feed document.

        Args:
            raw_content: Raw XML string from the transport.
            source: Feed configuration the document belongs to.

        Returns:
            Parsed snapshot.

        Raises:
            ParseError: When parsing fails or the document is not a feed.
        """
        ...
