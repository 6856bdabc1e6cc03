"""Abstract feed transport interface using Protocol."""

from typing import Protocol


class FeedTransport(Protocol):
    """Reads raw feed documents.

    Using Protocol instead of ABC lets tests pass any object with a matching
    coroutine (slow, failing or in-memory transports).
    """

    async def read_feed_document(self, url: str) -> str:
        """Read the raw document behind a feed URL.

        Returns:
            str: Raw XML string.

        Raises:
            FetchError: When the read fails.
        """
        ...
