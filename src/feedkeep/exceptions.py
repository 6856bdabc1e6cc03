"""Custom exceptions for feedkeep.

Provides a structured exception hierarchy for different error scenarios.
"""


class FeedkeepError(Exception):
    """Base exception class for all feedkeep errors."""

    pass


class FetchError(FeedkeepError):
    """Raised when reading a feed document fails.

    Attributes:
        source_id: The identifier (URL or feed name) of the feed that failed.
    """

    def __init__(self, source_id: str, message: str):
        self.source_id = source_id
        super().__init__(f"Failed to fetch {source_id}: {message}")


class FetchTimeoutError(FetchError):
    """Raised when a feed read exceeds its time budget."""

    pass


class ParseError(FeedkeepError):
    """Raised when a feed document cannot be parsed.

    Attributes:
        source_id: The identifier of the feed with the parse error.
    """

    def __init__(self, source_id: str, message: str):
        self.source_id = source_id
        super().__init__(f"Failed to parse {source_id}: {message}")


class StorageError(FeedkeepError):
    """Raised when loading or saving the persisted store fails."""

    pass


class ConfigurationError(FeedkeepError):
    """Raised when settings or the feed collection are invalid."""

    pass
