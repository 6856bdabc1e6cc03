"""Sources package."""

from feedkeep.sources.base import FeedTransport
from feedkeep.sources.http import HttpFeedTransport

__all__ = [
    "FeedTransport",
    "HttpFeedTransport",
]
