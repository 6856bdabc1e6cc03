"""Utils package."""

from feedkeep.utils.cache import TTLCache
from feedkeep.utils.cancellation import CancellationToken
from feedkeep.utils.dates import parse_instant, timestamp
from feedkeep.utils.http_client import create_http_client
from feedkeep.utils.logger import configure_logging, get_logger

__all__ = [
    "CancellationToken",
    "TTLCache",
    "configure_logging",
    "create_http_client",
    "get_logger",
    "parse_instant",
    "timestamp",
]
