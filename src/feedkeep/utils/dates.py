"""Publication date helpers."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_instant(value: str | None) -> datetime:
    """Parse a feed date string into an aware datetime.

    RSS uses RFC 2822 dates, Atom and Dublin Core use ISO 8601. Anything
    missing or unparseable maps to the epoch so it sorts last when newest
    items come first.
    """
    if not value:
        return EPOCH
    text = value.strip()
    if not text:
        return EPOCH

    parsed: datetime | None = None
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        parsed = None

    if parsed is None:
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return EPOCH

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def timestamp(value: str | None) -> float:
    """Seconds since the epoch for a feed date string (0.0 when unparseable)."""
    return parse_instant(value).timestamp()
