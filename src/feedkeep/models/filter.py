"""Filter definition models."""

from enum import Enum

from pydantic import BaseModel, Field


class SortOrder(str, Enum):
    """Ordering applied to a filter's result set."""

    DATE_NEWEST = "DATE_NEWEST"
    DATE_OLDEST = "DATE_OLDEST"
    ALPHABET_NORMAL = "ALPHABET_NORMAL"
    ALPHABET_INVERTED = "ALPHABET_INVERTED"


class FilterSpec(BaseModel):
    """A named, user-defined predicate and sort order.

    Inclusion lists are OR'ed within themselves and skipped when empty.
    When both ``unread_only`` and ``read_only`` are set, unread wins.
    """

    name: str = Field(..., description="Display name of the filtered folder")

    favorites_only: bool = False
    read_only: bool = False
    unread_only: bool = False

    folders: list[str] = Field(default_factory=list)
    feeds: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    ignore_folders: list[str] = Field(default_factory=list)
    ignore_feeds: list[str] = Field(default_factory=list)
    ignore_tags: list[str] = Field(default_factory=list)

    sort_order: SortOrder = SortOrder.DATE_NEWEST
