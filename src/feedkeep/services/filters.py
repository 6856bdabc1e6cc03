"""Evaluation of filter definitions against the item set."""

from collections.abc import Iterable
from dataclasses import dataclass

from feedkeep.models.filter import FilterSpec, SortOrder
from feedkeep.models.item import FeedItem
from feedkeep.utils.dates import timestamp


@dataclass(frozen=True)
class FilterResult:
    """Items selected by one filter, already sorted."""

    spec: FilterSpec
    items: tuple[FeedItem, ...]


def apply_filter(items: Iterable[FeedItem], spec: FilterSpec) -> list[FeedItem]:
    """Select and sort items for one filter.

    Stages narrow the working set in a fixed order: favorites, read state,
    folder/feed/tag inclusion, then folder/feed/tag exclusion. Unread wins
    when both read flags are set.
    """
    selected = list(items)

    if spec.favorites_only:
        selected = [item for item in selected if item.favorite is True]

    if spec.unread_only:
        selected = [item for item in selected if item.read is not True]
    elif spec.read_only:
        selected = [item for item in selected if item.read is True]

    if spec.folders:
        selected = [item for item in selected if item.folder in spec.folders]
    if spec.feeds:
        selected = [item for item in selected if item.feed in spec.feeds]
    if spec.tags:
        wanted = set(spec.tags)
        selected = [item for item in selected if wanted.intersection(item.tags)]

    if spec.ignore_folders:
        selected = [item for item in selected if item.folder not in spec.ignore_folders]
    if spec.ignore_feeds:
        selected = [item for item in selected if item.feed not in spec.ignore_feeds]
    if spec.ignore_tags:
        unwanted = set(spec.ignore_tags)
        selected = [item for item in selected if not unwanted.intersection(item.tags)]

    return sort_items(selected, spec.sort_order)


def sort_items(items: list[FeedItem], order: SortOrder) -> list[FeedItem]:
    """Stable sort; ties keep their input order.

    Unparseable dates count as the epoch, so they go last when the newest
    items come first.
    """
    if order == SortOrder.DATE_OLDEST:
        return sorted(items, key=lambda item: timestamp(item.pub_date))
    if order == SortOrder.ALPHABET_NORMAL:
        return sorted(items, key=_title_key)
    if order == SortOrder.ALPHABET_INVERTED:
        return sorted(items, key=_title_key, reverse=True)
    return sorted(items, key=lambda item: timestamp(item.pub_date), reverse=True)


def _title_key(item: FeedItem) -> tuple[str, str]:
    # Case-insensitive first, like a locale-aware compare
    title = item.title or ""
    return (title.casefold(), title)


def apply_filters(items: Iterable[FeedItem], specs: Iterable[FilterSpec]) -> list[FilterResult]:
    """Evaluate every filter against the same item set."""
    pool = list(items)
    return [FilterResult(spec=spec, items=tuple(apply_filter(pool, spec))) for spec in specs]
