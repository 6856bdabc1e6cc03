"""Services package."""

from feedkeep.services.fetcher import FeedFetcher
from feedkeep.services.filters import FilterResult, apply_filter, apply_filters, sort_items
from feedkeep.services.index import FeedIndex, build_index
from feedkeep.services.item_state import ItemStateService
from feedkeep.services.orchestrator import RefreshState, UpdateOrchestrator
from feedkeep.services.reconcile import ReconciliationEngine

__all__ = [
    "FeedFetcher",
    "FeedIndex",
    "FilterResult",
    "ItemStateService",
    "ReconciliationEngine",
    "RefreshState",
    "UpdateOrchestrator",
    "apply_filter",
    "apply_filters",
    "build_index",
    "sort_items",
]
