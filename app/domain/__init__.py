"""
app/domain package marker.
"""

from app.domain.surveillance import (
    AnomalyStatus,
    DashboardSummary,
    DirectoryItem,
    DirectoryListing,
    Discovery,
    EntryTable,
    SearchFilters,
    SearchResult,
    TableStatus,
)

__all__ = [
    "AnomalyStatus",
    "DashboardSummary",
    "DirectoryItem",
    "DirectoryListing",
    "Discovery",
    "EntryTable",
    "SearchFilters",
    "SearchResult",
    "TableStatus",
]
