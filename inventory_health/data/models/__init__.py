from .data_filters import (
    ALL,
    SORT_FIELDS,
    FilterCriteria,
    SortCriteria,
    SortDirection,
    SortField,
)

from .predictions import (
    IngestResponse,
    PredictionRecord,
    Snapshot,
    SnapshotResponse,
    Status,
    StockoutSentinel,
)
from .summary import InventorySummary, StatusCounts
from .list_response import OptionList

__all__ = [
    # Filter classes
    "ALL",
    "SORT_FIELDS",
    "FilterCriteria",
    "SortCriteria",
    "SortDirection",
    "SortField",
    # Record models
    "PredictionRecord",
    "Snapshot",
    "Status",
    "StockoutSentinel",
    # Response models
    "IngestResponse",
    "SnapshotResponse",
    "InventorySummary",
    "StatusCounts",
    # List response models
    "OptionList",
]
