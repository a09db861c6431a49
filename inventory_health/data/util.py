from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import pandas as pd

from .interface import IngestService, QueryService
from .models import OptionList, PredictionRecord
from .store import SnapshotStore

FRAME_COLUMNS = [
    "sku_id", "store_id", "current_stock", "avg_daily_sales",
    "days_to_stockout", "status", "recommended_reorder_quantity", "category", "city",
]

_store: Optional[SnapshotStore] = None


def records_to_frame(records: Sequence[PredictionRecord]) -> pd.DataFrame:
    """Tabular view of records with a positional index back into `records`.

    days_to_stockout becomes float with +inf for never-depleting items so
    numeric comparisons order them above every finite value.
    """
    rows = [
        {
            "sku_id": r.sku_id,
            "store_id": r.store_id,
            "current_stock": r.current_stock,
            "avg_daily_sales": r.avg_daily_sales,
            "days_to_stockout": r.days_sort_value,
            "status": r.status.value,
            "recommended_reorder_quantity": r.reorder_quantity,
            "category": r.category,
            "city": r.city,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS, index=pd.RangeIndex(len(rows)))


def store_options(records: Sequence[PredictionRecord]) -> OptionList:
    return OptionList.from_values(r.store_id for r in records)


def category_options(records: Sequence[PredictionRecord]) -> OptionList:
    """Categories from the full snapshot; records without one are skipped."""
    return OptionList.from_values(r.category for r in records)


def format_last_updated(ts: Optional[datetime]) -> str:
    """Operator-facing timestamp, e.g. 'Oct 18, 2026, 09:15 PM'; 'N/A' when absent."""
    if ts is None:
        return "N/A"
    return f"{ts:%b} {ts.day}, {ts:%Y, %I:%M %p}"


def get_snapshot_store() -> SnapshotStore:
    """Return the process-wide SnapshotStore (singleton pattern)."""
    global _store
    if _store is None:
        _store = SnapshotStore()
    return _store


def get_query_service() -> QueryService:
    return QueryService(get_snapshot_store())


def get_ingest_service() -> IngestService:
    return IngestService(get_snapshot_store())
