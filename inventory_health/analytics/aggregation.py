"""Global aggregates over the full snapshot.

These never look at the active filters: counts and histograms describe the
whole inventory while the table shows the filtered detail.

Each helper accepts the frame from records_to_frame(records) so a caller
computing several aggregates converts the records only once.
"""
from __future__ import annotations

from itertools import islice
from typing import Dict, List, Mapping, Optional, Sequence

import pandas as pd

from inventory_health.config import get_config
from inventory_health.data.models import (
    InventorySummary,
    PredictionRecord,
    Snapshot,
    Status,
    StatusCounts,
)
from inventory_health.data.util import records_to_frame


def _frame(records: Sequence[PredictionRecord], frame: Optional[pd.DataFrame]) -> pd.DataFrame:
    return records_to_frame(records) if frame is None else frame


def status_counts(records: Sequence[PredictionRecord], frame: Optional[pd.DataFrame] = None) -> StatusCounts:
    if not records:
        return StatusCounts()
    counts = _frame(records, frame)["status"].value_counts()
    return StatusCounts(
        critical=int(counts.get(Status.CRITICAL.value, 0)),
        warning=int(counts.get(Status.WARNING.value, 0)),
        safe=int(counts.get(Status.SAFE.value, 0)),
    )


def critical_by_store(records: Sequence[PredictionRecord], frame: Optional[pd.DataFrame] = None) -> Dict[str, int]:
    """Critical record count per store, in order of first appearance.

    Stores without a Critical record are omitted.
    """
    if not records:
        return {}
    df = _frame(records, frame)
    critical = df.loc[df["status"] == Status.CRITICAL.value]
    sizes = critical.groupby("store_id", sort=False).size()
    return {str(store): int(n) for store, n in sizes.items()}


def capped_critical_by_store(mapping: Mapping[str, int], cap: int) -> Dict[str, int]:
    """First `cap` entries of the histogram, for display only."""
    return dict(islice(mapping.items(), max(cap, 0)))


def top_critical(
    records: Sequence[PredictionRecord],
    limit: int = 5,
    descending: bool = True,
    frame: Optional[pd.DataFrame] = None,
) -> List[PredictionRecord]:
    """Critical records ranked by days_to_stockout.

    Descending is the historical ordering and surfaces the least urgent
    Critical items first; pass descending=False for most urgent first.
    """
    if not records:
        return []
    df = _frame(records, frame)
    critical = df.loc[df["status"] == Status.CRITICAL.value]
    ranked = critical.sort_values("days_to_stockout", ascending=not descending, kind="stable")
    return [records[i] for i in ranked.index[:max(limit, 0)]]


def summarize(
    snapshot: Snapshot,
    limit: Optional[int] = None,
    descending: Optional[bool] = None,
    frame: Optional[pd.DataFrame] = None,
) -> InventorySummary:
    """Compute every dashboard aggregate for a snapshot."""
    config = get_config()
    limit = config.top_critical_limit if limit is None else limit
    descending = config.top_critical_descending if descending is None else descending
    records = snapshot.records
    if records and frame is None:
        frame = records_to_frame(records)
    return InventorySummary(
        status_counts=status_counts(records, frame),
        critical_by_store=critical_by_store(records, frame),
        top_critical=top_critical(records, limit=limit, descending=descending, frame=frame),
    )
