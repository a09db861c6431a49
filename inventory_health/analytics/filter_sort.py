"""Filtered, sorted detail view over a snapshot.

Pure functions: the input records are never mutated and the same inputs
always produce the same ordered view.

Ordering rules:
- string fields compare by plain code point order (not locale-aware);
- days_to_stockout compares numerically with never-depleting items above
  every finite value, so they come last ascending and first descending;
- the sort is stable in both directions, so ties keep their filtered order.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

import pandas as pd

from inventory_health.data.models import ALL, FilterCriteria, PredictionRecord, SortCriteria, Status
from inventory_health.data.util import records_to_frame


def filter_mask(df: pd.DataFrame, filters: FilterCriteria) -> pd.Series:
    """Boolean mask AND-combining the store, category, critical-only and search predicates."""
    mask = pd.Series(True, index=df.index)
    if filters.store != ALL:
        mask &= (df["store_id"] == filters.store)
    if filters.category != ALL:
        mask &= (df["category"] == filters.category)
    if filters.critical_only:
        mask &= (df["status"] == Status.CRITICAL.value)
    term = filters.search_term.strip().lower()
    if term:
        mask &= df["sku_id"].str.lower().str.contains(term, regex=False)
    return mask


def apply_filters(records: Sequence[PredictionRecord], filters: FilterCriteria) -> List[PredictionRecord]:
    if not records:
        return []
    df = records_to_frame(records)
    return [records[i] for i in df.loc[filter_mask(df, filters)].index]


def sort_records(records: Sequence[PredictionRecord], sort: SortCriteria) -> List[PredictionRecord]:
    if not records:
        return []
    df = records_to_frame(records)
    ordered = df.sort_values(sort.field, ascending=sort.ascending, kind="stable")
    return [records[i] for i in ordered.index]


def build_view(
    records: Sequence[PredictionRecord],
    filters: FilterCriteria,
    sort: SortCriteria,
    frame: Optional[pd.DataFrame] = None,
) -> List[PredictionRecord]:
    """Filter then sort `records` into the ordered view shown in the table.

    `frame`, when given, must be records_to_frame(records).
    """
    if not records:
        return []
    df = records_to_frame(records) if frame is None else frame
    view = df.loc[filter_mask(df, filters)]
    view = view.sort_values(sort.field, ascending=sort.ascending, kind="stable")
    return [records[i] for i in view.index]
