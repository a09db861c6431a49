"""Consumer-side dashboard session.

Owns the operator's filter and sort criteria and derives everything shown on
the page from (snapshot, filters, sort). Recomputation is synchronous and
pure; the only suspension point is FetchController.request().
"""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from inventory_health.analytics.aggregation import capped_critical_by_store, summarize
from inventory_health.analytics.export import encode_csv
from inventory_health.analytics.filter_sort import build_view
from inventory_health.config import get_config
from inventory_health.data.models import (
    FilterCriteria,
    InventorySummary,
    PredictionRecord,
    Snapshot,
    SortCriteria,
    SortField,
)
from inventory_health.data.util import category_options, format_last_updated, records_to_frame, store_options

from .debounce import SearchDebouncer
from .fetch_controller import FetchController, FetchResult


class DashboardView(BaseModel):
    """Everything the page renders for one (snapshot, filters, sort) triple."""
    model_config = ConfigDict(frozen=True)

    rows: List[PredictionRecord] = Field(description="Filtered, sorted detail rows")
    summary: InventorySummary = Field(description="Aggregates over the full snapshot")
    critical_by_store_display: Dict[str, int] = Field(description="Capped critical-by-store histogram")
    store_options: List[str] = Field(description="Store dropdown choices")
    category_options: List[str] = Field(description="Category dropdown choices")
    last_updated: str = Field(description="Operator-facing timestamp text")
    total_records: int = Field(description="Records in the full snapshot")


def compute_view(
    snapshot: Snapshot,
    filters: FilterCriteria,
    sort: SortCriteria,
    store_cap: Optional[int] = None,
) -> DashboardView:
    """Filtered detail plus global aggregates for a snapshot."""
    config = get_config()
    store_cap = config.critical_by_store_cap if store_cap is None else store_cap
    records = snapshot.records
    frame = records_to_frame(records) if records else None
    summary = summarize(snapshot, frame=frame)
    return DashboardView(
        rows=build_view(records, filters, sort, frame=frame),
        summary=summary,
        critical_by_store_display=capped_critical_by_store(summary.critical_by_store, store_cap),
        store_options=store_options(records).values,
        category_options=category_options(records).values,
        last_updated=format_last_updated(snapshot.last_updated),
        total_records=len(records),
    )


class DashboardSession:
    """One operator's view state: criteria, search debouncing and the fetcher."""

    def __init__(
        self,
        controller: Optional[FetchController] = None,
        debouncer: Optional[SearchDebouncer] = None,
    ) -> None:
        self.controller = controller or FetchController()
        self.debouncer = debouncer or SearchDebouncer()
        self.filters = FilterCriteria()
        self.sort = SortCriteria()

    @property
    def snapshot(self) -> Snapshot:
        return self.controller.state.snapshot

    @property
    def error(self) -> Optional[str]:
        return self.controller.state.error

    @property
    def loading(self) -> bool:
        return self.controller.state.loading

    # ---------- operator actions ----------

    def set_store(self, store: str) -> None:
        self.filters = self.filters.model_copy(update={"store": store})

    def set_category(self, category: str) -> None:
        self.filters = self.filters.model_copy(update={"category": category})

    def set_critical_only(self, critical_only: bool) -> None:
        self.filters = self.filters.model_copy(update={"critical_only": critical_only})

    def type_search(self, term: str) -> None:
        """Feed raw search input; it takes effect after the debounce window."""
        self.debouncer.update(term)
        self._sync_search(self.debouncer.poll())

    def commit_search(self, immediate: bool = False) -> str:
        """Apply the pending search term if due (or now, with immediate=True)."""
        term = self.debouncer.flush() if immediate else self.debouncer.poll()
        self._sync_search(term)
        return term

    def toggle_sort(self, field: SortField) -> SortCriteria:
        self.sort = self.sort.toggled(field)
        return self.sort

    def reset_filters(self) -> None:
        self.filters = FilterCriteria()
        self.debouncer.update("")
        self.debouncer.flush()

    # ---------- derived state ----------

    def view(self) -> DashboardView:
        self.commit_search()
        return compute_view(self.snapshot, self.filters, self.sort)

    def export_csv(self) -> str:
        """CSV of the current filtered, sorted rows; raises EmptyExportError when there are none."""
        return encode_csv(self.view().rows)

    # ---------- fetching ----------

    async def refresh(self) -> FetchResult:
        return await self.controller.request()

    async def close(self) -> None:
        await self.controller.aclose()

    def _sync_search(self, term: str) -> None:
        if term != self.filters.search_term:
            self.filters = self.filters.model_copy(update={"search_term": term})
