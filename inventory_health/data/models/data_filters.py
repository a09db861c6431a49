from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ALL = "ALL"

SortField = Literal["sku_id", "store_id", "days_to_stockout", "recommended_reorder_quantity"]
SortDirection = Literal["asc", "desc"]

SORT_FIELDS = ("sku_id", "store_id", "days_to_stockout", "recommended_reorder_quantity")


class FilterCriteria(BaseModel):
    """Filters for the detail table. All predicates are AND-combined."""
    model_config = ConfigDict(frozen=True)

    store: str = Field(default=ALL, description="Store ID filter, or ALL")
    category: str = Field(default=ALL, description="Category filter, or ALL")
    critical_only: bool = Field(default=False, description="Only show Critical records")
    search_term: str = Field(default="", description="Case-insensitive SKU substring")


class SortCriteria(BaseModel):
    """Sort field and direction for the detail table."""
    model_config = ConfigDict(frozen=True)

    field: SortField = Field(default="sku_id", description="Column to sort by")
    direction: SortDirection = Field(default="asc", description="asc or desc")

    @property
    def ascending(self) -> bool:
        return self.direction == "asc"

    def toggled(self, field: SortField) -> SortCriteria:
        """Re-selecting the active field flips direction; a new field starts ascending."""
        if field == self.field:
            return SortCriteria(field=field, direction="desc" if self.ascending else "asc")
        return SortCriteria(field=field, direction="asc")
