from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class Status(str, Enum):
    """Stockout risk bucket supplied by the prediction producer."""
    CRITICAL = "Critical"
    WARNING = "Warning"
    SAFE = "Safe"


class StockoutSentinel(str, Enum):
    """Explicit marker for items that never deplete at the current sales rate."""
    NEVER = "Infinity"


INFINITY_LITERALS = frozenset({"infinity", "+infinity", "inf", "+inf", "∞"})

FiniteDays = Annotated[float, Field(ge=0, allow_inf_nan=False)]


class PredictionRecord(BaseModel):
    """One SKU at one store at snapshot time."""
    model_config = ConfigDict(frozen=True)

    sku_id: StrictStr = Field(description="Stock-keeping unit identifier")
    store_id: StrictStr = Field(description="Store identifier")
    current_stock: float = Field(ge=0, strict=True, allow_inf_nan=False, description="Units on hand")
    avg_daily_sales: float = Field(ge=0, strict=True, allow_inf_nan=False, description="Average units sold per day")
    days_to_stockout: Union[StockoutSentinel, FiniteDays] = Field(
        union_mode="left_to_right",
        description="Days until stock runs out, or Infinity when it never does",
    )
    status: Status = Field(description="Critical, Warning or Safe")
    # Key is required, value may be null
    recommended_reorder_quantity: Optional[int] = Field(ge=0, strict=True, description="Units to reorder")
    category: Optional[StrictStr] = Field(default=None, description="Product category")
    city: Optional[StrictStr] = Field(default=None, description="Store city")

    @field_validator("days_to_stockout", mode="before")
    @classmethod
    def _normalize_days(cls, value):
        if isinstance(value, StockoutSentinel):
            return value
        if isinstance(value, str):
            if value.strip().lower() in INFINITY_LITERALS:
                return StockoutSentinel.NEVER
            raise ValueError("must be a non-negative number or Infinity")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("must be a non-negative number or Infinity")
        if math.isinf(value) and value > 0:
            return StockoutSentinel.NEVER
        return value

    @property
    def never_stocks_out(self) -> bool:
        return self.days_to_stockout is StockoutSentinel.NEVER

    @property
    def days_sort_value(self) -> float:
        """Numeric comparison key: the sentinel orders above every finite value."""
        if self.never_stocks_out:
            return math.inf
        return float(self.days_to_stockout)

    @property
    def reorder_quantity(self) -> int:
        return self.recommended_reorder_quantity or 0


class Snapshot(BaseModel):
    """The single current batch of records plus the time it was stored.

    Instances are immutable; the store swaps whole snapshots, never edits one.
    """
    model_config = ConfigDict(frozen=True)

    records: Tuple[PredictionRecord, ...] = Field(default=(), description="Records in ingest order")
    last_updated: Optional[datetime] = Field(default=None, description="Time of the last successful ingest")

    @property
    def is_empty(self) -> bool:
        return not self.records

    def to_response(self) -> SnapshotResponse:
        """Wire form; an empty snapshot is reported with a null last_updated."""
        if self.is_empty:
            return SnapshotResponse()
        return SnapshotResponse(predictions=list(self.records), last_updated=self.last_updated)


class SnapshotResponse(BaseModel):
    """Wire shape of the query boundary."""
    predictions: List[PredictionRecord] = Field(default_factory=list, description="Current records")
    last_updated: Optional[datetime] = Field(default=None, description="Snapshot timestamp")


class IngestResponse(BaseModel):
    """Acknowledgement returned to the producer after a successful ingest."""
    status: str = Field(default="ok", description="Always 'ok' on success")
    count: int = Field(description="Number of accepted records")
    last_updated: datetime = Field(description="Timestamp stamped on the new snapshot")
