from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from .predictions import PredictionRecord, Status


class StatusCounts(BaseModel):
    """Record counts per status over the whole snapshot."""
    critical: int = Field(default=0, description="Records with status Critical")
    warning: int = Field(default=0, description="Records with status Warning")
    safe: int = Field(default=0, description="Records with status Safe")

    @property
    def total(self) -> int:
        return self.critical + self.warning + self.safe

    def as_dict(self) -> Dict[str, int]:
        return {
            Status.CRITICAL.value: self.critical,
            Status.WARNING.value: self.warning,
            Status.SAFE.value: self.safe,
        }


class InventorySummary(BaseModel):
    """Global aggregates shown beside the filtered table."""
    status_counts: StatusCounts = Field(description="Counts per status")
    critical_by_store: Dict[str, int] = Field(description="Critical record count per store")
    top_critical: List[PredictionRecord] = Field(description="Ranked Critical records")
