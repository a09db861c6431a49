from __future__ import annotations

from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from .data_filters import ALL


class OptionList(BaseModel):
    """Choices offered by a filter dropdown, "ALL" first."""
    values: List[str] = Field(default_factory=lambda: [ALL], description="ALL followed by distinct sorted values")

    @classmethod
    def from_values(cls, values: Iterable[Optional[str]]) -> OptionList:
        """Build the choices from raw values; empty and missing values are skipped."""
        return cls(values=[ALL] + sorted({v for v in values if v}))
