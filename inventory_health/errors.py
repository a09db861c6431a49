"""Error taxonomy shared by the ingest, fetch and export paths."""

from __future__ import annotations

from typing import Optional


class InventoryError(Exception):
    """Base class for all inventory health errors."""


class BatchValidationError(InventoryError):
    """A submitted batch contains a malformed record; the whole batch is rejected."""

    def __init__(self, record_index: Optional[int], field: str, message: str) -> None:
        self.record_index = record_index
        self.field = field
        self.message = message
        where = "batch" if record_index is None else f"record {record_index}"
        super().__init__(f"Invalid {where}, field '{field}': {message}")

    def to_detail(self) -> dict:
        return {
            "record_index": self.record_index,
            "field": self.field,
            "message": self.message,
        }


class TransportError(InventoryError):
    """Network or protocol failure while fetching the latest snapshot."""

    retryable = True

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class EmptyExportError(InventoryError):
    """Raised when an export is requested for an empty view."""

    def __init__(self) -> None:
        super().__init__("No data to export")
