from __future__ import annotations

from typing import Any, Optional, Protocol

from inventory_health.errors import BatchValidationError
from inventory_health.logging import get_logger

from .models import IngestResponse, Snapshot, SnapshotResponse
from .store import SnapshotStore
from .validation import RecordValidator


# ---- Snapshot reader protocol ----

class SnapshotReader(Protocol):
    """
    Read-only contract consumers depend on.

    Implementations return whole snapshots; they never expose a mutable
    reference to the records they hold.
    """

    def current(self) -> Snapshot:
        ...


# ---- Boundary services ----

class QueryService:
    """Thin read accessor over the snapshot store."""

    def __init__(self, reader: SnapshotReader) -> None:
        self._reader = reader

    def latest(self) -> Snapshot:
        return self._reader.current()

    def latest_response(self) -> SnapshotResponse:
        """Wire form of the latest snapshot; empty snapshots carry a null timestamp."""
        return self.latest().to_response()


class IngestService:
    """Validates a batch and, only if every record is valid, replaces the snapshot."""

    def __init__(self, store: SnapshotStore, validator: Optional[RecordValidator] = None) -> None:
        self._store = store
        self._validator = validator or RecordValidator()
        self.logger = get_logger(__name__)

    def ingest(self, payload: Any) -> IngestResponse:
        """Ingest a {"predictions": [...]} envelope.

        Returns:
            IngestResponse: Accepted record count and the new snapshot timestamp.
        Raises:
            BatchValidationError: If the envelope or any record is malformed.
                The current snapshot is left untouched.
        """
        try:
            records = self._validator.validate_payload(payload)
        except BatchValidationError as e:
            self.logger.warning(f"Rejected batch: {e}")
            raise
        snapshot = self._store.replace(records)
        self.logger.info(f"Accepted batch of {len(snapshot.records)} records")
        return IngestResponse(count=len(snapshot.records), last_updated=snapshot.last_updated)
