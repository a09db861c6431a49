from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Callable, Iterable

from inventory_health.logging import get_logger

from .models import PredictionRecord, Snapshot


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SnapshotStore:
    """
    Holds exactly one current snapshot.
    - replace() builds a new immutable Snapshot and swaps the reference under a lock.
    - current() hands out the reference; readers never see a partially built snapshot.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot = Snapshot()
        self.logger = get_logger(__name__)

    def replace(self, records: Iterable[PredictionRecord]) -> Snapshot:
        """Swap the whole current snapshot for one built from `records`.

        Args:
            records (Iterable[PredictionRecord]): Already validated records.
        Returns:
            Snapshot: The snapshot now visible to readers.
        """
        # Build outside the lock so the swap itself is a single assignment
        snapshot = Snapshot(records=tuple(records), last_updated=self._clock())
        with self._lock:
            self._snapshot = snapshot
        self.logger.info(
            f"Snapshot replaced with {len(snapshot.records)} records at {snapshot.last_updated.isoformat()}"
        )
        return snapshot

    def current(self) -> Snapshot:
        """Return the latest snapshot, or the empty initial one."""
        with self._lock:
            return self._snapshot
