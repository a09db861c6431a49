"""Gatekeeping for incoming prediction batches.

A batch is accepted or rejected as a unit: the first malformed record stops
validation and nothing from the batch reaches the snapshot store.
"""
from __future__ import annotations

from typing import Any, List, Optional, Sequence, Union

from pydantic import ValidationError

from inventory_health.config import get_config
from inventory_health.errors import BatchValidationError

from .models import PredictionRecord, Status, StockoutSentinel


def classify_days(
    days: Union[float, StockoutSentinel],
    critical_threshold: float = 3.0,
    warning_threshold: float = 7.0,
) -> Status:
    """Map days-to-stockout onto the documented status buckets."""
    if days is StockoutSentinel.NEVER:
        return Status.SAFE
    if days < critical_threshold:
        return Status.CRITICAL
    if days < warning_threshold:
        return Status.WARNING
    return Status.SAFE


class RecordValidator:
    """Validates raw record mappings into PredictionRecord instances.

    By default the producer's status is kept verbatim. With derive_status
    enabled the status is recomputed from days_to_stockout.
    """
    def __init__(
        self,
        derive_status: Optional[bool] = None,
        critical_threshold: Optional[float] = None,
        warning_threshold: Optional[float] = None,
    ) -> None:
        config = get_config()
        self.derive_status = config.derive_status if derive_status is None else derive_status
        self.critical_threshold = (
            config.critical_days_threshold if critical_threshold is None else critical_threshold
        )
        self.warning_threshold = (
            config.warning_days_threshold if warning_threshold is None else warning_threshold
        )

    def validate_record(self, raw: Any, index: int) -> PredictionRecord:
        try:
            record = PredictionRecord.model_validate(raw)
        except ValidationError as e:
            first = e.errors()[0]
            field = str(first["loc"][0]) if first["loc"] else "<record>"
            raise BatchValidationError(index, field, first["msg"]) from e
        if self.derive_status:
            status = classify_days(record.days_to_stockout, self.critical_threshold, self.warning_threshold)
            if status != record.status:
                record = record.model_copy(update={"status": status})
        return record

    def validate_batch(self, batch: Any) -> List[PredictionRecord]:
        """Validate every element of a batch, failing on the first bad record.

        Args:
            batch (Sequence): Raw record mappings. An empty sequence is valid.
        Returns:
            List[PredictionRecord]: Records in input order.
        Raises:
            BatchValidationError: If the batch is not a list or any record is malformed.
        """
        if isinstance(batch, (str, bytes)) or not isinstance(batch, Sequence):
            raise BatchValidationError(None, "predictions", "Input should be a valid list")
        records = [self.validate_record(raw, i) for i, raw in enumerate(batch)]
        return records

    def validate_payload(self, payload: Any) -> List[PredictionRecord]:
        """Validate an ingest envelope of the form {"predictions": [...]}."""
        if not isinstance(payload, dict) or "predictions" not in payload:
            raise BatchValidationError(None, "predictions", "Field required")
        return self.validate_batch(payload["predictions"])
