"""Ingest and query HTTP boundary for the prediction snapshot."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, FastAPI, HTTPException

from inventory_health.data.interface import IngestService, QueryService
from inventory_health.data.models import IngestResponse, SnapshotResponse
from inventory_health.data.store import SnapshotStore
from inventory_health.data.util import get_snapshot_store
from inventory_health.data.validation import RecordValidator
from inventory_health.errors import BatchValidationError
from inventory_health.logging import get_logger

logger = get_logger(__name__)


def create_inventory_router(
    store: SnapshotStore,
    validator: Optional[RecordValidator] = None,
) -> APIRouter:
    router = APIRouter(tags=["inventory"])
    ingest_service = IngestService(store, validator)
    query_service = QueryService(store)

    @router.post("/predictions", response_model=IngestResponse)
    def ingest_predictions(payload: Any = Body(...)) -> IngestResponse:
        """Replace the snapshot with a new batch; the whole batch is rejected on any bad record."""
        try:
            return ingest_service.ingest(payload)
        except BatchValidationError as exc:
            raise HTTPException(status_code=422, detail=exc.to_detail()) from exc

    @router.get("/latest", response_model=SnapshotResponse)
    def latest_predictions() -> SnapshotResponse:
        """Return the current snapshot; empty snapshots have a null last_updated."""
        return query_service.latest_response()

    return router


def create_app(
    store: Optional[SnapshotStore] = None,
    validator: Optional[RecordValidator] = None,
) -> FastAPI:
    """Build the service around `store` (the process-wide store by default)."""
    store = store or get_snapshot_store()
    app = FastAPI(title="Inventory Health", version="0.1.0")
    app.include_router(create_inventory_router(store, validator))
    logger.info("Inventory Health service created")
    return app
