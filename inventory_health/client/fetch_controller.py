"""Fetches the latest snapshot, keeping only the newest request's answer.

At most one request token is valid at a time. Starting a request bumps the
generation counter and cancels whatever was in flight; a superseded request
resolves to a `cancelled` result and never touches `state`.
"""
from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from inventory_health.config import get_config
from inventory_health.data.models import Snapshot
from inventory_health.data.validation import RecordValidator
from inventory_health.errors import BatchValidationError, TransportError
from inventory_health.logging import get_logger

LATEST_PATH = "/latest"


class FetchStatus(str, Enum):
    APPLIED = "applied"
    CANCELLED = "cancelled"
    FAILED = "failed"


class FetchResult(BaseModel):
    """Outcome of one request() call."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: FetchStatus = Field(description="applied, cancelled or failed")
    snapshot: Optional[Snapshot] = Field(default=None, description="The applied snapshot")
    error: Optional[TransportError] = Field(default=None, description="Why a failed request failed")

    @property
    def retryable(self) -> bool:
        return self.status is FetchStatus.FAILED


class FetchState(BaseModel):
    """What the operator currently sees."""
    snapshot: Snapshot = Field(default_factory=Snapshot, description="Last applied snapshot")
    loading: bool = Field(default=False, description="A request is in flight")
    error: Optional[str] = Field(default=None, description="Message of the last failure, cleared on success")


def parse_snapshot(data: Any, validator: Optional[RecordValidator] = None) -> Snapshot:
    """Decode a query-boundary payload into a Snapshot.

    Accepts the records under "predictions", or "records" when "predictions"
    is missing. When the envelope has no last_updated, the first record's
    last_updated is used.

    Raises:
        TransportError: If the payload has the wrong shape or invalid records.
    """
    if not isinstance(data, dict):
        raise TransportError("Unexpected response shape: expected a JSON object")
    raw = data.get("predictions") or data.get("records") or []
    validator = validator or RecordValidator(derive_status=False)
    try:
        records = validator.validate_batch(raw)
    except BatchValidationError as e:
        raise TransportError(f"Invalid snapshot payload: {e}") from e
    last_updated = data.get("last_updated")
    if last_updated is None and raw and isinstance(raw[0], dict):
        last_updated = raw[0].get("last_updated")
    try:
        return Snapshot(records=tuple(records), last_updated=last_updated)
    except ValidationError as e:
        raise TransportError(f"Invalid snapshot timestamp: {last_updated!r}") from e


class FetchController:
    """Cancel-on-supersede fetcher for GET {base_url}/latest."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        config = get_config()
        self.base_url = (base_url or config.api_base_url).rstrip("/")
        self.timeout = config.fetch_timeout_seconds if timeout is None else timeout
        # Injected clients are reused; otherwise each request opens its own
        self._client = client
        self._generation = 0
        self._inflight: Optional[asyncio.Task] = None
        self._closed = False
        self._validator = RecordValidator(derive_status=False)
        self.state = FetchState()
        self.logger = get_logger(__name__)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    async def request(self) -> FetchResult:
        """Fetch the latest snapshot, superseding any request still in flight.

        Returns:
            FetchResult: `applied` when this request's snapshot became visible,
            `cancelled` when a newer request (or close()) superseded it,
            `failed` with a retryable TransportError otherwise.
        Raises:
            RuntimeError: If the controller has been closed.
        """
        if self._closed:
            raise RuntimeError("FetchController is closed")
        self._cancel_inflight()
        self._generation += 1
        token = self._generation
        task = asyncio.ensure_future(self._fetch_snapshot())
        self._inflight = task
        self.state.loading = True
        self.state.error = None
        self.logger.debug(f"Fetch {token} started")
        try:
            snapshot = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if token != self._generation and not (current and current.cancelling()):
                self.logger.debug(f"Fetch {token} superseded")
                return FetchResult(status=FetchStatus.CANCELLED)
            if token == self._generation:
                self.state.loading = False
            raise
        except TransportError as e:
            if token != self._generation:
                self.logger.debug(f"Fetch {token} failed after being superseded; discarded")
                return FetchResult(status=FetchStatus.CANCELLED)
            self.state.loading = False
            self.state.error = e.message
            self.logger.warning(f"Fetch {token} failed: {e.message}")
            return FetchResult(status=FetchStatus.FAILED, error=e)
        finally:
            if self._inflight is task:
                self._inflight = None

        if token != self._generation:
            self.logger.debug(f"Fetch {token} completed after being superseded; discarded")
            return FetchResult(status=FetchStatus.CANCELLED)
        self.state.snapshot = snapshot
        self.state.loading = False
        self.state.error = None
        self.logger.info(f"Fetch {token} applied {len(snapshot.records)} records")
        return FetchResult(status=FetchStatus.APPLIED, snapshot=snapshot)

    async def retry(self) -> FetchResult:
        return await self.request()

    def cancel(self) -> None:
        """Invalidate and cancel the outstanding request, if any."""
        self._generation += 1
        self._cancel_inflight()
        self.state.loading = False

    async def aclose(self) -> None:
        """Tear down: cancel the outstanding request; later request() calls fail."""
        if self._closed:
            return
        self._closed = True
        self.cancel()

    async def __aenter__(self) -> FetchController:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _cancel_inflight(self) -> None:
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None

    async def _fetch_snapshot(self) -> Snapshot:
        url = f"{self.base_url}{LATEST_PATH}"
        try:
            if self._client is not None:
                res = await self._client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    res = await client.get(url)
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to fetch data: {e}") from e
        if not res.is_success:
            raise TransportError(f"API error: {res.status_code}", status_code=res.status_code)
        try:
            data = res.json()
        except ValueError as e:
            raise TransportError("API returned a body that is not valid JSON") from e
        return parse_snapshot(data, self._validator)
