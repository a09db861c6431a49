"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from inventory_health.config import set_config_for_test
from inventory_health.data.models import PredictionRecord


def make_raw_record(**overrides) -> dict:
    """A valid raw prediction record; keyword arguments replace fields."""
    raw = {
        "sku_id": "A",
        "store_id": "S1",
        "current_stock": 5,
        "avg_daily_sales": 1,
        "days_to_stockout": 5,
        "status": "Warning",
        "recommended_reorder_quantity": 10,
        "category": "X",
        "city": "C",
    }
    raw.update(overrides)
    return raw


@pytest.fixture(autouse=True)
def quiet_config():
    set_config_for_test(log_level="WARNING")
    yield


@pytest.fixture
def make_raw():
    return make_raw_record


@pytest.fixture
def make_record():
    def _make(**overrides) -> PredictionRecord:
        return PredictionRecord.model_validate(make_raw_record(**overrides))
    return _make
