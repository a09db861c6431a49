import pytest
from fastapi.testclient import TestClient

from inventory_health.backend.service import create_app
from inventory_health.data.store import SnapshotStore


@pytest.fixture
def store():
    return SnapshotStore()


@pytest.fixture
def client(store):
    return TestClient(create_app(store=store))


def test_latest_before_any_ingest(client):
    res = client.get("/latest")
    assert res.status_code == 200
    assert res.json() == {"predictions": [], "last_updated": None}


def test_ingest_then_latest(client, make_raw):
    batch = [make_raw(sku_id="A"), make_raw(sku_id="B", days_to_stockout="Infinity", avg_daily_sales=0)]
    res = client.post("/predictions", json={"predictions": batch})
    assert res.status_code == 200
    ack = res.json()
    assert ack["status"] == "ok"
    assert ack["count"] == 2
    assert ack["last_updated"]

    body = client.get("/latest").json()
    assert [p["sku_id"] for p in body["predictions"]] == ["A", "B"]
    assert body["predictions"][1]["days_to_stockout"] == "Infinity"
    assert body["last_updated"] == ack["last_updated"]


def test_new_batch_replaces_previous(client, make_raw):
    client.post("/predictions", json={"predictions": [make_raw(sku_id="A"), make_raw(sku_id="B")]})
    client.post("/predictions", json={"predictions": [make_raw(sku_id="C")]})
    body = client.get("/latest").json()
    assert [p["sku_id"] for p in body["predictions"]] == ["C"]


def test_empty_batch_clears_snapshot(client, make_raw):
    client.post("/predictions", json={"predictions": [make_raw()]})
    res = client.post("/predictions", json={"predictions": []})
    assert res.status_code == 200
    assert res.json()["count"] == 0
    body = client.get("/latest").json()
    assert body == {"predictions": [], "last_updated": None}


def test_invalid_record_rejects_whole_batch(client, store, make_raw):
    client.post("/predictions", json={"predictions": [make_raw(sku_id="KEEP")]})
    before = store.current()

    res = client.post(
        "/predictions",
        json={"predictions": [make_raw(sku_id="OK"), make_raw(current_stock=-1)]},
    )

    assert res.status_code == 422
    detail = res.json()["detail"]
    assert detail["record_index"] == 1
    assert detail["field"] == "current_stock"
    assert store.current() is before


def test_payload_without_predictions_is_rejected(client):
    res = client.post("/predictions", json={"records": []})
    assert res.status_code == 422
    assert res.json()["detail"]["field"] == "predictions"
