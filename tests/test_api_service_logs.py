import pytest
from fastapi.testclient import TestClient

from apguard.api.deps import get_gateway
from apguard.main import app
from tests.fakes import InMemoryGateway


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as c:
        yield c


def make_log(essid, bssid, signals=-45):
    return {
        "essid": essid,
        "bssid": bssid,
        "signals": signals,
        "channel": 11,
        "frequency": 2462,
        "security": "WPA2-PSK",
    }


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"db_ok": True}


def test_service_logs_invalid_payload_returns_422(client):
    response = client.post("/v1/service-logs", json={"logs": "nope"})
    assert response.status_code == 422


def test_service_logs_detects_evil_twin(client):
    response = client.post("/v1/service-logs", json={"logs": [make_log("ApiCorp", "10:00:00:00:00:01")]})
    assert response.status_code == 201
    assert response.json() == {"accepted": 1, "skipped": 0, "incidents_raised": []}

    response = client.post("/v1/service-logs", json={"logs": [
        make_log("ApiCorp", "10:00:00:00:00:02"),
        {"bssid": "10:00:00:00:00:03", "signals": -50},
    ]})
    assert response.status_code == 201
    data = response.json()
    assert data["accepted"] == 1
    assert data["skipped"] == 1
    assert len(data["incidents_raised"]) == 1

    response = client.get(
        "/v1/check-access-point", params={"bssid": "10:00:00:00:00:02", "essid": "ApiCorp"}
    )
    assert response.status_code == 200
    incidents = response.json()
    assert len(incidents) == 1
    assert incidents[0]["classification"] == "Suspected Evil Twin"
    assert incidents[0]["reporter_email"] == "unknown"


def test_check_access_point_without_incidents_returns_404(client):
    response = client.get(
        "/v1/check-access-point", params={"bssid": "10:00:00:00:00:01", "essid": "ApiCorp"}
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "No attacks detected"


def test_register_and_get_access_point(client):
    response = client.post("/v1/access-point", json={
        "bssid": "20:00:00:00:00:01",
        "essid": "Warehouse",
        "signals": -61,
        "equipment_code": "INV-001",
        "equipment_name": "Warehouse AP",
        "location": "Dock 3",
        "ieee_standard": "802.11ac",
    })
    assert response.status_code == 201
    hwid = response.json()["hwid"]

    response = client.get("/v1/access-point", params={"bssid": "20:00:00:00:00:01"})
    assert response.status_code == 200
    data = response.json()
    assert data["hwid"] == hwid
    assert data["essid"] == "Warehouse"
    assert data["equipment_name"] == "Warehouse AP"
    assert data["channel"] == 0


def test_get_unknown_access_point_returns_404(client):
    response = client.get("/v1/access-point", params={"bssid": "FF:FF:FF:FF:FF:FF"})
    assert response.status_code == 404


def test_service_logs_null_item_is_skipped(client):
    response = client.post("/v1/service-logs", json={"logs": [
        make_log("NullBatch", "30:00:00:00:00:01"),
        None,
        make_log("NullBatch2", "30:00:00:00:00:02"),
    ]})
    assert response.status_code == 201
    data = response.json()
    assert data["accepted"] == 2
    assert data["skipped"] == 1


def test_get_hardware_from_registry(client):
    client.post("/v1/service-logs", json={"logs": [
        {**make_log("HwLookup", "40:00:00:00:00:01"), "deviceName": "Hall AP"},
    ]})
    response = client.get("/v1/hardware", params={"bssid": "40:00:00:00:00:01"})
    assert response.status_code == 200
    assert response.json()["equipment_name"] == "Hall AP"

    response = client.get("/v1/hardware", params={"bssid": "40:00:00:00:00:99"})
    assert response.status_code == 404


def test_vendor_from_bssid(client):
    response = client.get("/v1/vendor-from-bssid", params={"bssid": "00:1B:77:49:54:FD"})
    assert response.status_code == 200
    assert response.json() == {"bssid": "00:1B:77:49:54:FD", "vendor": "Intel Corporate"}


def test_vendor_from_unregistered_bssid_is_null(client):
    # Локально администрируемый адрес в реестре IEEE не бывает
    response = client.get("/v1/vendor-from-bssid", params={"bssid": "02:00:00:00:00:01"})
    assert response.status_code == 200
    assert response.json()["vendor"] is None


def test_vendor_from_invalid_bssid_returns_422(client):
    response = client.get("/v1/vendor-from-bssid", params={"bssid": "INVALID_BSSID"})
    assert response.status_code == 422
    assert "Некорректный BSSID" in response.text


@pytest.fixture
def failing_gateway(client):
    gateway = InMemoryGateway()
    app.dependency_overrides[get_gateway] = lambda: gateway
    yield gateway
    app.dependency_overrides.clear()


def test_storage_error_on_ingest_returns_503(client, failing_gateway):
    failing_gateway.fail_on = {"upsert_hardware"}
    response = client.post("/v1/service-logs", json={"logs": [make_log("Down", "50:00:00:00:00:01")]})
    assert response.status_code == 503
    assert response.json()["detail"] == "Storage unavailable, resubmit the batch"


def test_storage_error_on_lookups_returns_503(client, failing_gateway):
    failing_gateway.fail_on = {"latest_observation", "list_incidents", "find_hardware_by_address", "upsert_hardware"}
    assert client.get("/v1/access-point", params={"bssid": "50:00:00:00:00:01"}).status_code == 503
    assert client.get(
        "/v1/check-access-point", params={"bssid": "50:00:00:00:00:01", "essid": "Down"}
    ).status_code == 503
    assert client.get("/v1/hardware", params={"bssid": "50:00:00:00:00:01"}).status_code == 503
    response = client.post("/v1/access-point", json={"bssid": "50:00:00:00:00:01", "essid": "Down"})
    assert response.status_code == 503
