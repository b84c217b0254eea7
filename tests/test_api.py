"""API-level tests for the Flask app."""

from datetime import datetime, timedelta

import pytest

import app as app_module
from app import app

NOW = datetime(2025, 3, 14, 22, 0, 0)


@pytest.fixture(autouse=True)
def fixed_clock(monkeypatch):
    monkeypatch.setattr(app_module, "_now", lambda: NOW)
    yield


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


def setup_profile(client, gender="female", weight=150, weight_unit="lb"):
    res = client.post(
        "/api/profile",
        json={"gender": gender, "weight": weight, "weight_unit": weight_unit},
    )
    assert res.status_code == 200
    return res.get_json()["profile"]


def add_beverage(client, amount=12, volume_unit="oz", abv=5, consumed_time=None):
    payload = {"amount": amount, "volume_unit": volume_unit, "abv": abv}
    if consumed_time is not None:
        payload["consumed_time"] = consumed_time.isoformat()
    res = client.post("/api/beverages", json=payload)
    assert res.status_code == 200
    return res.get_json()["beverage"]


def test_healthz(client):
    res = client.get("/healthz")
    assert res.status_code == 200
    body = res.get_json()
    assert body["status"] == "ok"
    assert "timestamp" in body


def test_state_unconfigured(client):
    res = client.get("/api/state")
    assert res.status_code == 200
    data = res.get_json()
    assert data["configured"] is False
    assert data["bac"] == "0.000"
    assert data["timeToZero"] == "N/A"
    assert data["severity"] == "safe"
    assert data["curve"] == []


def test_profile_get_and_save(client):
    assert client.get("/api/profile").get_json() == {"profile": None}
    setup_profile(client, gender="male", weight=80, weight_unit="kg")
    profile = client.get("/api/profile").get_json()["profile"]
    assert profile == {"gender": "male", "weight": 80.0, "weight_unit": "kg"}


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"gender": "male", "weight": "nan"},
        {"gender": "male", "weight": -1},
        {"gender": "robot", "weight": 150},
        {"gender": "male", "weight": 150, "weight_unit": "furlong"},
    ],
)
def test_profile_rejects_invalid(client, payload):
    res = client.post("/api/profile", json=payload)
    assert res.status_code == 400
    assert "error" in res.get_json()


def test_beverage_requires_profile(client):
    res = client.post("/api/beverages", json={"amount": 12, "abv": 5})
    assert res.status_code == 400


def test_beverage_rejects_invalid(client):
    setup_profile(client)
    res = client.post("/api/beverages", json={"amount": 12, "abv": 150})
    assert res.status_code == 400
    assert "abv" in res.get_json()["error"]


def test_state_after_one_beer(client):
    setup_profile(client)
    bev = add_beverage(client)
    assert bev["id"] > 0
    assert bev["consumed_time"] == NOW.isoformat()

    data = client.get("/api/state").get_json()
    assert data["configured"] is True
    assert data["bac"] == "0.037"
    assert data["bac_value"] == 0.037
    assert data["timeToZero"] == "2 hours 19 minutes"
    assert data["severity"] == "safe"
    assert data["bacLevelClass"] == "text-success"
    assert data["beverage_count"] == 1
    assert data["curve"][0] == {"t": "2025-03-14T22:00", "bac": 0.037}
    assert data["curve"][-1]["bac"] == 0


def test_state_danger(client):
    setup_profile(client, gender="female", weight=120)
    for _ in range(4):
        add_beverage(client, amount=1.5, abv=40)
    data = client.get("/api/state").get_json()
    assert data["severity"] == "danger"
    assert data["bacLevelClass"] == "text-danger"


def test_beverages_listed_newest_first(client):
    setup_profile(client)
    older = add_beverage(client, consumed_time=NOW - timedelta(hours=2))
    newer = add_beverage(client, consumed_time=NOW - timedelta(hours=1))
    items = client.get("/api/beverages").get_json()["items"]
    assert [b["id"] for b in items] == [newer["id"], older["id"]]
    assert older["id"] != newer["id"]


def test_delete_beverage(client):
    setup_profile(client)
    bev = add_beverage(client)
    assert client.delete(f"/api/beverages/{bev['id']}").status_code == 200
    assert client.get("/api/beverages").get_json()["items"] == []
    assert client.delete(f"/api/beverages/{bev['id']}").status_code == 404


def test_reset(client):
    setup_profile(client)
    add_beverage(client)
    assert client.post("/api/reset").get_json() == {"ok": True}
    data = client.get("/api/state").get_json()
    assert data["configured"] is False
    assert data["beverage_count"] == 0


def test_index_renders(client):
    res = client.get("/")
    assert res.status_code == 200
    assert "No profile yet" in res.get_data(as_text=True)

    setup_profile(client)
    add_beverage(client)
    page = client.get("/").get_data(as_text=True)
    assert "0.037%" in page
    assert "text-success" in page
    assert "2 hours 19 minutes" in page


def test_beverage_rejects_out_of_range_time(client):
    setup_profile(client)
    res = client.post(
        "/api/beverages",
        json={"amount": 12, "abv": 5, "consumed_time": "0001-01-01T00:00+05:00"},
    )
    assert res.status_code == 400
    assert "consumed_time" in res.get_json()["error"]


def test_state_survives_far_past_stored_time(client):
    setup_profile(client)
    with client.session_transaction() as sess:
        sess["beverages"] = [
            {
                "id": 1,
                "amount": 12,
                "volume_unit": "oz",
                "abv": 5,
                "consumed_time": "0001-01-01T00:00:00+05:00",
            }
        ]
    res = client.get("/api/state")
    assert res.status_code == 200
    assert res.get_json()["bac"] == "0.000"
    assert client.get("/").status_code == 200


def test_forms_drive_the_index_page(client):
    res = client.post("/profile", data={"gender": "female", "weight": "150", "weight_unit": "lb"})
    assert res.status_code == 302

    res = client.post(
        "/beverages",
        data={"amount": "12", "volume_unit": "oz", "abv": "5", "consumed_time": "2025-03-14T22:00"},
    )
    assert res.status_code == 302
    page = client.get("/").get_data(as_text=True)
    assert "0.037%" in page
    assert 'http-equiv="refresh"' in page

    bev_id = client.get("/api/beverages").get_json()["items"][0]["id"]
    assert f"/beverages/{bev_id}/delete" in page
    assert client.post(f"/beverages/{bev_id}/delete").status_code == 302
    assert client.get("/api/state").get_json()["beverage_count"] == 0


def test_form_errors_are_flashed(client):
    client.post("/profile", data={"gender": "female", "weight": "150"})
    res = client.post("/beverages", data={"amount": "12", "abv": "500"}, follow_redirects=True)
    assert res.status_code == 200
    assert "abv must be between" in res.get_data(as_text=True)
    assert client.get("/api/state").get_json()["beverage_count"] == 0


def test_form_reset(client):
    client.post("/profile", data={"gender": "male", "weight": "180"})
    assert client.post("/reset").status_code == 302
    assert client.get("/api/state").get_json()["configured"] is False
