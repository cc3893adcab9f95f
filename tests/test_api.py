import pytest
from fastapi.testclient import TestClient

from margin_tool.api.main import app


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_derive_markup(client):
    response = client.post("/derive", json={"cost": 100, "markup": 50})
    assert response.status_code == 200
    body = response.json()
    assert body["basis"] == "markup"
    assert body["record"]["charge"] == pytest.approx(150)
    assert body["display"]["margin"] == 33.3


def test_derive_known_field(client):
    response = client.post("/derive", json={"cost": 100, "markup": 10, "charge": 500, "known_field": "charge"})
    body = response.json()
    assert body["basis"] == "charge"
    assert body["record"]["markup"] == pytest.approx(400)


def test_derive_pass_through(client):
    response = client.post("/derive", json={"cost": 0, "markup": 5})
    body = response.json()
    assert body["basis"] is None
    assert body["record"]["markup"] == 5
    assert body["record"]["charge"] == 0


def test_derive_full_margin_rejected(client):
    response = client.post("/derive", json={"cost": 10, "margin": 100})
    assert response.status_code == 422
    assert "100%" in response.json()["detail"]


def test_derive_unknown_field_rejected(client):
    response = client.post("/derive", json={"cost": 10, "markup": 5, "known_field": "price"})
    assert response.status_code == 422


def test_calculate(client):
    response = client.post("/calculate", json={
        "labour": {"cost": 40, "field": "markup", "value": 25},
        "purchases": {"field": "charge", "value": 1.25},
    })
    assert response.status_code == 200
    body = response.json()
    assert body["labour"]["record"]["charge"] == pytest.approx(50)
    assert body["purchases"]["record"]["margin"] == pytest.approx(20)
    assert body["purchases"]["basis"] == "charge"


def test_calculate_day_view(client):
    response = client.post("/calculate", json={
        "labour": {"cost": 320, "field": "margin", "value": 20},
        "purchases": {"field": "markup", "value": 10},
        "is_day": True,
    })
    body = response.json()
    assert body["labour"]["record"]["cost"] == pytest.approx(320)
    assert body["labour"]["record"]["charge"] == pytest.approx(400)


def test_calculate_validation_error(client):
    response = client.post("/calculate", json={
        "labour": {"cost": 40, "field": "cost", "value": 40},
        "purchases": {"field": "markup", "value": 10},
    })
    assert response.status_code == 422
    assert response.json()["detail"].startswith("Please enter at least one field other than Cost")


def test_calculate_zero_value(client):
    response = client.post("/calculate", json={
        "labour": {"cost": 40, "field": "markup", "value": 0},
        "purchases": {"field": "markup", "value": 10},
    })
    assert response.status_code == 422
    assert "Zero values" in response.json()["detail"]


def test_defaults(client):
    body = client.get("/defaults").json()
    assert body["labour"]["cost"] == 0
    assert body["purchases"]["cost"] == 1.0


def test_status(client):
    body = client.get("/system/status").json()
    assert body["engine_active"] is True
    assert body["hours_per_day"] == 8.0


def test_derive_overflow_rejected(client):
    """Results that overflow to infinity are not returned as JSON."""
    response = client.post("/derive", json={"cost": 1e308, "markup": 1e10})
    assert response.status_code == 422
    assert response.json()["detail"] == "Values are too large to calculate."
