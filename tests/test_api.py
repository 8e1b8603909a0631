# tests/test_api.py
import base64
import json

import pytest
from fastapi.testclient import TestClient

from court_estimator.main import app


@pytest.fixture
def client(rates):
    app.state.rate_table = rates
    yield TestClient(app)
    app.state.rate_table = None


ESTIMATE_BODY = {
    "dimensions": {"square_footage": 2000},
    "courts": {"tennis_courts": 1, "tennis_court_color": "dark-blue", "apron_color": "gray"},
    "equipment": {"tennis_post_sets": 1},
    "logistics": {"travel_days": 3, "number_of_trips": 1, "distance_to_site": 50},
}


def test_estimate_endpoint(client):
    resp = client.post("/estimate", json=ESTIMATE_BODY)
    assert resp.status_code == 200
    data = resp.json()
    assert data["base_total"] == pytest.approx(6648)
    assert data["total"] == pytest.approx(9041.28)
    assert data["packages_total"] == 500
    assert data["degraded"] is True
    assert "quote_base64" not in data


def test_estimate_with_custom_rates(client):
    body = dict(ESTIMATE_BODY, tax_rate=0, margin_rate=0)
    data = client.post("/estimate", json=body).json()
    assert data["total"] == pytest.approx(6648)


def test_estimate_accepts_logistics_as_json_string(client):
    body = dict(ESTIMATE_BODY, logistics=json.dumps(ESTIMATE_BODY["logistics"]))
    data = client.post("/estimate", json=body).json()
    assert data["labor"]["total"] == pytest.approx(2223)


def test_malformed_logistics_string_falls_back_to_defaults(client):
    body = dict(ESTIMATE_BODY, logistics="{not json")
    resp = client.post("/estimate", json=body)
    assert resp.status_code == 200
    assert resp.json()["labor"]["total"] == pytest.approx(1390)


def test_estimate_includes_quote(client):
    body = dict(ESTIMATE_BODY, include_quote=True, customer_name="Riverside HOA")
    data = client.post("/estimate", json=body).json()
    text = base64.b64decode(data["quote_base64"]).decode("utf-8")
    assert "Customer: Riverside HOA" in text


def test_negative_input_rejected(client):
    body = dict(ESTIMATE_BODY, dimensions={"square_footage": -10})
    assert client.post("/estimate", json=body).status_code == 422


def test_unknown_three_point_style_rejected(client):
    body = dict(ESTIMATE_BODY, courts={"basketball_courts": 1, "basketball_three_point_lines": ["wnba"]})
    assert client.post("/estimate", json=body).status_code == 422


def test_quote_endpoint(client):
    resp = client.post("/quote", json=ESTIMATE_BODY)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert "quote.txt" in resp.headers["content-disposition"]
    assert resp.text.startswith("COURT SURFACING QUOTE")


def test_rates_by_category(client):
    resp = client.get("/rates", params={"category": "equipment"})
    assert resp.status_code == 200
    names = {r["name"] for r in resp.json()}
    assert "Permanent Tennis Posts" in names
    assert "Sand" not in names


def test_materials_endpoint(client):
    body = {"dimensions": {"square_footage": 1000}, "surface": {"needs_acid_wash": True}}
    data = client.post("/estimate/materials", json=body).json()
    assert data["total"] == pytest.approx(1100)


def test_color_coat_endpoint(client):
    body = {"dimensions": {"length": 100, "width": 40},
            "courts": {"tennis_courts": 1, "tennis_court_color": "dark-blue", "apron_color": "red"}}
    data = client.post("/estimate/color-coat", json=body).json()
    assert data["unique_colors"] == 2
    assert data["areas"]["color_areas"] == {"dark-blue": 2808, "red": 1192}


def test_equipment_endpoint(client):
    data = client.post("/estimate/equipment", json={"mobile_pickleball_nets": 2}).json()
    assert data["total"] == 800


def test_labor_endpoint(client):
    body = {"logistics": ESTIMATE_BODY["logistics"], "installation_hours": 2}
    data = client.post("/estimate/labor", json=body).json()
    assert data["total"] == pytest.approx(2223 + 130)


def test_missing_rate_table_returns_500(client):
    app.state.rate_table = None
    resp = client.post("/estimate", json=ESTIMATE_BODY)
    assert resp.status_code == 500
