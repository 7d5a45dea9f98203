from __future__ import annotations

import httpx
from fastapi.testclient import TestClient

from roundcaddy.app import app
from roundcaddy.providers import weather

client = TestClient(app)


def test_plays_like_endpoint_returns_breakdown():
    response = client.post(
        "/api/caddie/plays-like",
        json={
            "distance_yards": 150,
            "wind_speed_mph": 10,
            "wind_from_deg": 0,
            "bearing_deg": 0,
            "elevation_change_ft": 30,
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["plays_like_yards"] == 170
    assert body["adjustments"]["total"] == 20
    assert [f["label"] for f in body["factors"]] == ["Into wind", "Uphill"]


def test_plays_like_rejects_invalid_distance():
    response = client.post("/api/caddie/plays-like", json={"distance_yards": 0})
    assert response.status_code == 422


def test_plays_like_fills_conditions_from_weather(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "current": {
                    "temperature_2m": 50,
                    "relative_humidity_2m": 50,
                    "weather_code": 0,
                    "wind_speed_10m": 10,
                    "wind_direction_10m": 0,
                }
            },
        )

    def factory(**kwargs) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler))

    monkeypatch.setattr(weather, "_http_client_factory", factory)

    response = client.post(
        "/api/caddie/plays-like",
        json={"distance_yards": 150, "bearing_deg": 0, "lat": 36.5, "lon": -121.9},
    )
    body = response.json()
    assert body["adjustments"]["wind"] == 10
    assert body["adjustments"]["temperature"] == 4
    assert body["adjustments"]["humidity"] == 0
    assert body["plays_like_yards"] == 164


def test_plays_like_weather_failure_is_bad_gateway(monkeypatch):
    def factory(**kwargs) -> httpx.Client:
        return httpx.Client(
            transport=httpx.MockTransport(lambda request: httpx.Response(503))
        )

    monkeypatch.setattr(weather, "_http_client_factory", factory)

    response = client.post(
        "/api/caddie/plays-like",
        json={"distance_yards": 150, "lat": 10.0, "lon": 10.0},
    )
    assert response.status_code == 502


def test_plays_like_does_not_invent_missing_weather_readings(monkeypatch):
    def factory(**kwargs) -> httpx.Client:
        body = {"current": {"wind_speed_10m": 5, "weather_code": 0}}
        return httpx.Client(
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, json=body)
            )
        )

    monkeypatch.setattr(weather, "_http_client_factory", factory)

    response = client.post(
        "/api/caddie/plays-like",
        json={"distance_yards": 150, "lat": 12.0, "lon": 12.0},
    )
    assert response.status_code == 502
    assert "temperature_2m" in response.json()["detail"]
