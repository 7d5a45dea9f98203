from __future__ import annotations

from fastapi.testclient import TestClient

from roundcaddy.api.user_header import ANONYMOUS_USER, derive_user_id
from roundcaddy.app import app
from roundcaddy.config import get_settings, reset_settings_cache
from roundcaddy.metrics import REGISTRY


def test_health_reports_build_and_sync_state(api_client):
    response = api_client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["courses"]["syncing"] is False
    assert body["courses"]["last_sync"] is None
    assert "python" in body["runtime"]


def test_metrics_endpoint_exposes_domain_series(api_client):
    api_client.post("/api/courses/sync")
    api_client.post("/api/caddie/plays-like", json={"distance_yards": 140})

    response = api_client.get("/metrics")

    assert response.status_code == 200
    text = response.text
    assert "course_sync_total" in text
    assert "playslike_adjustment_yards_bucket" in text
    assert "roundcaddy_build_info" in text
    assert REGISTRY.get_sample_value("courses_cached") == 4.0
    plays_like = {"route": "/api/caddie/plays-like", "method": "POST", "status": "200"}
    assert REGISTRY.get_sample_value("api_requests_total", plays_like) >= 1
    scrape = {"route": "/metrics", "method": "GET", "status": "200"}
    assert REGISTRY.get_sample_value("api_requests_total", scrape) is None


def test_api_key_not_required_by_default():
    client = TestClient(app)
    response = client.post("/api/caddie/plays-like", json={"distance_yards": 100})
    assert response.status_code == 200


def test_api_key_enforced_when_enabled(monkeypatch):
    monkeypatch.setenv("REQUIRE_API_KEY", "1")
    monkeypatch.setenv("API_KEY", "primary")
    monkeypatch.setenv("ROUNDCADDY_API_KEYS", "extra-1, extra-2")
    client = TestClient(app)

    def post(**kwargs):
        return client.post(
            "/api/caddie/plays-like", json={"distance_yards": 100}, **kwargs
        ).status_code

    assert post() == 401
    assert post(headers={"x-api-key": "nope"}) == 401
    assert post(headers={"x-api-key": "primary"}) == 200
    assert post(params={"apiKey": "extra-2"}) == 200


def test_settings_read_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("ROUNDCADDY_DATA_DIR", str(tmp_path / "custom"))
    monkeypatch.setenv("COURSE_SYNC_INTERVAL_HOURS", "6")
    monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co")
    reset_settings_cache()

    settings = get_settings()

    assert settings.data_dir == tmp_path / "custom"
    assert settings.course_sync_interval_hours == 6.0
    assert settings.supabase_url == "https://demo.supabase.co"


def test_user_id_falls_back_to_api_key_then_anonymous():
    assert derive_user_id("key-1", "golfer-1") == "golfer-1"
    assert derive_user_id("key-1", "   ") == "key-1"
    assert derive_user_id(None, None) == ANONYMOUS_USER
