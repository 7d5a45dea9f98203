"""Shared pytest fixtures for roundcaddy tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from roundcaddy.app import app
from roundcaddy.config import reset_settings_cache
from roundcaddy.courses.cache import CourseCache
from roundcaddy.courses.sync import CourseSyncService, get_course_sync_service
from roundcaddy.notes.store import PersonalNoteStore, get_note_store
from roundcaddy.providers import cache as provider_cache
from roundcaddy.providers import weather
from roundcaddy.providers.supabase import get_supabase_client
from roundcaddy.rounds.service import RoundService, get_round_service
from roundcaddy.storage import KeyValueStore

from .fakes import SAMPLE_BUNDLE, FakeBackend


@pytest.fixture(autouse=True)
def _isolated_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("ROUNDCADDY_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("ROUNDCADDY_PROVIDER_CACHE_DIR", str(tmp_path / "providers"))
    monkeypatch.delenv("REQUIRE_API_KEY", raising=False)
    reset_settings_cache()
    get_course_sync_service.cache_clear()
    get_supabase_client.cache_clear()
    get_round_service.cache_clear()
    get_note_store.cache_clear()
    weather._cache = provider_cache.ProviderCache("test-weather", 900)
    yield
    app.dependency_overrides.clear()
    reset_settings_cache()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def course_cache(tmp_path) -> CourseCache:
    return CourseCache(tmp_path / "cache")


@pytest.fixture
def sync_service(backend, course_cache) -> CourseSyncService:
    return CourseSyncService(backend, course_cache, SAMPLE_BUNDLE)


@pytest.fixture
def api_client(tmp_path, backend, sync_service):
    round_service = RoundService(base_dir=tmp_path / "rounds")
    note_store = PersonalNoteStore(KeyValueStore(tmp_path / "notes.json"))
    app.dependency_overrides[get_course_sync_service] = lambda: sync_service
    app.dependency_overrides[get_supabase_client] = lambda: backend
    app.dependency_overrides[get_round_service] = lambda: round_service
    app.dependency_overrides[get_note_store] = lambda: note_store
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
