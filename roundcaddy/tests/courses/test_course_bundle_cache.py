from __future__ import annotations

from datetime import datetime, timezone

import pytest

from roundcaddy.courses.bundle import (
    EPOCH_FLOOR,
    CourseBundleError,
    bundle_export_date,
    load_bundle_metadata,
    load_bundled_courses,
    read_bundle,
)
from roundcaddy.courses.cache import LAST_SYNC_KEY, CourseCache

from ..fakes import SAMPLE_BUNDLE, make_course, write_bundle


def test_sample_bundle_loads_with_geojson_hazards():
    courses = load_bundled_courses(SAMPLE_BUNDLE)
    assert len(courses) == 4

    pebble = next(course for course in courses if course.id == "pebble-beach")
    course_wide = pebble.hole_data[0]
    assert course_wide.hole_number == 0
    assert course_wide.bunkers[0].type == "bunker"
    water_point = course_wide.water_hazards[0].polygon[0]
    assert water_point.lat == pytest.approx(36.566)
    assert water_point.lon == pytest.approx(-121.95)


def test_missing_bundle_yields_no_courses(tmp_path):
    assert load_bundled_courses(tmp_path / "absent.json") == []
    assert load_bundle_metadata(tmp_path / "absent.json") is None


def test_invalid_bundle_is_reported_and_skipped(tmp_path):
    path = tmp_path / "bundle.json"
    path.write_text('{"metadata": {}}')
    with pytest.raises(CourseBundleError):
        read_bundle(path)
    assert load_bundled_courses(path) == []


def test_bundle_with_duplicate_holes_is_rejected(tmp_path):
    path = write_bundle(
        tmp_path / "bundle.json",
        [
            {
                "id": "x",
                "name": "X Links",
                "hole_data": [{"hole_number": 2, "par": 4}, {"hole_number": 2, "par": 4}],
            }
        ],
    )
    with pytest.raises(CourseBundleError):
        read_bundle(path)


def test_bundle_export_date_parsing(tmp_path):
    path = write_bundle(tmp_path / "bundle.json", [], export_date="2025-03-01T10:00:00Z")
    assert bundle_export_date(load_bundle_metadata(path)) == datetime(
        2025, 3, 1, 10, tzinfo=timezone.utc
    )
    assert bundle_export_date(None) == EPOCH_FLOOR


def test_cache_persists_courses(tmp_path):
    cache = CourseCache(tmp_path)
    assert cache.load() is None

    cache.save([make_course("a", par=72), make_course("b")])

    reopened = CourseCache(tmp_path)
    loaded = reopened.load()
    assert [course.id for course in loaded] == ["a", "b"]
    assert loaded[0].par == 72


def test_corrupt_cache_reads_as_empty(tmp_path):
    cache = CourseCache(tmp_path)
    cache.path.write_text("{not json")
    assert cache.load() is None


def test_last_sync_round_trips_through_preferences(tmp_path):
    cache = CourseCache(tmp_path)
    when = datetime(2025, 2, 2, 8, 30, tzinfo=timezone.utc)

    cache.set_last_synced_at(when)

    assert CourseCache(tmp_path).last_synced_at() == when
    assert cache.kv.get(LAST_SYNC_KEY) == when.isoformat()


def test_clear_removes_cache_file(tmp_path):
    cache = CourseCache(tmp_path)
    cache.save([make_course("a")])
    cache.kv.set("courses_cache", [])

    cache.clear()

    assert not cache.path.exists()
    assert cache.kv.get("courses_cache") is None
