from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from roundcaddy.rounds.models import HoleScore, Round
from roundcaddy.rounds.service import (
    RoundAlreadyExists,
    RoundNotFound,
    RoundOwnershipError,
    RoundService,
)


def _round(round_id: str, played_at: str, user_id: str = "golfer-1", **fields) -> Round:
    payload = {
        "id": round_id,
        "user_id": user_id,
        "course_name": "Pebble Beach Golf Links",
        "played_at": played_at,
        "total_score": 82,
    }
    payload.update(fields)
    return Round.model_validate(payload)


def test_save_and_get_round(tmp_path):
    service = RoundService(base_dir=tmp_path)
    saved = service.save_round(_round("r1", "2025-04-01T10:00:00Z"))

    loaded = service.get_round("r1")

    assert loaded == saved
    assert (tmp_path / "golfer-1" / "r1.json").exists()


def test_rounds_are_immutable_once_saved(tmp_path):
    service = RoundService(base_dir=tmp_path)
    service.save_round(_round("r1", "2025-04-01T10:00:00Z"))

    with pytest.raises(RoundAlreadyExists):
        service.save_round(_round("r1", "2025-04-02T10:00:00Z", total_score=70))
    with pytest.raises(RoundAlreadyExists):
        service.save_round(_round("r1", "2025-04-02T10:00:00Z", user_id="other"))
    assert service.get_round("r1").total_score == 82


def test_round_model_is_frozen():
    round_ = _round("r1", "2025-04-01T10:00:00Z")
    with pytest.raises(ValidationError):
        round_.total_score = 60


def test_get_round_checks_owner(tmp_path):
    service = RoundService(base_dir=tmp_path)
    service.save_round(_round("r1", "2025-04-01T10:00:00Z"))

    with pytest.raises(RoundOwnershipError):
        service.get_round("r1", user_id="someone-else")
    with pytest.raises(RoundNotFound):
        service.get_round("missing")


def test_list_rounds_newest_first_with_limit(tmp_path):
    service = RoundService(base_dir=tmp_path)
    service.save_round(_round("r1", "2025-04-01T10:00:00Z"))
    service.save_round(_round("r2", "2025-05-01T10:00:00Z"))
    service.save_round(_round("r3", "2025-03-01T10:00:00Z"))
    service.save_round(_round("x1", "2025-06-01T10:00:00Z", user_id="other"))

    assert [r.id for r in service.list_rounds("golfer-1")] == ["r2", "r1", "r3"]
    assert [r.id for r in service.list_rounds("golfer-1", limit=1)] == ["r2"]
    assert service.list_rounds("golfer-1", limit=0) == []
    assert service.list_rounds("nobody") == []


def test_unsafe_ids_are_rejected(tmp_path):
    service = RoundService(base_dir=tmp_path)
    with pytest.raises(ValueError):
        service.list_rounds("../etc")


def test_fairways_hit_cannot_exceed_total():
    with pytest.raises(ValidationError):
        _round("r1", "2025-04-01", fairways_hit=15, fairways_total=14)


@pytest.mark.parametrize("score, expected", [(72, "E"), (80, "+8"), (69, "-3")])
def test_score_to_par(score, expected):
    assert _round("r1", "2025-04-01", total_score=score).score_to_par() == expected


@pytest.mark.parametrize(
    "par, score, expected",
    [
        (5, 2, "Albatross"),
        (4, 1, "Albatross"),
        (5, 3, "Eagle"),
        (4, 3, "Birdie"),
        (4, 4, "Par"),
        (4, 5, "Bogey"),
        (4, 6, "Double"),
        (4, 8, "+4"),
        (4, None, ""),
    ],
)
def test_hole_score_description(par, score, expected):
    assert HoleScore(hole_number=1, par=par, score=score).score_description == expected


def test_played_at_is_ordered_as_an_instant(tmp_path):
    service = RoundService(base_dir=tmp_path)
    service.save_round(_round("early", "2025-04-01T10:00:00+05:00"))
    service.save_round(_round("late", "2025-04-01T06:00:00Z"))
    service.save_round(_round("naive", "2025-04-01T05:30:00"))

    listed = service.list_rounds("golfer-1")

    assert [r.id for r in listed] == ["late", "naive", "early"]
    assert listed[-1].played_at == datetime(2025, 4, 1, 5, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("played_at", ["not a date", "", "2025-13-40T00:00:00Z"])
def test_unparseable_played_at_is_rejected(played_at):
    with pytest.raises(ValidationError):
        _round("junk", played_at)


def test_saved_round_round_trips_played_at_as_utc(tmp_path):
    service = RoundService(base_dir=tmp_path)
    service.save_round(_round("r1", "2025-04-01T12:00:00-07:00"))

    loaded = service.get_round("r1")

    assert loaded.played_at == datetime(2025, 4, 1, 19, 0, tzinfo=timezone.utc)
    assert loaded.played_at.tzinfo is not None


def test_hole_scores_with_duplicate_numbers_are_rejected():
    hole = {"hole_number": 1, "par": 4, "score": 4}
    with pytest.raises(ValidationError):
        _round("r1", "2025-04-01", holes=[hole, hole])


def test_save_fills_strokes_gained_from_holes(tmp_path):
    service = RoundService(base_dir=tmp_path)
    hole = {
        "hole_number": 1,
        "par": 4,
        "score": 4,
        "putts": 2,
        "fairway_hit": True,
        "gir": True,
        "approach_distance": 150,
        "first_putt_distance": 20,
        "yardage": 400,
    }
    round_ = _round("r1", "2025-04-01T10:00:00Z", holes=[hole], sg_approach=1.0)

    service.save_round(round_)
    loaded = service.get_round("r1")

    assert loaded.sg_off_tee == pytest.approx(0.28)
    assert loaded.sg_putting == pytest.approx(-0.12)
    assert loaded.sg_total == pytest.approx(0.28)
    assert loaded.sg_approach == 1.0
    assert loaded.holes[0].yardage == 400


def test_save_without_holes_leaves_strokes_gained_empty(tmp_path):
    service = RoundService(base_dir=tmp_path)
    saved = service.save_round(_round("r1", "2025-04-01T10:00:00Z"))
    assert saved.sg_total is None
