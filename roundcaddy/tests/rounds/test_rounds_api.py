from __future__ import annotations

from roundcaddy.providers.errors import ProviderError
from roundcaddy.rounds.models import Round

ROUND_BODY = {
    "id": "round-1",
    "course_id": "pebble-beach",
    "course_name": "Pebble Beach Golf Links",
    "played_at": "2025-04-01T10:00:00Z",
    "total_score": 84,
    "total_putts": 33,
    "fairways_hit": 8,
    "fairways_total": 14,
    "gir": 7,
    "course_rating": 75.5,
    "slope_rating": 145,
}


def test_save_round_uses_user_header(api_client):
    response = api_client.post(
        "/api/rounds", json=ROUND_BODY, headers={"x-user-id": "golfer-1"}
    )
    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] == "golfer-1"
    assert body["total_score"] == 84


def test_save_round_assigns_id_when_missing(api_client):
    payload = {k: v for k, v in ROUND_BODY.items() if k != "id"}
    body = api_client.post(
        "/api/rounds", json=payload, headers={"x-user-id": "golfer-1"}
    ).json()
    assert body["id"]


def test_saving_same_round_twice_conflicts(api_client):
    headers = {"x-user-id": "golfer-1"}
    first = api_client.post("/api/rounds", json=ROUND_BODY, headers=headers)
    assert first.status_code == 201
    second = api_client.post("/api/rounds", json=ROUND_BODY, headers=headers)
    assert second.status_code == 409


def test_invalid_round_is_bad_request(api_client):
    payload = dict(ROUND_BODY, fairways_hit=20)
    response = api_client.post(
        "/api/rounds", json=payload, headers={"x-user-id": "golfer-1"}
    )
    assert response.status_code == 400


def test_list_get_and_stats(api_client):
    headers = {"x-user-id": "golfer-1"}
    for index, score in enumerate([84, 80, 88], start=1):
        api_client.post(
            "/api/rounds",
            json=dict(
                ROUND_BODY,
                id=f"round-{index}",
                total_score=score,
                played_at=f"2025-04-0{index}T10:00:00Z",
            ),
            headers=headers,
        )

    listed = api_client.get("/api/rounds", headers=headers).json()
    assert [r["id"] for r in listed] == ["round-3", "round-2", "round-1"]

    fetched = api_client.get("/api/rounds/round-2", headers=headers)
    assert fetched.json()["total_score"] == 80

    other_user = api_client.get("/api/rounds/round-2", headers={"x-user-id": "x"})
    assert other_user.status_code == 403
    assert api_client.get("/api/rounds/nope", headers=headers).status_code == 404

    stats = api_client.get("/api/rounds/stats", headers=headers).json()
    assert stats["rounds_played"] == 3
    assert stats["best_score"] == 80
    assert stats["handicap_index"] is not None


def test_remote_rounds_come_from_backend(api_client, backend):
    remote_round = Round.model_validate(dict(ROUND_BODY, user_id="golfer-1"))
    seen = {}

    def fetch_rounds(user_id, auth_headers=None, limit=20):
        seen.update(user_id=user_id, auth_headers=auth_headers, limit=limit)
        return [remote_round]

    backend.fetch_rounds = fetch_rounds

    response = api_client.get(
        "/api/rounds",
        params={"remote": "true", "limit": 5},
        headers={"x-user-id": "golfer-1", "Authorization": "Bearer tok"},
    )

    assert [r["id"] for r in response.json()] == ["round-1"]
    assert seen == {
        "user_id": "golfer-1",
        "auth_headers": {"Authorization": "Bearer tok"},
        "limit": 5,
    }


def test_remote_round_errors_map_to_bad_gateway(api_client, backend):
    def fetch_round(round_id, auth_headers=None):
        raise ProviderError("down", status_code=500)

    backend.fetch_round = fetch_round
    response = api_client.get("/api/rounds/round-1", params={"remote": "true"})
    assert response.status_code == 502


def test_unparseable_played_at_is_unprocessable(api_client):
    payload = dict(ROUND_BODY, played_at="last tuesday")
    response = api_client.post(
        "/api/rounds", json=payload, headers={"x-user-id": "golfer-1"}
    )
    assert response.status_code == 422


def test_played_at_is_returned_in_utc(api_client):
    payload = dict(ROUND_BODY, played_at="2025-04-01T12:00:00-07:00")
    body = api_client.post(
        "/api/rounds", json=payload, headers={"x-user-id": "golfer-1"}
    ).json()
    assert body["played_at"].startswith("2025-04-01T19:00:00")


def test_hole_entries_fill_missing_strokes_gained(api_client):
    holes = [
        {
            "hole_number": 1,
            "par": 4,
            "score": 5,
            "putts": 2,
            "fairway_hit": False,
            "gir": False,
            "approach_distance": 140,
            "approach_result": "greenside_rough",
            "first_putt_distance": 10,
        }
    ]
    payload = dict(ROUND_BODY, holes=holes, sg_putting=0.5)

    response = api_client.post(
        "/api/rounds", json=payload, headers={"x-user-id": "golfer-1"}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["sg_total"] == -0.82
    assert body["sg_approach"] == -0.47
    assert body["sg_putting"] == 0.5
    assert body["holes"][0]["approach_result"] == "greenside_rough"
