from __future__ import annotations

from roundcaddy.courses.community import ContributorStats, CourseDiscussion
from roundcaddy.providers.errors import ProviderError


def test_leaderboard_forwards_bearer_token(api_client, backend):
    seen = {}

    def fetch_contributor_leaderboard(auth_headers=None, limit=50):
        seen.update(auth_headers=auth_headers, limit=limit)
        return [ContributorStats(id="c1", user_id="u1", reputation_score=12.0)]

    backend.fetch_contributor_leaderboard = fetch_contributor_leaderboard

    response = api_client.get(
        "/api/community/leaderboard",
        params={"limit": 10},
        headers={"Authorization": "Bearer tok"},
    )

    assert response.json()[0]["user_id"] == "u1"
    assert seen == {"auth_headers": {"Authorization": "Bearer tok"}, "limit": 10}


def test_non_bearer_authorization_is_not_forwarded(api_client, backend):
    seen = {}

    def fetch_contributor_leaderboard(auth_headers=None, limit=50):
        seen["auth_headers"] = auth_headers
        return []

    backend.fetch_contributor_leaderboard = fetch_contributor_leaderboard
    api_client.get("/api/community/leaderboard", headers={"Authorization": "Basic x"})
    assert seen["auth_headers"] is None


def test_course_discussions(api_client, backend):
    def fetch_course_discussions(course_id, limit=50):
        if course_id == "down":
            raise ProviderError("offline")
        return [
            CourseDiscussion(
                id="d1",
                course_id=course_id,
                user_id="u1",
                title="Best tee time?",
                content="Morning wind is calmer",
                created_at="2025-03-01T08:00:00Z",
            )
        ]

    backend.fetch_course_discussions = fetch_course_discussions

    body = api_client.get("/api/community/courses/pebble-beach/discussions").json()
    assert body[0]["title"] == "Best tee time?"
    response = api_client.get("/api/community/courses/down/discussions")
    assert response.status_code == 502
