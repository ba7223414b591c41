"""
Tests for the FastAPI REST API layer.

Uses FastAPI's TestClient (backed by httpx) for synchronous testing.
"""

import pytest
from fastapi.testclient import TestClient

from zipreel.api.app import create_app
from zipreel.core.service import SearchService


@pytest.fixture
def client(service: SearchService) -> TestClient:
    """TestClient over the shared sample service."""
    return TestClient(create_app(service=service))


def search(client: TestClient, user_id: str, search_type: str, value: str) -> dict:
    resp = client.post(
        "/search",
        json={"user_id": user_id, "search_type": search_type, "value": value},
    )
    assert resp.status_code == 200
    return resp.json()


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


class TestHealth:
    """Tests for GET /health."""

    def test_health_returns_200(self, client: TestClient) -> None:
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["components"]["catalog"] == "healthy"
        assert data["uptime_seconds"] >= 0

    def test_health_empty_service(self) -> None:
        client = TestClient(create_app(service=SearchService()))
        data = client.get("/health").json()
        assert data["components"]["catalog"] == "empty"

    def test_request_id_echoed(self, client: TestClient) -> None:
        resp = client.get("/health", headers={"X-Request-Id": "abc123"})
        assert resp.headers["X-Request-Id"] == "abc123"


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


class TestRegistration:
    """Tests for POST /movies and POST /users."""

    def test_add_movie(self, client: TestClient) -> None:
        resp = client.post(
            "/movies",
            json={"id": "9", "title": "Moon", "genre": "Sci-Fi", "year": 2009, "rating": 7.8},
        )
        assert resp.status_code == 201
        assert resp.json()["title"] == "Moon"

    def test_duplicate_movie_conflict(self, client: TestClient) -> None:
        resp = client.post(
            "/movies",
            json={"id": "1", "title": "Again", "genre": "Drama", "year": 2000, "rating": 5.0},
        )
        assert resp.status_code == 409
        body = resp.json()
        assert body["error"] == "duplicateidentifier"
        assert "already exists" in body["message"]

    def test_add_user(self, client: TestClient) -> None:
        resp = client.post("/users", json={"id": "u3", "name": "Bob"})
        assert resp.status_code == 201
        assert resp.json()["preferred_genre"] == ""

    def test_invalid_movie_body(self, client: TestClient) -> None:
        resp = client.post("/movies", json={"id": "10", "title": "No year"})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class TestSearch:
    """Tests for POST /search and POST /search/multi."""

    def test_tier_progression(self, client: TestClient) -> None:
        first = search(client, "u1", "GENRE", "Sci-Fi")
        assert first["found_in"] == "PRIMARY"
        assert first["count"] == 3
        assert [r["movie"]["id"] for r in first["results"]] == ["1", "4", "5"]

        assert search(client, "u1", "GENRE", "Sci-Fi")["found_in"] == "TIER1"
        assert search(client, "u2", "GENRE", "Sci-Fi")["found_in"] == "TIER2"
        assert search(client, "u2", "GENRE", "Sci-Fi")["found_in"] == "TIER1"

    def test_empty_result_keeps_tier(self, client: TestClient) -> None:
        data = search(client, "u1", "TITLE", "Nothing")
        assert data == {"results": [], "found_in": "PRIMARY", "count": 0}

    def test_unknown_user_404(self, client: TestClient) -> None:
        resp = client.post(
            "/search",
            json={"user_id": "ghost", "search_type": "GENRE", "value": "Sci-Fi"},
        )
        assert resp.status_code == 404
        assert resp.json()["error"] == "unknownactor"

    def test_bad_search_type_422(self, client: TestClient) -> None:
        resp = client.post(
            "/search",
            json={"user_id": "u1", "search_type": "DIRECTOR", "value": "Nolan"},
        )
        assert resp.status_code == 422

    def test_multi(self, client: TestClient) -> None:
        body = {"user_id": "u1", "genre": "Sci-Fi", "year": 2010, "min_rating": 8.04}
        first = client.post("/search/multi", json=body).json()
        assert [r["movie"]["id"] for r in first["results"]] == ["1", "5"]
        body["min_rating"] = 8.06
        second = client.post("/search/multi", json=body).json()
        # 8.04 and 8.06 share a cache key, so the first answer is reused
        assert second["found_in"] == "TIER1"
        assert second["count"] == 2

    def test_multi_huge_threshold(self, client: TestClient) -> None:
        body = {"user_id": "u1", "genre": "Sci-Fi", "year": 2010, "min_rating": 1e30}
        resp = client.post("/search/multi", json=body)
        assert resp.status_code == 200
        assert resp.json()["count"] == 0


# ---------------------------------------------------------------------------
# Cache administration and stats
# ---------------------------------------------------------------------------


class TestCacheAdmin:
    """Tests for GET /cache/stats and DELETE /cache/{level}."""

    def test_stats(self, client: TestClient) -> None:
        search(client, "u1", "YEAR", "2008")
        search(client, "u1", "YEAR", "2008")
        data = client.get("/cache/stats").json()
        assert data["tier1_hits"] == 1
        assert data["primary_hits"] == 1
        assert data["total_searches"] == 2
        assert data["cache_hit_rate"] == pytest.approx(0.5)

    def test_clear_tier1(self, client: TestClient) -> None:
        search(client, "u1", "YEAR", "2008")
        resp = client.delete("/cache/tier1")
        assert resp.status_code == 200
        assert resp.json() == {"level": "TIER1", "entries_removed": 1}
        assert search(client, "u1", "YEAR", "2008")["found_in"] == "TIER2"

    def test_clear_invalid_level(self, client: TestClient) -> None:
        resp = client.delete("/cache/primary")
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalidcachelevel"


# ---------------------------------------------------------------------------
# Error contract
# ---------------------------------------------------------------------------


class TestErrorContract:
    """Error bodies follow the documented ErrorResponse schema."""

    def test_error_schema_published(self, client: TestClient) -> None:
        spec = client.get("/openapi.json").json()
        assert "ErrorResponse" in spec["components"]["schemas"]
        search_404 = spec["paths"]["/search"]["post"]["responses"]["404"]
        ref = search_404["content"]["application/json"]["schema"]["$ref"]
        assert ref.endswith("/ErrorResponse")
        assert "409" in spec["paths"]["/movies"]["post"]["responses"]
        assert "400" in spec["paths"]["/cache/{level}"]["delete"]["responses"]

    def test_error_body_fields(self, client: TestClient) -> None:
        resp = client.delete("/cache/primary", headers={"X-Request-Id": "req-42"})
        assert resp.status_code == 400
        assert set(resp.json()) == {"error", "message", "request_id"}
        assert resp.json()["request_id"] == "req-42"
