"""Integration tests for the HTTP surface via FastAPI's TestClient.

Tests:
  - GET /health → status ok with a timestamp
  - POST /create-room → room_ id, join URL with ?room=, label / hotelName stored
  - POST /create-room without a body → placeholder label
  - GET /languages → eleven languages with native names
  - GET /health/provider → simulated provider reports healthy
  - POST /create-room over the limit → 429 with a structured error body
"""

import pytest
from fastapi.testclient import TestClient

from hotel_relay.main import app
from hotel_relay.services.rate_limit import RateLimiter


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:
    def test_health(self, client) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["timestamp"]

    def test_provider_health(self, client) -> None:
        response = client.get("/health/provider")
        assert response.status_code == 200
        assert response.json() == {"provider": "simulated", "healthy": True}


class TestCreateRoom:
    def test_create_room(self, client) -> None:
        response = client.post("/create-room", json={"label": "Taj Palace"})

        assert response.status_code == 200
        body = response.json()
        assert body["roomId"].startswith("room_")
        assert body["joinUrl"] == f"http://testserver/?room={body['roomId']}"
        room = client.app.state.room_registry.get_room(body["roomId"])
        assert room.label == "Taj Palace"
        assert room.user_count == 0

    def test_hotel_name_alias(self, client) -> None:
        body = client.post("/create-room", json={"hotelName": "Oberoi"}).json()
        assert client.app.state.room_registry.get_room(body["roomId"]).label == "Oberoi"

    def test_without_body(self, client) -> None:
        body = client.post("/create-room").json()
        assert client.app.state.room_registry.get_room(body["roomId"]).label == "Unknown Hotel"

    def test_ids_are_unique(self, client) -> None:
        ids = {client.post("/create-room", json={}).json()["roomId"] for _ in range(5)}
        assert len(ids) == 5

    def test_rate_limited(self, client) -> None:
        client.app.state.http_rate_limiter = RateLimiter(max_requests=1, window_seconds=60)

        assert client.post("/create-room", json={}).status_code == 200
        response = client.post("/create-room", json={})

        assert response.status_code == 429
        assert response.json() == {
            "error": {"code": "RATE_LIMIT_EXCEEDED", "message": "Rate limit exceeded"}
        }


class TestLanguages:
    def test_languages(self, client) -> None:
        response = client.get("/languages")
        assert response.status_code == 200
        languages = response.json()
        assert len(languages) == 11
        hindi = next(lang for lang in languages if lang["code"] == "hi-IN")
        assert hindi == {"code": "hi-IN", "name": "Hindi", "nativeName": "हिन्दी"}
