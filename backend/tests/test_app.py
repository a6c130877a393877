"""
Tests for the Flask HTTP surface.
"""

import random
import sys
import os
from unittest.mock import Mock

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app  # noqa: E402
from config import GameConfig  # noqa: E402
from domain import GameState  # noqa: E402
from domain.constants import BUTTON_UP, NO_WIDTH_WHITESPACE, RIGHT  # noqa: E402
from domain.message import CONTROL_LAYOUT, GameMessageId  # noqa: E402
from services.game_session import SnakeGameService  # noqa: E402
from services.message_publisher import InMemoryPublisher, PublishError  # noqa: E402


@pytest.fixture
def service():
    return SnakeGameService(GameConfig(), InMemoryPublisher(), rng=random.Random(99))


@pytest.fixture
def client(service):
    app = create_app(config=GameConfig(), service=service)
    app.config["TESTING"] = True
    return app.test_client()


def start(client, **body):
    response = client.post("/api/games", json=body)
    assert response.status_code == 201
    return response.get_json()


class TestStartGame:
    """Tests for POST /api/games."""

    def test_returns_ids_and_controls(self, client):
        data = start(client, channel_id=5, timestamp_ms=1000)

        assert data["channel_id"] == 5
        assert isinstance(data["message_id"], int)
        assert data["status"] == "RUNNING"
        assert len(data["controls"]) == 3
        assert [b["label"] for b in data["controls"][0]] == [NO_WIDTH_WHITESPACE, BUTTON_UP, NO_WIDTH_WHITESPACE]

    def test_invalid_channel_is_rejected(self, client):
        response = client.post("/api/games", json={"channel_id": "abc"})
        assert response.status_code == 400

    def test_publish_failure_returns_502(self):
        publisher = Mock()
        publisher.send.side_effect = PublishError("down")
        app = create_app(config=GameConfig(), publisher=publisher)

        response = app.test_client().post("/api/games", json={})

        assert response.status_code == 502
        assert "error" in response.get_json()


class TestButtons:
    """Tests for POST /api/games/<channel>/<message>/buttons."""

    def test_press_advances_the_game(self, client, service):
        data = start(client, channel_id=1, timestamp_ms=0)
        session = service.get_session(GameMessageId(1, data["message_id"]))
        session.state = GameState([(5, 5)], (0, 0))
        session.facing = RIGHT

        response = client.post(
            f"/api/games/1/{data['message_id']}/buttons",
            json={"token": BUTTON_UP, "timestamp_ms": 1000}
        )

        assert response.status_code == 200
        body = response.get_json()
        assert body["owed_ticks"] == 2
        assert body["frames"] == 3
        assert body["facing"] == "UP"
        assert body["status"] == "RUNNING"
        assert body["published"] is True

    def test_unknown_token_returns_400(self, client):
        data = start(client, channel_id=1, timestamp_ms=0)
        response = client.post(
            f"/api/games/1/{data['message_id']}/buttons",
            json={"token": "?", "timestamp_ms": 1000}
        )
        assert response.status_code == 400

    def test_missing_token_returns_400(self, client):
        data = start(client, channel_id=1, timestamp_ms=0)
        response = client.post(f"/api/games/1/{data['message_id']}/buttons", json={})
        assert response.status_code == 400

    def test_press_by_custom_id(self, client, service):
        data = start(client, channel_id=1, timestamp_ms=0)
        session = service.get_session(GameMessageId(1, data["message_id"]))
        session.state = GameState([(5, 5)], (0, 0))
        session.facing = RIGHT

        response = client.post(
            f"/api/games/1/{data['message_id']}/buttons",
            json={"custom_id": CONTROL_LAYOUT[0][1].custom_id(0, 1), "timestamp_ms": 500}
        )

        assert response.status_code == 200
        assert response.get_json()["facing"] == "UP"

    def test_foreign_custom_id_returns_400(self, client):
        data = start(client, channel_id=1, timestamp_ms=0)
        response = client.post(
            f"/api/games/1/{data['message_id']}/buttons",
            json={"custom_id": "snake-0-1"}
        )
        assert response.status_code == 400

    def test_unknown_game_returns_404(self, client):
        response = client.post("/api/games/1/999/buttons", json={"token": BUTTON_UP})
        assert response.status_code == 404


class TestReadGame:
    """Tests for the read endpoints."""

    def test_state_endpoint(self, client):
        data = start(client, channel_id=2, timestamp_ms=50)

        response = client.get(f"/api/games/2/{data['message_id']}")

        assert response.status_code == 200
        body = response.get_json()
        assert body["status"] == "RUNNING"
        assert len(body["body"]) == 1
        assert body["board"] == {"width": 25, "height": 15}
        assert body["last_event_ms"] == 50

    def test_state_endpoint_unknown_game(self, client):
        assert client.get("/api/games/2/12345").status_code == 404

    def test_image_endpoint_serves_gif(self, client):
        data = start(client, channel_id=2)

        response = client.get(f"/api/games/2/{data['message_id']}/image.gif")

        assert response.status_code == 200
        assert response.mimetype == "image/gif"
        assert response.data.startswith(b"GIF8")

    def test_image_endpoint_unknown_game(self, client):
        assert client.get("/api/games/2/12345/image.gif").status_code == 404

    def test_health(self, client):
        start(client)
        response = client.get("/api/health")
        assert response.get_json() == {"status": "ok", "games": 1}
