import logging
import threading
import time
from typing import Dict, Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from dotenv import load_dotenv

from config import GameConfig, load_config
from domain.errors import SessionNotFoundError, UnknownButtonError
from domain.message import GameMessageId, control_layout_dict, token_from_custom_id
from services.animation_encoder import CONTENT_TYPE
from services.game_session import SnakeGameService
from services.message_publisher import (
    InMemoryPublisher,
    MessagePublisher,
    PublishError,
    WebhookPublisher,
)

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL_ID = 1


def _now_ms() -> int:
    return int(time.time() * 1000)


def _default_publisher(config: GameConfig) -> MessagePublisher:
    if config.webhook_url:
        return WebhookPublisher(config.webhook_url)
    return InMemoryPublisher()


def create_app(
    config: Optional[GameConfig] = None,
    publisher: Optional[MessagePublisher] = None,
    service: Optional[SnakeGameService] = None
) -> Flask:
    """
    Build the HTTP transport around a SnakeGameService.

    Button presses for the same message are serialized with a per-message
    lock; the game service itself does no locking.
    """
    config = config or load_config()
    if service is None:
        service = SnakeGameService(config, publisher or _default_publisher(config))

    app = Flask(__name__)
    app.config["SNAKE_SERVICE"] = service
    CORS(app, resources={r"/api/*": {"origins": config.cors_origins}})

    session_locks: Dict[GameMessageId, threading.Lock] = {}
    locks_guard = threading.Lock()

    def lock_for(message_id: GameMessageId) -> threading.Lock:
        with locks_guard:
            return session_locks.setdefault(message_id, threading.Lock())

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "games": len(service.sessions)})

    @app.route("/api/games", methods=["POST"])
    def start_game():
        """
        Start a game and publish its first frame.

        JSON body (all optional):
        - channel_id: channel to publish to (default 1)
        - timestamp_ms: creation time of the start command (default: now)
        """
        data = request.get_json(silent=True) or {}
        try:
            channel_id = int(data.get("channel_id", DEFAULT_CHANNEL_ID))
            created_at_ms = int(data.get("timestamp_ms", _now_ms()))
        except (TypeError, ValueError):
            return jsonify({"error": "channel_id and timestamp_ms must be integers"}), 400

        try:
            session = service.start_game(channel_id, created_at_ms)
        except PublishError as error:
            logging.error(f"Error publishing new game: {error}")
            return jsonify({"error": "Failed to publish game"}), 502

        return jsonify({
            "channel_id": session.message_id.channel_id,
            "message_id": session.message_id.message_id,
            "status": session.state.status,
            "controls": control_layout_dict()
        }), 201

    @app.route("/api/games/<int:channel_id>/<int:message_id>/buttons", methods=["POST"])
    def press_button(channel_id, message_id):
        """
        Press a button on a published game.

        JSON body:
        - token: the button label (arrow or the zero-width no-op), or
        - custom_id: the component id of a published button
        - timestamp_ms: time of the press (default: now)
        """
        data = request.get_json(silent=True) or {}
        token = data.get("token")
        custom_id = data.get("custom_id")
        if token is None and isinstance(custom_id, str):
            try:
                token = token_from_custom_id(custom_id)
            except UnknownButtonError as error:
                return jsonify({"error": str(error)}), 400
        if not isinstance(token, str):
            return jsonify({"error": "token or custom_id is required"}), 400
        try:
            event_ms = int(data.get("timestamp_ms", _now_ms()))
        except (TypeError, ValueError):
            return jsonify({"error": "timestamp_ms must be an integer"}), 400

        game_message_id = GameMessageId(channel_id, message_id)
        try:
            with lock_for(game_message_id):
                result = service.press_button(game_message_id, token, event_ms)
        except SessionNotFoundError as error:
            return jsonify({"error": str(error)}), 404
        except UnknownButtonError as error:
            logging.error(f"Rejected button press on {game_message_id}: {error}")
            return jsonify({"error": str(error)}), 400

        return jsonify({
            "status": result.state.status,
            "length": result.state.length,
            "facing": result.facing,
            "owed_ticks": result.owed_ticks,
            "frames": result.frames,
            "published": result.published
        })

    @app.route("/api/games/<int:channel_id>/<int:message_id>", methods=["GET"])
    def get_game(channel_id, message_id):
        try:
            session = service.get_session(GameMessageId(channel_id, message_id))
        except SessionNotFoundError as error:
            return jsonify({"error": str(error)}), 404

        payload = session.state.to_dict()
        payload.update({
            "facing": session.facing,
            "last_event_ms": session.last_event_ms,
            "board": {"width": service.board.width, "height": service.board.height}
        })
        return jsonify(payload)

    @app.route("/api/games/<int:channel_id>/<int:message_id>/image.gif", methods=["GET"])
    def get_game_image(channel_id, message_id):
        animation = service.publisher.fetch_attachment(GameMessageId(channel_id, message_id))
        if animation is None:
            return jsonify({"error": "No animation stored for this game"}), 404
        return Response(animation, mimetype=CONTENT_TYPE)

    return app


if __name__ == "__main__":
    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    create_app(config).run(threaded=True)
