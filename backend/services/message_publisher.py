"""
Message transport for published game animations.

A publisher sends the first animation of a game together with its control
buttons, then edits the same message in place on every button press.

Two implementations:
- InMemoryPublisher keeps the latest animation per message (HTTP app, CLI, tests)
- WebhookPublisher posts to a Discord-compatible webhook using requests
"""

import itertools
import json
import logging
import threading
from typing import Dict, List, Optional

import requests

from domain.message import ControlButton, GameMessageId
from services.animation_encoder import CONTENT_TYPE, IMAGE_FORMAT

logger = logging.getLogger(__name__)

ATTACHMENT_NAME = f"game.{IMAGE_FORMAT}"
MESSAGE_CONTENT = "Game"
BUTTON_STYLE_PRIMARY = 1
BUTTON_STYLE_SECONDARY = 2


class PublishError(Exception):
    """The transport failed to send or edit a message."""


class MessagePublisher:
    """
    Base class/interface for message transports.
    """

    def send(self, channel_id: int, animation: bytes, controls: List[List[ControlButton]]) -> GameMessageId:
        """
        Publish a new message carrying `animation` and the button rows.

        Returns:
            The id pair of the created message
        """
        raise NotImplementedError

    def edit(self, message_id: GameMessageId, animation: bytes) -> None:
        """Replace the animation attached to an existing message."""
        raise NotImplementedError

    def fetch_attachment(self, message_id: GameMessageId) -> Optional[bytes]:
        """Return the current animation if the transport keeps it, else None."""
        return None


class InMemoryPublisher(MessagePublisher):
    """Keeps messages in a dict; message ids are allocated sequentially."""

    def __init__(self):
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self.attachments: Dict[GameMessageId, bytes] = {}
        self.controls: Dict[GameMessageId, List[List[ControlButton]]] = {}
        self.edit_count: Dict[GameMessageId, int] = {}

    def send(self, channel_id: int, animation: bytes, controls: List[List[ControlButton]]) -> GameMessageId:
        with self._lock:
            message_id = GameMessageId(channel_id, next(self._ids))
            self.attachments[message_id] = animation
            self.controls[message_id] = controls
            self.edit_count[message_id] = 0
        logger.info(f"Sent game message {message_id} ({len(animation)} bytes)")
        return message_id

    def edit(self, message_id: GameMessageId, animation: bytes) -> None:
        with self._lock:
            if message_id not in self.attachments:
                raise PublishError(f"Message {message_id} does not exist")
            self.attachments[message_id] = animation
            self.edit_count[message_id] += 1
        logger.info(f"Edited game message {message_id} ({len(animation)} bytes)")

    def fetch_attachment(self, message_id: GameMessageId) -> Optional[bytes]:
        return self.attachments.get(message_id)


def _components_payload(controls: List[List[ControlButton]]) -> List[Dict]:
    """Discord action rows; arrows are primary buttons, inert slots secondary."""
    return [
        {
            "type": 1,
            "components": [
                {
                    "type": 2,
                    "style": BUTTON_STYLE_SECONDARY if button.is_placeholder else BUTTON_STYLE_PRIMARY,
                    "label": button.label,
                    "custom_id": button.custom_id(row_idx, col_idx),
                }
                for col_idx, button in enumerate(row)
            ],
        }
        for row_idx, row in enumerate(controls)
    ]


class WebhookPublisher(MessagePublisher):
    """
    Publishes through a Discord-compatible webhook URL.

    The channel is fixed by the webhook itself, so `channel_id` passed to
    send() is only used when the response does not report one.
    """

    def __init__(self, webhook_url: str, timeout: int = 10, session: Optional[requests.Session] = None):
        if not webhook_url:
            raise ValueError("webhook_url is required")
        self.webhook_url = webhook_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, channel_id: int, animation: bytes, controls: List[List[ControlButton]]) -> GameMessageId:
        payload = {"content": MESSAGE_CONTENT, "components": _components_payload(controls)}
        try:
            response = self.session.post(
                self.webhook_url,
                params={"wait": "true"},
                data={"payload_json": json.dumps(payload)},
                files={"files[0]": (ATTACHMENT_NAME, animation, CONTENT_TYPE)},
                timeout=self.timeout
            )
            response.raise_for_status()
            message = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to send game message to webhook: {e}")
            raise PublishError(str(e)) from e

        message_id = GameMessageId(int(message.get("channel_id", channel_id)), int(message["id"]))
        logger.info(f"Webhook created game message {message_id}")
        return message_id

    def edit(self, message_id: GameMessageId, animation: bytes) -> None:
        # An empty attachments list drops the previous upload
        payload = {"attachments": []}
        try:
            response = self.session.patch(
                f"{self.webhook_url}/messages/{message_id.message_id}",
                data={"payload_json": json.dumps(payload)},
                files={"files[0]": (ATTACHMENT_NAME, animation, CONTENT_TYPE)},
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to edit game message {message_id}: {e}")
            raise PublishError(str(e)) from e
        logger.info(f"Webhook edited game message {message_id}")
