"""
Identity of the published game message and its button layout.
"""

from dataclasses import dataclass
from typing import Dict, List

from .constants import (
    BUTTON_DIRECTIONS,
    BUTTON_DOWN,
    BUTTON_LEFT,
    BUTTON_RIGHT,
    BUTTON_UP,
    NO_WIDTH_WHITESPACE,
)
from .errors import UnknownButtonError


@dataclass(frozen=True)
class GameMessageId:
    """(channel, message) pair addressing the message that displays a game."""

    channel_id: int
    message_id: int

    def __str__(self):
        return f"{self.channel_id}/{self.message_id}"


CUSTOM_ID_PREFIX = "snake"


@dataclass(frozen=True)
class ControlButton:
    label: str

    @property
    def is_placeholder(self) -> bool:
        return self.label == NO_WIDTH_WHITESPACE

    def custom_id(self, row_idx: int, col_idx: int) -> str:
        """Component id carrying the token; the grid slot keeps ids unique."""
        return f"{CUSTOM_ID_PREFIX}:{row_idx}{col_idx}:{self.label}"

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "token": self.label}


# 3x3 grid: arrows on the edges of a cross, inert buttons in the other slots
CONTROL_LAYOUT: List[List[ControlButton]] = [
    [ControlButton(NO_WIDTH_WHITESPACE), ControlButton(BUTTON_UP), ControlButton(NO_WIDTH_WHITESPACE)],
    [ControlButton(BUTTON_LEFT), ControlButton(NO_WIDTH_WHITESPACE), ControlButton(BUTTON_RIGHT)],
    [ControlButton(NO_WIDTH_WHITESPACE), ControlButton(BUTTON_DOWN), ControlButton(NO_WIDTH_WHITESPACE)],
]


def control_layout_dict() -> List[List[Dict[str, str]]]:
    return [[button.to_dict() for button in row] for row in CONTROL_LAYOUT]


def resolve_button(token: str, current_direction: str) -> str:
    """
    Map a pressed button token to the new facing.

    The no-op token keeps `current_direction`.

    Raises:
        UnknownButtonError: for any other token
    """
    if token not in BUTTON_DIRECTIONS:
        raise UnknownButtonError(f"Unknown button token: {token!r}")
    direction = BUTTON_DIRECTIONS[token]
    return current_direction if direction is None else direction


def token_from_custom_id(custom_id: str) -> str:
    """
    Extract the button token from a component id built by ControlButton.custom_id.

    Raises:
        UnknownButtonError: if the id was not built for a game button
    """
    prefix, sep, rest = custom_id.partition(":")
    slot, sep2, token = rest.partition(":")
    if prefix != CUSTOM_ID_PREFIX or not sep or not sep2 or len(slot) != 2 or not slot.isdigit():
        raise UnknownButtonError(f"Not a game button id: {custom_id!r}")
    return token
