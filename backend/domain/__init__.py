"""
Domain entities for the catch-up snake game.

This module contains the core game entities and rules that are independent
of infrastructure concerns (rendering, message transport, HTTP).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES,
    RUNNING, LOST, WON,
    NO_WIDTH_WHITESPACE, BUTTON_DIRECTIONS,
)
from .errors import (
    SnakeGameError,
    TerminalStateError,
    BoardFullError,
    EmptyAnimationError,
    UnknownButtonError,
    SessionNotFoundError,
)
from .grid import Board, Position
from .game_state import GameState
from .food import FoodPlacementCache
from .engine import SnakeEngine
from .message import GameMessageId, ControlButton, CONTROL_LAYOUT, resolve_button, token_from_custom_id

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES',
    'RUNNING', 'LOST', 'WON',
    'NO_WIDTH_WHITESPACE', 'BUTTON_DIRECTIONS',
    'SnakeGameError', 'TerminalStateError', 'BoardFullError',
    'EmptyAnimationError', 'UnknownButtonError', 'SessionNotFoundError',
    'Board', 'Position',
    'GameState',
    'FoodPlacementCache',
    'SnakeEngine',
    'GameMessageId', 'ControlButton', 'CONTROL_LAYOUT', 'resolve_button', 'token_from_custom_id',
]
