"""
Game constants for the catch-up snake game.
"""

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# (dx, dy) per direction, screen coordinates: y grows downwards
MOVE_DELTAS = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

# Run status
RUNNING = "RUNNING"
LOST = "LOST"
WON = "WON"
TERMINAL_STATUSES = {LOST, WON}

# Button tokens as shown on the published message
NO_WIDTH_WHITESPACE = "\u200b"
BUTTON_UP = "⬆"
BUTTON_LEFT = "⬅"
BUTTON_RIGHT = "➡"
BUTTON_DOWN = "⬇"

# Token -> direction; the no-op token maps to None (keep current facing)
BUTTON_DIRECTIONS = {
    BUTTON_UP: UP,
    BUTTON_LEFT: LEFT,
    BUTTON_RIGHT: RIGHT,
    BUTTON_DOWN: DOWN,
    NO_WIDTH_WHITESPACE: None,
}

# Game settings
DEFAULT_BOARD_WIDTH = 25
DEFAULT_BOARD_HEIGHT = 15
DEFAULT_TILE_SIZE = 10
DEFAULT_TICK_PERIOD_MS = 500
