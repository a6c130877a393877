"""
Exceptions raised by the game engine and the session layer.
"""


class SnakeGameError(Exception):
    """Base class for all game errors."""


class TerminalStateError(SnakeGameError, RuntimeError):
    """A transition was requested on a game that already ended."""


class BoardFullError(SnakeGameError, RuntimeError):
    """Food was requested while no free cell is left."""


class EmptyAnimationError(SnakeGameError, ValueError):
    """Rendering or encoding was requested for zero states/frames."""


class UnknownButtonError(SnakeGameError, ValueError):
    """A button token matched neither a direction nor the no-op token."""


class SessionNotFoundError(SnakeGameError, LookupError):
    """No live game is attached to the given message."""
