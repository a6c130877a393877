"""
GameState entity - an immutable snapshot of the game at one tick.
"""

from dataclasses import dataclass, replace
from typing import Tuple

from .constants import RUNNING, TERMINAL_STATUSES
from .grid import Board, Position


@dataclass(frozen=True)
class GameState:
    """
    A snapshot of the game at a specific tick.

    Attributes:
        body: tuple of (x, y) from head at index 0 to tail at the end
        food: (x, y) of the single food cell
        status: RUNNING, LOST or WON

    States are never modified in place; every tick produces a new one.
    """

    body: Tuple[Position, ...]
    food: Position
    status: str = RUNNING

    def __post_init__(self):
        if not self.body:
            raise ValueError("A snake needs at least one segment")
        # Accept lists from callers but always store tuples
        object.__setattr__(self, "body", tuple(tuple(p) for p in self.body))
        object.__setattr__(self, "food", tuple(self.food))

    @property
    def head(self) -> Position:
        """Return the head position (first element)."""
        return self.body[0]

    @property
    def length(self) -> int:
        return len(self.body)

    @property
    def is_running(self) -> bool:
        return self.status == RUNNING

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def with_status(self, status: str) -> "GameState":
        return replace(self, status=status)

    def print_board(self, board: Board) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        A = food
        H = snake head
        T = snake tail
        Row 0 is printed first, x-axis labels at the bottom.
        """
        grid = [['.' for _ in range(board.width)] for _ in range(board.height)]

        for pos_idx, (x, y) in enumerate(self.body):
            if board.contains((x, y)):
                grid[y][x] = 'H' if pos_idx == 0 else 'T'

        fx, fy = self.food
        if board.contains(self.food):
            grid[fy][fx] = 'A'

        result = [f"{y:2d} {' '.join(row)}" for y, row in enumerate(grid)]
        result.append("   " + " ".join(str(i % 10) for i in range(board.width)))
        result.append(f"status={self.status} length={self.length}")
        return "\n".join(result)

    def to_dict(self) -> dict:
        """JSON friendly view of the state."""
        return {
            "body": [list(p) for p in self.body],
            "food": list(self.food),
            "status": self.status,
        }

    def __repr__(self):
        return f"<GameState head={self.head}, length={self.length}, food={self.food}, status={self.status}>"
