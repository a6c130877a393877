"""
Board geometry: bounds checks and single-cell steps.
"""

from dataclasses import dataclass
from typing import Iterator, Tuple

from .constants import MOVE_DELTAS

Position = Tuple[int, int]


@dataclass(frozen=True)
class Board:
    """A width x height grid of cells, (0, 0) at the top left."""

    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Board must be at least 1x1, got {self.width}x{self.height}")

    @property
    def area(self) -> int:
        return self.width * self.height

    def contains(self, pos: Position) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def cells(self) -> Iterator[Position]:
        """Yield every cell row by row."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y)

    @staticmethod
    def step(pos: Position, direction: str) -> Position:
        """Return the cell next to `pos` in `direction`; may lie off the board."""
        try:
            dx, dy = MOVE_DELTAS[direction]
        except KeyError:
            raise ValueError(f"Unknown direction: {direction!r}") from None
        return (pos[0] + dx, pos[1] + dy)
