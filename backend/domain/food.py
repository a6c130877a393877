"""
Food placement with a one-entry cache keyed by snake length.
"""

import logging
import random
from typing import Optional, Sequence

from .errors import BoardFullError
from .grid import Board, Position

logger = logging.getLogger(__name__)


class FoodPlacementCache:
    """
    Picks a uniformly random free cell for the next food.

    The last pick is remembered together with the snake length it was made
    for. A replay that reaches the same length again (re-running the same
    ticks) gets the same food back instead of a fresh random cell, so a
    replayed sequence stays consistent with the first run.

    Attributes:
        board: the board to place food on
        rng: random source exposing randrange(lo, hi)
        last_length: snake length of the cached pick, -1 when empty
        last_food: the cached pick
    """

    def __init__(self, board: Board, rng: Optional[random.Random] = None):
        self.board = board
        self.rng = rng or random.Random()
        self.last_length = -1
        self.last_food: Optional[Position] = None

    def place_food(self, body: Sequence[Position]) -> Position:
        """
        Return the food cell for a snake with the given body.

        Raises:
            BoardFullError: if the body already covers the whole board
        """
        occupied = set(body)
        if len(body) == self.last_length and self.last_food not in occupied:
            return self.last_food

        food = self._pick(occupied)
        self.last_length = len(body)
        self.last_food = food
        logger.debug(f"Placed food at {food} for length {len(body)}")
        return food

    def random_free_cell(self, body: Sequence[Position]) -> Position:
        """Uncached uniform pick, used when spawning a new game."""
        return self._pick(set(body))

    def _pick(self, occupied) -> Position:
        free = [cell for cell in self.board.cells() if cell not in occupied]
        if not free:
            raise BoardFullError(f"No free cell left on a {self.board.width}x{self.board.height} board")
        return free[self.rng.randrange(0, len(free))]
