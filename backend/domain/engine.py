"""
Transition rules: one tick of the game.
"""

import logging

from .constants import LOST, WON, VALID_MOVES
from .errors import TerminalStateError
from .food import FoodPlacementCache
from .game_state import GameState
from .grid import Board

logger = logging.getLogger(__name__)


class SnakeEngine:
    """
    Pure transition function over GameState values.

    The only state the engine carries is the food cache; for a fixed
    direction and fixed random draws every transition is reproducible.
    """

    def __init__(self, board: Board, food_cache: FoodPlacementCache):
        self.board = board
        self.food_cache = food_cache

    def transition(self, state: GameState, direction: str) -> GameState:
        """
        Execute one tick:
          1) Move the head one cell towards `direction`
          2) Leaving the board loses, body and food unchanged
          3) Running into the body (the vacated tail excluded) loses
          4) Eating the food grows the snake; filling the board wins
          5) Otherwise the snake translates by one cell

        Raises:
            TerminalStateError: if the game already ended
            ValueError: if the direction is unknown
        """
        if not state.is_running:
            raise TerminalStateError(f"Cannot advance a game with status {state.status}")
        if direction not in VALID_MOVES:
            raise ValueError(f"Unknown direction: {direction!r}")

        body = state.body
        new_head = self.board.step(state.head, direction)

        if not self.board.contains(new_head):
            logger.info(f"Snake hit the wall at {new_head}")
            return state.with_status(LOST)

        # The tail moves away this tick, so only body[:-1] can block the head
        if new_head in body[:-1]:
            logger.info(f"Snake ran into itself at {new_head}")
            return state.with_status(LOST)

        if new_head == state.food:
            grown = (new_head,) + body
            if len(grown) > self.board.area:
                raise AssertionError(f"Snake of length {len(grown)} exceeds the board")
            if len(grown) == self.board.area:
                logger.info("Snake filled the board")
                # The won state keeps the pre-growth snake and food
                return state.with_status(WON)
            return GameState(grown, self.food_cache.place_food(grown))

        return GameState((new_head,) + body[:-1], state.food)
