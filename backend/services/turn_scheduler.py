"""
Turn catch-up: converts wall-clock time between two button presses into
owed ticks and replays them.

The game advances one tick per fixed period, but input only arrives when a
player presses a button. On every press the ticks that elapsed since the
previous press are replayed with the facing that was in effect meanwhile.
"""

import logging
from typing import List

from domain.engine import SnakeEngine
from domain.game_state import GameState

logger = logging.getLogger(__name__)


def owed_ticks(elapsed_ms: int, tick_period_ms: int) -> int:
    """Number of whole tick periods in `elapsed_ms`, never negative."""
    if tick_period_ms <= 0:
        raise ValueError(f"tick_period_ms must be positive, got {tick_period_ms}")
    return max(0, elapsed_ms // tick_period_ms)


def play_turns(engine: SnakeEngine, state: GameState, direction: str, turns: int) -> List[GameState]:
    """
    Replay up to `turns` ticks.

    Returns [state, state_1, ..., state_k], stopping right after the first
    terminal state, so k <= turns. A terminal seed yields just [state].
    """
    sequence = [state]
    current = state
    for _ in range(turns):
        if not current.is_running:
            break
        current = engine.transition(current, direction)
        sequence.append(current)
    return sequence


def catch_up_sequence(
    engine: SnakeEngine,
    state: GameState,
    direction: str,
    elapsed_ms: int,
    tick_period_ms: int
) -> List[GameState]:
    """Replay every tick owed for `elapsed_ms`; the seed state comes first."""
    turns = owed_ticks(elapsed_ms, tick_period_ms)
    sequence = play_turns(engine, state, direction, turns)
    if len(sequence) - 1 < turns:
        logger.info(
            f"Replay stopped after {len(sequence) - 1} of {turns} owed ticks "
            f"with status {sequence[-1].status}"
        )
    return sequence


def catch_up(
    engine: SnakeEngine,
    state: GameState,
    direction: str,
    elapsed_ms: int,
    tick_period_ms: int
) -> GameState:
    """Authoritative state after the owed ticks: the last replayed state."""
    return catch_up_sequence(engine, state, direction, elapsed_ms, tick_period_ms)[-1]
