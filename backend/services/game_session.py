"""
Session orchestration: start a game, then catch up and republish on every
button press.

Each live game is a GameSession record owned by SnakeGameService and keyed by
the id of the message that displays it. A session processes one event at a
time; callers that may receive concurrent presses for the same message must
serialize them (see app.py).
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config import GameConfig
from domain.constants import VALID_MOVES
from domain.engine import SnakeEngine
from domain.errors import SessionNotFoundError
from domain.food import FoodPlacementCache
from domain.game_state import GameState
from domain.message import CONTROL_LAYOUT, GameMessageId, resolve_button
from services.animation_encoder import encode
from services.frame_renderer import FrameRenderer
from services.message_publisher import MessagePublisher, PublishError
from services.turn_scheduler import catch_up_sequence, owed_ticks

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """
    Mutable per-game record.

    Attributes:
        message_id: the message displaying this game
        state: current GameState, replaced (never mutated) on each event
        facing: direction applied to upcoming ticks
        last_event_ms: timestamp of the last processed event
        food_cache: length-keyed food memo for this game
        last_replay: states rendered by the last event
    """

    message_id: GameMessageId
    state: GameState
    facing: str
    last_event_ms: int
    food_cache: FoodPlacementCache
    last_replay: List[GameState] = field(default_factory=list)


@dataclass(frozen=True)
class ButtonResult:
    """Outcome of one processed button press."""

    state: GameState
    facing: str
    owed_ticks: int
    frames: int
    published: bool


class SnakeGameService:
    """
    Manages:
      - Sessions (one per published message)
      - Spawning new games
      - Catching up owed ticks on button presses
      - Rendering, encoding and publishing the replay
    """

    def __init__(
        self,
        config: GameConfig,
        publisher: MessagePublisher,
        rng: Optional[random.Random] = None
    ):
        self.config = config
        self.board = config.board
        self.publisher = publisher
        self.rng = rng or random.Random()
        self.renderer = FrameRenderer(self.board, config.tile_size, config.max_frames)
        self.sessions: Dict[GameMessageId, GameSession] = {}

    def spawn_state(self, food_cache: FoodPlacementCache) -> GameState:
        """Head within the inner half of the board, food on any other cell."""
        width, height = self.board.width, self.board.height
        head = (
            self.rng.randrange(width // 4, max(width // 4 * 3, width // 4 + 1)),
            self.rng.randrange(height // 4, max(height // 4 * 3, height // 4 + 1)),
        )
        body = (head,)
        return GameState(body, food_cache.random_free_cell(body))

    def start_game(self, channel_id: int, created_at_ms: int) -> GameSession:
        """
        Create a game, publish its first frame with the controls and record
        the session under the returned message id.

        Raises:
            PublishError: if the first message could not be sent
        """
        food_cache = FoodPlacementCache(self.board, self.rng)
        state = self.spawn_state(food_cache)
        facing = sorted(VALID_MOVES)[self.rng.randrange(0, len(VALID_MOVES))]

        animation = self._animate([state])
        message_id = self.publisher.send(channel_id, animation, CONTROL_LAYOUT)

        session = GameSession(
            message_id=message_id,
            state=state,
            facing=facing,
            last_event_ms=created_at_ms,
            food_cache=food_cache,
            last_replay=[state],
        )
        self.sessions[message_id] = session
        logger.info(f"Started game {message_id}: head={state.head} food={state.food} facing={facing}")
        return session

    def get_session(self, message_id: GameMessageId) -> GameSession:
        try:
            return self.sessions[message_id]
        except KeyError:
            raise SessionNotFoundError(f"No game is attached to message {message_id}") from None

    def press_button(self, message_id: GameMessageId, token: str, event_ms: int) -> ButtonResult:
        """
        Process one button press:
          1) Replay the ticks owed since the last event with the old facing
          2) Store the last replayed state
          3) Apply the pressed direction to the facing
          4) Render the full replay and edit the message in place

        Raises:
            SessionNotFoundError: if no game is attached to `message_id`
            UnknownButtonError: if `token` is not a known button
        """
        session = self.get_session(message_id)
        # Reject bad tokens before touching the session
        new_facing = resolve_button(token, session.facing)

        elapsed_ms = event_ms - session.last_event_ms
        session.last_event_ms = event_ms

        engine = SnakeEngine(self.board, session.food_cache)
        ticks = owed_ticks(elapsed_ms, self.config.tick_period_ms)
        if session.state.is_running:
            replay = catch_up_sequence(engine, session.state, session.facing, elapsed_ms, self.config.tick_period_ms)
        else:
            replay = [session.state]

        session.state = replay[-1]
        session.facing = new_facing
        session.last_replay = replay

        logger.info(
            f"Game {message_id}: {elapsed_ms}ms elapsed, {ticks} owed ticks, "
            f"{len(replay) - 1} played, status={session.state.status}, facing={session.facing}"
        )

        frames = self.renderer.render_all(replay)
        animation = encode(frames, self.config.frame_delay_ms)
        published = True
        try:
            self.publisher.edit(message_id, animation)
        except PublishError as e:
            # The in-memory game has already advanced; only the display is stale
            logger.error(f"Could not update game message {message_id}: {e}")
            published = False

        return ButtonResult(
            state=session.state,
            facing=session.facing,
            owed_ticks=ticks,
            frames=len(frames),
            published=published,
        )

    def _animate(self, states: List[GameState]) -> bytes:
        frames = self.renderer.render_all(states)
        return encode(frames, self.config.frame_delay_ms)
