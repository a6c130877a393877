"""
Frame rendering for snake game replays.

Each GameState of a replay becomes one RGB frame drawn with PIL (Pillow):
- one solid tile per board cell (food, head, body or background)
- a centred caption on terminal states ("You won !" / "You lost...")

The number of frames per animation is capped; longer replays keep the
window that ends at the final state.
"""

import logging
from typing import List, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from domain.constants import LOST, WON
from domain.errors import EmptyAnimationError
from domain.game_state import GameState
from domain.grid import Board

logger = logging.getLogger(__name__)


class ColorScheme:
    """Tile and caption colors"""

    BACKGROUND = "#FFFFFF"
    FOOD = "#FF0000"
    HEAD = "#000000"
    BODY = "#808080"

    WON_TEXT = "#00FF00"
    LOST_TEXT = "#FF0000"


CAPTIONS = {
    WON: ("You won !", ColorScheme.WON_TEXT),
    LOST: ("You lost...", ColorScheme.LOST_TEXT),
}


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to RGB tuple"""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def latest_window(states: Sequence[GameState], max_frames: int) -> List[GameState]:
    """Keep at most `max_frames` states, preferring the ones ending at the final state."""
    if max_frames <= 0:
        raise ValueError(f"max_frames must be positive, got {max_frames}")
    return list(states[-max_frames:])


class FrameRenderer:
    """Render GameState sequences into PIL images"""

    def __init__(self, board: Board, tile_size: int, max_frames: int):
        self.board = board
        self.tile_size = tile_size
        self.max_frames = max_frames
        self.font = ImageFont.load_default()

    @property
    def size(self) -> Tuple[int, int]:
        return (self.board.width * self.tile_size, self.board.height * self.tile_size)

    def render_all(self, states: Sequence[GameState]) -> List[Image.Image]:
        """
        Render one frame per state, in order.

        Args:
            states: replay sequence, seed state first

        Returns:
            At most `max_frames` images; when the sequence is longer, the
            latest states are kept so the animation ends on the final one.

        Raises:
            EmptyAnimationError: if `states` is empty
        """
        if not states:
            raise EmptyAnimationError("Cannot render an empty state sequence")

        window = latest_window(states, self.max_frames)
        if len(window) < len(states):
            logger.info(f"Capped {len(states)} states to the last {len(window)} frames")
        return [self.render_frame(state) for state in window]

    def render_frame(self, state: GameState) -> Image.Image:
        """Render a single frame of the game"""
        img = Image.new('RGB', self.size, hex_to_rgb(ColorScheme.BACKGROUND))
        draw = ImageDraw.Draw(img)

        head = state.head
        body = set(state.body)
        for cell in self.board.cells():
            if cell == state.food:
                color = ColorScheme.FOOD
            elif cell == head:
                color = ColorScheme.HEAD
            elif cell in body:
                color = ColorScheme.BODY
            else:
                continue
            self._draw_cell(draw, cell, hex_to_rgb(color))

        caption = CAPTIONS.get(state.status)
        if caption is not None:
            text, color = caption
            self._draw_centered_text(draw, text, hex_to_rgb(color))

        return img

    def _draw_cell(self, draw: ImageDraw.ImageDraw, cell, color: Tuple[int, int, int]):
        """Fill one tile_size x tile_size block"""
        x, y = cell
        left = x * self.tile_size
        top = y * self.tile_size
        draw.rectangle(
            [left, top, left + self.tile_size - 1, top + self.tile_size - 1],
            fill=color
        )

    def _draw_centered_text(self, draw: ImageDraw.ImageDraw, text: str, color: Tuple[int, int, int]):
        width, height = self.size
        bbox = draw.textbbox((0, 0), text, font=self.font)
        text_width = bbox[2] - bbox[0]
        text_height = bbox[3] - bbox[1]
        draw.text(
            (width // 2 - text_width // 2, height // 2 - text_height // 2),
            text,
            fill=color,
            font=self.font
        )
