"""
Tests for the frame renderer.
"""

import sys
import os

import pytest
from PIL import ImageChops

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain import Board, GameState, EmptyAnimationError  # noqa: E402
from domain.constants import LOST, WON  # noqa: E402
from services.frame_renderer import FrameRenderer, hex_to_rgb, latest_window  # noqa: E402

WHITE = (255, 255, 255)
RED = (255, 0, 0)
BLACK = (0, 0, 0)
GRAY = (128, 128, 128)


def tile_color(img, cell, tile_size=10):
    x, y = cell
    return img.getpixel((x * tile_size + 1, y * tile_size + 1))


class TestHelpers:
    """Tests for module helpers."""

    def test_hex_to_rgb(self):
        assert hex_to_rgb("#808080") == GRAY
        assert hex_to_rgb("FF0000") == RED

    def test_latest_window_keeps_the_end(self):
        assert latest_window([1, 2, 3, 4, 5], 3) == [3, 4, 5]
        assert latest_window([1, 2], 3) == [1, 2]

    def test_latest_window_rejects_zero_cap(self):
        with pytest.raises(ValueError):
            latest_window([1], 0)


class TestRenderFrame:
    """Tests for FrameRenderer.render_frame."""

    def test_frame_size_is_board_times_tile(self):
        renderer = FrameRenderer(Board(25, 15), 10, 25)
        img = renderer.render_frame(GameState([(5, 5)], (2, 2)))
        assert img.size == (250, 150)
        assert img.mode == "RGB"

    def test_tiles_are_colored_by_role(self):
        renderer = FrameRenderer(Board(6, 4), 10, 6)
        state = GameState([(2, 1), (1, 1), (1, 2)], (4, 3))

        img = renderer.render_frame(state)

        assert tile_color(img, (4, 3)) == RED
        assert tile_color(img, (2, 1)) == BLACK
        assert tile_color(img, (1, 1)) == GRAY
        assert tile_color(img, (1, 2)) == GRAY
        assert tile_color(img, (0, 0)) == WHITE
        assert tile_color(img, (5, 3)) == WHITE

    def test_tiles_are_solid_blocks(self):
        renderer = FrameRenderer(Board(4, 4), 10, 4)
        img = renderer.render_frame(GameState([(1, 2)], (3, 0)))

        block = img.crop((10, 20, 20, 30))
        assert block.getcolors() == [(100, BLACK)]
        assert img.getpixel((20, 20)) == WHITE

    def test_running_frame_has_no_caption(self):
        renderer = FrameRenderer(Board(25, 15), 10, 25)
        img = renderer.render_frame(GameState([(0, 0)], (24, 14)))
        colors = {color for _, color in img.getcolors(maxcolors=1000)}
        assert colors == {WHITE, BLACK, RED}

    @pytest.mark.parametrize("status", [LOST, WON])
    def test_terminal_frames_get_a_caption(self, status):
        renderer = FrameRenderer(Board(25, 15), 10, 25)
        running = GameState([(0, 0)], (24, 14))

        plain = renderer.render_frame(running)
        captioned = renderer.render_frame(running.with_status(status))

        assert ImageChops.difference(plain, captioned).getbbox() is not None

    def test_won_caption_is_green_and_lost_caption_is_red(self):
        renderer = FrameRenderer(Board(25, 15), 10, 25)
        state = GameState([(0, 0)], (24, 14))

        def greenish(img):
            return any(g > 150 and r < 150 and b < 150 for _, (r, g, b) in img.getcolors(maxcolors=10000))

        assert greenish(renderer.render_frame(state.with_status(WON)))
        assert not greenish(renderer.render_frame(state.with_status(LOST)))


class TestRenderAll:
    """Tests for FrameRenderer.render_all."""

    def test_one_frame_per_state(self):
        renderer = FrameRenderer(Board(25, 15), 10, 25)
        states = [GameState([(x, 5)], (0, 0)) for x in range(3, 8)]
        assert len(renderer.render_all(states)) == 5

    def test_single_state(self):
        renderer = FrameRenderer(Board(25, 15), 10, 25)
        assert len(renderer.render_all([GameState([(3, 3)], (0, 0))])) == 1

    def test_frames_are_capped_to_the_latest_window(self):
        renderer = FrameRenderer(Board(25, 15), 10, 5)
        states = [GameState([(x, 5)], (0, 0)) for x in range(1, 25)]

        frames = renderer.render_all(states)

        assert len(frames) == 5
        assert frames[0].tobytes() == renderer.render_frame(states[-5]).tobytes()
        assert frames[-1].tobytes() == renderer.render_frame(states[-1]).tobytes()

    def test_cap_defaults_to_longer_board_side(self):
        board = Board(25, 15)
        renderer = FrameRenderer(board, 10, max(board.width, board.height))
        states = [GameState([(x % 25, 5)], (0, 0)) for x in range(40)]
        assert len(renderer.render_all(states)) == 25

    def test_empty_sequence_raises(self):
        renderer = FrameRenderer(Board(25, 15), 10, 25)
        with pytest.raises(EmptyAnimationError):
            renderer.render_all([])
