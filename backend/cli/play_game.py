#!/usr/bin/env python3
"""
CLI tool to play a scripted snake game offline and save every animation

Usage:
    python -m cli.play_game --moves <MOVE:DELAY_MS> [<MOVE:DELAY_MS> ...]

Each move is one button press, DELAY_MS after the previous event. MOVE is
one of UP, DOWN, LEFT, RIGHT or NOOP.

Examples:
    # Turn right after one second, then up after 1.5 seconds
    python -m cli.play_game --moves RIGHT:1000 UP:1500

    # Reproducible game written to a custom directory
    python -m cli.play_game --seed 42 --output-dir ./gifs --moves LEFT:500 NOOP:2500
"""

import os
import sys
import random
import argparse
import logging
from typing import List, Optional, Tuple

# Add parent directory to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv  # noqa: E402

from config import GameConfig, load_config  # noqa: E402
from domain.constants import (  # noqa: E402
    BUTTON_DOWN,
    BUTTON_LEFT,
    BUTTON_RIGHT,
    BUTTON_UP,
    NO_WIDTH_WHITESPACE,
)
from services.game_session import SnakeGameService  # noqa: E402
from services.message_publisher import InMemoryPublisher  # noqa: E402

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

MOVE_TOKENS = {
    "UP": BUTTON_UP,
    "DOWN": BUTTON_DOWN,
    "LEFT": BUTTON_LEFT,
    "RIGHT": BUTTON_RIGHT,
    "NOOP": NO_WIDTH_WHITESPACE,
}


def parse_move(text: str) -> Tuple[str, int]:
    """Parse MOVE:DELAY_MS into (button token, delay)"""
    name, sep, delay = text.partition(':')
    name = name.strip().upper()
    if not sep or name not in MOVE_TOKENS:
        raise argparse.ArgumentTypeError(
            f"Invalid move '{text}', expected MOVE:DELAY_MS with MOVE in {sorted(MOVE_TOKENS)}"
        )
    try:
        delay_ms = int(delay)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid delay in '{text}'") from None
    if delay_ms < 0:
        raise argparse.ArgumentTypeError(f"Delay must not be negative in '{text}'")
    return MOVE_TOKENS[name], delay_ms


def write_animation(output_dir: str, index: int, data: bytes) -> str:
    path = os.path.join(output_dir, f"game_{index:03d}.gif")
    with open(path, 'wb') as f:
        f.write(data)
    return path


def play(
    moves: List[Tuple[str, int]],
    output_dir: str,
    seed=None,
    config: Optional[GameConfig] = None
) -> List[str]:
    """
    Start a game, apply each scripted press and save every published GIF.

    `config` defaults to the environment configuration.

    Returns:
        Paths of the written files, the start frame first
    """
    config = config or load_config()
    publisher = InMemoryPublisher()
    service = SnakeGameService(config, publisher, rng=random.Random(seed))
    os.makedirs(output_dir, exist_ok=True)

    clock_ms = 0
    session = service.start_game(channel_id=0, created_at_ms=clock_ms)
    message_id = session.message_id
    print("\n" + session.state.print_board(service.board) + "\n")
    logger.info(f"Initial facing: {session.facing}")

    paths = [write_animation(output_dir, 0, publisher.fetch_attachment(message_id))]
    for index, (token, delay_ms) in enumerate(moves, start=1):
        clock_ms += delay_ms
        result = service.press_button(message_id, token, clock_ms)
        print("\n" + result.state.print_board(service.board) + "\n")
        paths.append(write_animation(output_dir, index, publisher.fetch_attachment(message_id)))
        logger.info(
            f"Press {index}: {result.owed_ticks} owed ticks, {result.frames} frames, "
            f"status={result.state.status}, facing={result.facing}"
        )

    return paths


def main():
    parser = argparse.ArgumentParser(
        description='Play a scripted snake game and save the published GIFs',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        '--moves',
        type=parse_move,
        nargs='+',
        required=True,
        help='Button presses as MOVE:DELAY_MS'
    )
    parser.add_argument(
        '--output-dir',
        default='played_games',
        help='Directory for the generated GIFs (default: played_games)'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Seed for spawn and food placement'
    )
    args = parser.parse_args()

    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    paths = play(args.moves, args.output_dir, seed=args.seed, config=config)
    logger.info(f"Wrote {len(paths)} animations to {args.output_dir}")


if __name__ == '__main__':
    main()
