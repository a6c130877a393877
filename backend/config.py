"""
Process-wide game configuration.

Values come from environment variables (optionally loaded from a .env file
by the entry points) and are fixed for the lifetime of the process.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from domain.constants import (
    DEFAULT_BOARD_WIDTH,
    DEFAULT_BOARD_HEIGHT,
    DEFAULT_TILE_SIZE,
    DEFAULT_TICK_PERIOD_MS,
)
from domain.grid import Board

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


@dataclass(frozen=True)
class GameConfig:
    board_width: int = DEFAULT_BOARD_WIDTH
    board_height: int = DEFAULT_BOARD_HEIGHT
    tile_size: int = DEFAULT_TILE_SIZE
    tick_period_ms: int = DEFAULT_TICK_PERIOD_MS
    webhook_url: Optional[str] = None
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    def __post_init__(self):
        if self.tile_size <= 0:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        if self.tick_period_ms <= 0:
            raise ValueError(f"tick_period_ms must be positive, got {self.tick_period_ms}")
        Board(self.board_width, self.board_height)

    @property
    def board(self) -> Board:
        return Board(self.board_width, self.board_height)

    @property
    def max_frames(self) -> int:
        """Longest animation ever rendered: one frame per cell of the longer side."""
        return max(self.board_width, self.board_height)

    @property
    def frame_delay_ms(self) -> int:
        return self.tick_period_ms


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_config() -> GameConfig:
    """Build the configuration from SNAKE_* environment variables."""
    origins_env = os.getenv("CORS_ALLOWED_ORIGINS")
    if origins_env:
        origins = [o.strip() for o in origins_env.split(",") if o.strip()]
    else:
        origins = list(DEFAULT_CORS_ORIGINS)

    return GameConfig(
        board_width=_int_env("SNAKE_BOARD_WIDTH", DEFAULT_BOARD_WIDTH),
        board_height=_int_env("SNAKE_BOARD_HEIGHT", DEFAULT_BOARD_HEIGHT),
        tile_size=_int_env("SNAKE_TILE_SIZE", DEFAULT_TILE_SIZE),
        tick_period_ms=_int_env("SNAKE_TICK_PERIOD_MS", DEFAULT_TICK_PERIOD_MS),
        webhook_url=os.getenv("SNAKE_WEBHOOK_URL") or None,
        log_level=os.getenv("SNAKE_LOG_LEVEL", "INFO").upper(),
        cors_origins=origins,
    )
