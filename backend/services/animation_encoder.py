"""
Animation encoding: packs rendered frames into a single GIF.
"""

import io
import logging
from typing import Sequence

from PIL import Image

from domain.errors import EmptyAnimationError

logger = logging.getLogger(__name__)

IMAGE_FORMAT = "gif"
CONTENT_TYPE = "image/gif"


def encode(frames: Sequence[Image.Image], frame_delay_ms: int, loop: bool = False) -> bytes:
    """
    Encode frames into one animated GIF.

    Args:
        frames: images in playback order, at least one
        frame_delay_ms: how long each frame is shown
        loop: loop forever when True; otherwise play once and hold the last frame

    Returns:
        The GIF bytes

    Raises:
        EmptyAnimationError: if no frames are given
    """
    if not frames:
        raise EmptyAnimationError("Cannot encode an animation without frames")

    first, rest = frames[0], list(frames[1:])
    options = {
        "format": IMAGE_FORMAT,
        "save_all": True,
        "append_images": rest,
        "duration": frame_delay_ms,
    }
    # Without a loop option Pillow writes no NETSCAPE block: the GIF plays once
    if loop:
        options["loop"] = 0

    buffer = io.BytesIO()
    first.save(buffer, **options)
    data = buffer.getvalue()
    logger.debug(f"Encoded {len(frames)} frames into {len(data)} bytes")
    return data
