"""
Process-wide logger consulted by the transcode engine.

The slot is a single global reference. :func:`activate_logger` swaps it for
the duration of a ``with`` block and restores the previous logger on every
exit path. Overlapping activations from concurrent encodes are not supported:
a later restore can clobber an earlier swap, so callers must serialize them.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

__all__ = ["DEFAULT_ENGINE_LOGGER", "activate_logger", "get_logger", "set_logger"]

DEFAULT_ENGINE_LOGGER = logging.getLogger("video_encode.ffmpeg")

_slot: logging.Logger = DEFAULT_ENGINE_LOGGER


def get_logger() -> logging.Logger:
    return _slot


def set_logger(value: logging.Logger) -> None:
    global _slot
    _slot = value


@contextmanager
def activate_logger(value: Optional[logging.Logger]) -> Iterator[logging.Logger]:
    """Install *value* in the slot until the block exits; ``None`` leaves it untouched."""

    if value is None:
        yield get_logger()
        return
    previous = get_logger()
    set_logger(value)
    try:
        yield value
    finally:
        set_logger(previous)
