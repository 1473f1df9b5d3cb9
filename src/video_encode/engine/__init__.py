"""External transcode engine adapters and the shared engine logger slot."""

from .logger_slot import activate_logger, get_logger, set_logger
from .movie import FFmpegMovie
from .theora import OGV_EXTENSION, FfmpegTheora

__all__ = [
    "FFmpegMovie",
    "FfmpegTheora",
    "OGV_EXTENSION",
    "activate_logger",
    "get_logger",
    "set_logger",
]
