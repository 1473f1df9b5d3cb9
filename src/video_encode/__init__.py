"""Declarative video transcoding with lifecycle hooks around ffmpeg."""

from video_encode.datatypes import (
    SAME_RESOLUTION,
    CodecProfile,
    EncodeCallbacks,
    EncodeOptions,
    EncodeRequest,
    EngineConfig,
    EngineOptions,
    WatermarkConfig,
    WatermarkPosition,
)
from video_encode.errors import ConfigError, EngineError, ProcessingError, UnsupportedFormatError
from video_encode.options import build_engine_options
from video_encode.orchestration.lifecycle import VideoEncoder
from video_encode.uploader import VideoUploader

__all__ = (
    "SAME_RESOLUTION",
    "CodecProfile",
    "ConfigError",
    "EncodeCallbacks",
    "EncodeOptions",
    "EncodeRequest",
    "EngineConfig",
    "EngineError",
    "EngineOptions",
    "ProcessingError",
    "UnsupportedFormatError",
    "VideoEncoder",
    "VideoUploader",
    "WatermarkConfig",
    "WatermarkPosition",
    "build_engine_options",
)
