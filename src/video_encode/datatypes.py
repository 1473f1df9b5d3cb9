"""Configuration dataclasses for the encode pipeline."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .errors import ConfigError

SAME_RESOLUTION = "same"
DEFAULT_RESOLUTION = "640x360"
DEFAULT_PIXELS_FROM_EDGE = 5

Hook = Callable[[str, "EncodeOptions"], None]
LoggerAccessor = Callable[[], logging.Logger]

CALLBACK_SLOTS = ("before_transcode", "after_transcode", "on_error", "always")


class WatermarkPosition(str, Enum):
    """Frame corner the watermark image is anchored to."""

    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"


@dataclass(frozen=True)
class WatermarkConfig:
    """Image overlay composited onto every output frame."""

    path: str
    position: Optional[WatermarkPosition] = None
    pixels_from_edge: Optional[int] = None


@dataclass(frozen=True)
class EncodeCallbacks:
    """
    Lifecycle handlers invoked around one transcode attempt.

    Every slot holds a callable taking ``(format, options)`` or ``None`` when
    no handler is registered.
    """

    before_transcode: Optional[Hook] = None
    after_transcode: Optional[Hook] = None
    on_error: Optional[Hook] = None
    always: Optional[Hook] = None

    @classmethod
    def from_model(cls, model: Any, names: Mapping[str, Optional[str]]) -> "EncodeCallbacks":
        """
        Bind model methods named in *names* to the matching handler slots.

        Parameters:
            model: Host object owning the hook methods.
            names: Mapping of slot name (``before_transcode`` ...) to method name.

        Raises:
            ConfigError: If a slot is unknown or the model lacks a callable
                attribute with the given name.
        """
        bound: Dict[str, Hook] = {}
        for slot, method_name in names.items():
            if slot not in CALLBACK_SLOTS:
                raise ConfigError(
                    f"Unknown callback slot {slot!r}; expected one of: {', '.join(CALLBACK_SLOTS)}"
                )
            if not method_name:
                continue
            handler = getattr(model, method_name, None)
            if not callable(handler):
                raise ConfigError(f"callbacks.{slot}: model has no method named {method_name!r}")
            bound[slot] = handler
        return cls(**bound)


@dataclass(frozen=True)
class EncodeOptions:
    """Declarative per-call encode configuration."""

    resolution: Optional[str] = None
    custom: Optional[str] = None
    watermark: Optional[WatermarkConfig] = None
    callbacks: EncodeCallbacks = field(default_factory=EncodeCallbacks)
    logger: Optional[LoggerAccessor] = None


@dataclass(frozen=True)
class EncodeRequest:
    """One encode call: the source file, its target format and options."""

    source_path: Path
    format: str
    options: EncodeOptions = field(default_factory=EncodeOptions)


@dataclass(frozen=True)
class CodecProfile:
    """Static codec defaults for one target format."""

    video_codec: str
    audio_codec: str
    custom: str


@dataclass(frozen=True)
class EngineOptions:
    """Exact parameters handed to the transcode engine for one request."""

    output_path: Path
    video_codec: str
    audio_codec: str
    custom: str
    resolution: str
    transcoder_options: Dict[str, str] = field(default_factory=dict)

    def as_transcode_options(self) -> Dict[str, str]:
        return {
            "video_codec": self.video_codec,
            "audio_codec": self.audio_codec,
            "custom": self.custom,
            "resolution": self.resolution,
        }


@dataclass(frozen=True)
class EncodeSuccess:
    path: Path


@dataclass(frozen=True)
class EncodeFailure:
    error: Exception


EncodeOutcome = Union[EncodeSuccess, EncodeFailure]


@dataclass
class EngineConfig:
    """Locations and limits for the ffmpeg binaries."""

    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"
    timeout_seconds: float = 0.0


@dataclass
class PresetConfig:
    """Named encode preset loaded from the configuration file."""

    format: str = "webm"
    resolution: Optional[str] = None
    custom: Optional[str] = None
    watermark: Optional[WatermarkConfig] = None


@dataclass
class AppConfig:
    """Top-level configuration container."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    presets: Dict[str, PresetConfig] = field(default_factory=dict)
