from __future__ import annotations

from collections.abc import Mapping
from typing import Dict, List

from video_encode.datatypes import CodecProfile
from video_encode.errors import UnsupportedFormatError

__all__ = [
    "CODEC_PROFILES",
    "TRANSCODER_OPTIONS",
    "get_profile",
    "normalise_format",
    "supported_formats",
    "transcoder_options",
]


CODEC_PROFILES: Mapping[str, CodecProfile] = {
    "webm": CodecProfile(
        video_codec="libvpx",
        audio_codec="libvorbis",
        custom="-b 1500k -ab 160000 -f webm -g 30 ",
    ),
    "mp4": CodecProfile(
        video_codec="libx264",
        audio_codec="aac",
        custom="-qscale 0 -preset slow -g 30 ",
    ),
    "ogv": CodecProfile(
        video_codec="libtheora",
        audio_codec="libvorbis",
        custom="-b 1500k -ab 160000 -g 30 ",
    ),
}

# Same for every format: keep the requested width, derive the height.
TRANSCODER_OPTIONS: Mapping[str, str] = {"preserve_aspect_ratio": "width"}


def normalise_format(fmt: str) -> str:
    """Return the lookup key for *fmt* (case-insensitive, leading dot ignored)."""

    return str(fmt).strip().lstrip(".").lower()


def get_profile(fmt: str) -> CodecProfile:
    """Return the codec profile for *fmt* or raise ``UnsupportedFormatError``."""

    profile = CODEC_PROFILES.get(normalise_format(fmt))
    if profile is None:
        raise UnsupportedFormatError(fmt)
    return profile


def transcoder_options() -> Dict[str, str]:
    return dict(TRANSCODER_OPTIONS)


def supported_formats() -> List[str]:
    return sorted(CODEC_PROFILES)
