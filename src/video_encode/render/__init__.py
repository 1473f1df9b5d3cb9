"""Flag and filter-graph builders for the transcode engine."""

from .profiles import (
    CODEC_PROFILES,
    TRANSCODER_OPTIONS,
    get_profile,
    normalise_format,
    supported_formats,
    transcoder_options,
)
from .watermark import build_watermark_filter, overlay_coordinates, watermark_clause

__all__ = [
    "CODEC_PROFILES",
    "TRANSCODER_OPTIONS",
    "build_watermark_filter",
    "get_profile",
    "normalise_format",
    "overlay_coordinates",
    "supported_formats",
    "transcoder_options",
    "watermark_clause",
]
