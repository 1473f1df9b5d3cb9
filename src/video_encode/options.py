"""Turn a declarative encode request into engine invocation parameters."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from video_encode.datatypes import (
    DEFAULT_RESOLUTION,
    SAME_RESOLUTION,
    EncodeOptions,
    EncodeRequest,
    EngineOptions,
)
from video_encode.render.profiles import get_profile, normalise_format, transcoder_options
from video_encode.render.watermark import watermark_clause

__all__ = [
    "TMPFILE_STEM",
    "build_engine_options",
    "compose_flags",
    "resolve_resolution",
    "temp_output_path",
]

logger = logging.getLogger(__name__)

TMPFILE_STEM = "tmpfile"

ResolutionProvider = Callable[[], str]


def temp_output_path(source_path: Path | str, extension: str) -> Path:
    """Return the temp output sibling of *source_path* for *extension*."""

    return Path(source_path).parent / f"{TMPFILE_STEM}.{extension}"


def compose_flags(default_flags: str, options: EncodeOptions) -> str:
    """
    Pick the flag string for one encode and layer the watermark on top.

    Custom flags replace the format defaults outright. The watermark clause is
    appended to whichever string was chosen.
    """

    flags = options.custom if options.custom is not None else default_flags
    if options.watermark is None:
        return flags
    separator = "" if not flags or flags[-1].isspace() else " "
    return f"{flags}{separator}{watermark_clause(options.watermark)}"


def resolve_resolution(options: EncodeOptions, resolution_provider: ResolutionProvider) -> str:
    """Return the output resolution, probing the source only for ``same``."""

    value = options.resolution
    if value is None:
        return DEFAULT_RESOLUTION
    if str(value).strip().lower() == SAME_RESOLUTION:
        resolved = resolution_provider()
        logger.debug("Matched source resolution %s", resolved)
        return resolved
    return value


def build_engine_options(request: EncodeRequest, resolution_provider: ResolutionProvider) -> EngineOptions:
    """
    Build the exact engine parameters for *request*.

    Parameters:
        request (EncodeRequest): Source path, target format and options.
        resolution_provider (Callable[[], str]): Returns the source resolution;
            only consulted when the request asks to match it.

    Returns:
        EngineOptions: Output path, codecs, flags, resolution and transcoder options.

    Raises:
        UnsupportedFormatError: If no codec profile exists for ``request.format``.
    """

    profile = get_profile(request.format)
    options = request.options
    return EngineOptions(
        output_path=temp_output_path(request.source_path, normalise_format(request.format)),
        video_codec=profile.video_codec,
        audio_codec=profile.audio_codec,
        custom=compose_flags(profile.custom, options),
        resolution=resolve_resolution(options, resolution_provider),
        transcoder_options=transcoder_options(),
    )
