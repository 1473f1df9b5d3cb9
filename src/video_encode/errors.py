"""Error types raised by the encode pipeline."""

from __future__ import annotations

__all__ = [
    "ConfigError",
    "EngineError",
    "ProcessingError",
    "UnsupportedFormatError",
]


class ConfigError(ValueError):
    """Raised when the configuration file is malformed or fails validation."""


class UnsupportedFormatError(ValueError):
    """Raised when no codec profile exists for the requested target format."""

    def __init__(self, fmt: str) -> None:
        super().__init__(f"Unsupported target format: {fmt!r}")
        self.format = fmt


class EngineError(RuntimeError):
    """Raised when the ffmpeg/ffprobe engine cannot complete a call."""

    def __init__(self, message: str, *, command: list[str] | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.command = list(command) if command else []
        self.stderr = stderr


class ProcessingError(RuntimeError):
    """
    Uniform failure surfaced by :meth:`VideoEncoder.encode`.

    The lower-level error (engine, filesystem, or hook) is kept on
    ``original`` and chained as ``__cause__``.
    """

    def __init__(self, message: str, *, original: BaseException | None = None) -> None:
        super().__init__(message)
        self.original = original
