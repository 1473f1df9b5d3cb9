"""ffmpeg-backed source media collaborator."""
from __future__ import annotations

import json
import shlex
import subprocess
from collections.abc import Mapping
from pathlib import Path
from shutil import which
from typing import Any, List, Optional, Tuple

from video_encode.datatypes import EngineConfig
from video_encode.engine import subproc as _subproc
from video_encode.engine.logger_slot import get_logger
from video_encode.errors import EngineError

__all__ = ["FFmpegMovie", "build_transcode_command", "parse_resolution", "scale_preserving_aspect"]


def parse_resolution(value: str) -> Tuple[int, int]:
    """Split a ``WIDTHxHEIGHT`` string into integers."""

    try:
        width_text, height_text = str(value).lower().split("x", 1)
        width, height = int(width_text), int(height_text)
    except ValueError as exc:
        raise EngineError(f"Invalid resolution {value!r}; expected WIDTHxHEIGHT") from exc
    if width <= 0 or height <= 0:
        raise EngineError(f"Invalid resolution {value!r}; dimensions must be positive")
    return width, height


def _round_even(value: float) -> int:
    return max(2, int(round(value / 2.0)) * 2)


def scale_preserving_aspect(
    resolution: str,
    source_size: Tuple[int, int],
    preserve: Optional[str],
) -> str:
    """
    Recompute one axis of *resolution* so the source aspect ratio is kept.

    ``preserve="width"`` keeps the requested width and derives the height;
    ``"height"`` does the opposite. Any other value returns *resolution* as is.
    """

    if preserve not in ("width", "height"):
        return resolution
    width, height = parse_resolution(resolution)
    src_w, src_h = source_size
    if src_w <= 0 or src_h <= 0:
        return resolution
    aspect = src_w / src_h
    if preserve == "width":
        height = _round_even(width / aspect)
    else:
        width = _round_even(height * aspect)
    return f"{width}x{height}"


def build_transcode_command(
    binary: str,
    input_path: str,
    output_path: str,
    options: Mapping[str, Any],
) -> List[str]:
    cmd: List[str] = [binary, "-y", "-i", input_path]
    video_codec = options.get("video_codec")
    if video_codec:
        cmd += ["-vcodec", str(video_codec)]
    audio_codec = options.get("audio_codec")
    if audio_codec:
        cmd += ["-acodec", str(audio_codec)]
    resolution = options.get("resolution")
    if resolution:
        cmd += ["-s", str(resolution)]
    custom = options.get("custom")
    if custom:
        cmd += shlex.split(str(custom))
    cmd.append(output_path)
    return cmd


class FFmpegMovie:
    """
    A source video file driven through ffmpeg.

    ``resolution`` probes the file with ffprobe on first access and caches the
    answer; ``transcode`` writes the converted file to ``output_path``.
    """

    def __init__(self, path: str | Path, config: EngineConfig | None = None) -> None:
        self.path = Path(path)
        self.config = config or EngineConfig()
        self._size: Optional[Tuple[int, int]] = None

    def _timeout(self) -> Optional[float]:
        value = self.config.timeout_seconds
        return float(value) if value and value > 0 else None

    def _require_binary(self, binary: str) -> None:
        if which(binary) is None:
            raise EngineError(f"{binary} executable not found in PATH")

    def _probe_size(self) -> Tuple[int, int]:
        binary = self.config.ffprobe_binary
        self._require_binary(binary)
        cmd = [
            binary,
            "-v",
            "error",
            "-select_streams",
            "v:0",
            "-show_entries",
            "stream=width,height",
            "-of",
            "json",
            str(self.path),
        ]
        try:
            result = _subproc.run_checked(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                check=True,
                timeout=self._timeout(),
            )
        except subprocess.CalledProcessError as exc:
            stderr = exc.stderr.strip() if isinstance(exc.stderr, str) else ""
            raise EngineError(f"ffprobe failed for {self.path.name}", command=cmd, stderr=stderr) from exc
        except subprocess.TimeoutExpired as exc:
            raise EngineError(f"ffprobe timed out for {self.path.name}", command=cmd) from exc

        try:
            payload = json.loads(result.stdout or "{}")
        except json.JSONDecodeError as exc:
            raise EngineError(f"Unable to parse ffprobe output for {self.path.name}") from exc
        streams = payload.get("streams") or []
        if not streams:
            raise EngineError(f"No video stream found in {self.path.name}")
        stream = streams[0]
        try:
            return int(stream["width"]), int(stream["height"])
        except (KeyError, TypeError, ValueError) as exc:
            raise EngineError(f"ffprobe reported no dimensions for {self.path.name}") from exc

    @property
    def size(self) -> Tuple[int, int]:
        if self._size is None:
            self._size = self._probe_size()
        return self._size

    @property
    def resolution(self) -> str:
        width, height = self.size
        return f"{width}x{height}"

    def transcode(
        self,
        output_path: str | Path,
        options: Mapping[str, Any],
        transcoder_options: Mapping[str, Any] | None = None,
    ) -> Path:
        """
        Run ffmpeg to produce *output_path*.

        Raises:
            EngineError: If ffmpeg is missing, times out, exits non-zero, or
                leaves no output file behind.
        """
        log = get_logger()
        effective = dict(options)
        preserve = (transcoder_options or {}).get("preserve_aspect_ratio")
        if effective.get("resolution") and preserve:
            effective["resolution"] = scale_preserving_aspect(
                str(effective["resolution"]), self.size, str(preserve)
            )

        binary = self.config.ffmpeg_binary
        self._require_binary(binary)
        output = Path(output_path)
        cmd = build_transcode_command(binary, str(self.path), str(output), effective)
        log.info("Running transcoding...\n%s", " ".join(shlex.quote(arg) for arg in cmd))
        try:
            process = _subproc.run_checked(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                timeout=self._timeout(),
            )
        except subprocess.TimeoutExpired as exc:
            raise EngineError(
                f"ffmpeg timed out after {self._timeout() or 0.0:.1f}s transcoding {self.path.name}",
                command=cmd,
            ) from exc
        stderr = (process.stderr or "").strip()
        if process.returncode != 0:
            log.error("Failed encoding...\n%s\n\n%s", " ".join(cmd), stderr)
            raise EngineError(
                f"ffmpeg failed ({process.returncode}) for {self.path.name}: {stderr or 'unknown error'}",
                command=cmd,
                stderr=stderr,
            )
        if not output.exists():
            raise EngineError(f"ffmpeg produced no output at {output}", command=cmd, stderr=stderr)
        log.info("Transcoding of %s to %s succeeded", self.path, output)
        return output
