"""Ogg/Theora transcoder used for the ``.ogv`` alternate container."""
from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from shutil import which
from typing import List, Optional

from video_encode.datatypes import EngineConfig
from video_encode.engine import subproc as _subproc
from video_encode.errors import EngineError

__all__ = ["FfmpegTheora", "OGV_EXTENSION"]

OGV_EXTENSION = "ogv"


class FfmpegTheora:
    """Convert *input_path* into an Ogg/Theora file at *output_path*."""

    def __init__(self, input_path: str | Path, output_path: str | Path, config: EngineConfig | None = None) -> None:
        self.input_path = Path(input_path)
        self.output_path = Path(output_path)
        self.config = config or EngineConfig()

    def command(self) -> List[str]:
        return [
            self.config.ffmpeg_binary,
            "-y",
            "-i",
            str(self.input_path),
            "-acodec",
            "libvorbis",
            "-ab",
            "160000",
            "-vcodec",
            "libtheora",
            "-qscale",
            "7",
            "-f",
            "ogg",
            str(self.output_path),
        ]

    def run(self, logger: Optional[logging.Logger] = None) -> Path:
        cmd = self.command()
        if which(cmd[0]) is None:
            raise EngineError(f"{cmd[0]} executable not found in PATH")
        if logger is not None:
            logger.info("Running....%s", " ".join(shlex.quote(arg) for arg in cmd))
        timeout = self.config.timeout_seconds if self.config.timeout_seconds > 0 else None
        try:
            process = _subproc.run_checked(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise EngineError(f"ogv transcode timed out for {self.input_path.name}", command=cmd) from exc
        output = (process.stdout or "").strip()
        if process.returncode != 0:
            if logger is not None:
                logger.error("Failure!")
                logger.error(output)
            raise EngineError(
                f"ogv transcode failed ({process.returncode}) for {self.input_path.name}",
                command=cmd,
                stderr=output,
            )
        if logger is not None:
            logger.info("Success!")
        return self.output_path
