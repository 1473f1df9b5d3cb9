from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from video_encode.datatypes import EncodeOptions
from video_encode.engine.logger_slot import get_logger


class FakeMovie:
    """Records transcode calls instead of running ffmpeg."""

    def __init__(
        self,
        path: Path,
        *,
        resolution: str = "1920x1080",
        error: Optional[Exception] = None,
        on_transcode: Optional[Callable[[], None]] = None,
    ) -> None:
        self.path = Path(path)
        self._resolution = resolution
        self.error = error
        self.on_transcode = on_transcode
        self.resolution_reads = 0
        self.calls: List[Tuple[Path, Dict[str, Any], Dict[str, Any]]] = []
        self.slot_during_transcode: Optional[logging.Logger] = None

    @property
    def resolution(self) -> str:
        self.resolution_reads += 1
        return self._resolution

    def transcode(
        self,
        output_path: Path,
        options: Mapping[str, Any],
        transcoder_options: Mapping[str, Any] | None = None,
    ) -> Path:
        self.slot_during_transcode = get_logger()
        self.calls.append((Path(output_path), dict(options), dict(transcoder_options or {})))
        if self.on_transcode is not None:
            self.on_transcode()
        if self.error is not None:
            raise self.error
        return Path(output_path)


class MovieFactory:
    def __init__(self, **movie_kwargs: Any) -> None:
        self.movie_kwargs = movie_kwargs
        self.movies: List[FakeMovie] = []

    def __call__(self, path: Path) -> FakeMovie:
        movie = FakeMovie(path, **self.movie_kwargs)
        self.movies.append(movie)
        return movie

    @property
    def last(self) -> FakeMovie:
        return self.movies[-1]


class FakeTheora:
    instances: List["FakeTheora"] = []
    error: Optional[Exception] = None

    def __init__(self, input_path: Path, output_path: Path) -> None:
        self.input_path = Path(input_path)
        self.output_path = Path(output_path)
        self.run_args: List[Tuple[Any, ...]] = []
        FakeTheora.instances.append(self)

    def run(self, *args: Any) -> Path:
        self.run_args.append(args)
        if self.error is not None:
            raise self.error
        return self.output_path


class RecordingRename:
    def __init__(self, error: Optional[Exception] = None, events: Optional[List[str]] = None) -> None:
        self.error = error
        self.events = events
        self.calls: List[Tuple[Path, Path]] = []

    def __call__(self, src: Path, dst: Path) -> None:
        self.calls.append((Path(src), Path(dst)))
        if self.events is not None:
            self.events.append("rename")
        if self.error is not None:
            raise self.error


class RecordingModel:
    """Host model with the four hook methods and a logger accessor."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.events: List[Tuple[str, str, EncodeOptions]] = []
        self._logger = logger or logging.getLogger("tests.model")

    def method1(self, fmt: str, options: EncodeOptions) -> None:
        self.events.append(("method1", fmt, options))

    def method2(self, fmt: str, options: EncodeOptions) -> None:
        self.events.append(("method2", fmt, options))

    def method3(self, fmt: str, options: EncodeOptions) -> None:
        self.events.append(("method3", fmt, options))

    def method4(self, fmt: str, options: EncodeOptions) -> None:
        self.events.append(("method4", fmt, options))

    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def names(self) -> List[str]:
        return [name for name, _fmt, _options in self.events]
