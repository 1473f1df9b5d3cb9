"""
Encode lifecycle: hooks, engine call, temp-file handoff and error translation.

One :meth:`VideoEncoder.encode` call moves through

    idle -> logger swapped -> transcoding -> succeeded | failed
         -> always hook -> logger restored -> done

``before_transcode`` runs ahead of the attempt. Exactly one of
``after_transcode``/``on_error`` follows it, then ``always`` runs once before
the logger is restored and any failure is surfaced as ``ProcessingError``.
"""

from __future__ import annotations

import logging
import os
import traceback
from contextlib import ExitStack
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional

from video_encode.datatypes import (
    EncodeFailure,
    EncodeOptions,
    EncodeOutcome,
    EncodeRequest,
    EncodeSuccess,
    EngineConfig,
    Hook,
)
from video_encode.engine.logger_slot import activate_logger
from video_encode.engine.movie import FFmpegMovie
from video_encode.engine.theora import OGV_EXTENSION, FfmpegTheora
from video_encode.errors import ProcessingError
from video_encode.options import build_engine_options, temp_output_path

__all__ = ["PROCESSING_ERROR_MESSAGE", "VideoEncoder", "log_failure"]

logger = logging.getLogger(__name__)

PROCESSING_ERROR_MESSAGE = (
    "Failed to transcode with FFmpeg. Check ffmpeg install and verify video is not "
    "corrupt or cut short. Original error: {error}"
)

PathSource = Callable[[], "str | Path"]
Rename = Callable[[Path, Path], None]


def _fire(hook: Optional[Hook], fmt: str, options: EncodeOptions) -> None:
    if hook is None:
        return
    hook(fmt, options)


def log_failure(log: logging.Logger, error: BaseException) -> None:
    """Log ``Class: message`` followed by each traceback line, all at ERROR."""

    log.error("%s: %s", type(error).__name__, error)
    for entry in traceback.format_tb(error.__traceback__):
        for line in entry.rstrip().splitlines():
            log.error(line)


class VideoEncoder:
    """
    Runs encodes for the file at ``current_path``.

    Parameters:
        current_path: The source file path, or a zero-argument callable
            returning it (evaluated on every call).
        config (EngineConfig | None): ffmpeg binaries and timeout for the
            default engine adapters.
        movie_factory: Builds the source media collaborator from a path.
        theora_factory: Builds the ``.ogv`` transcoder from (input, output).
        rename: Atomically moves the temp output onto the source path.
    """

    def __init__(
        self,
        current_path: PathSource | str | Path,
        *,
        config: EngineConfig | None = None,
        movie_factory: Callable[[Path], Any] | None = None,
        theora_factory: Callable[[Path, Path], Any] | None = None,
        rename: Rename = os.replace,
    ) -> None:
        self._current_path = current_path
        self.config = config or EngineConfig()
        self.movie_factory = movie_factory or partial(FFmpegMovie, config=self.config)
        self.theora_factory = theora_factory or partial(FfmpegTheora, config=self.config)
        self.rename = rename

    def current_path(self) -> Path:
        value = self._current_path
        if callable(value):
            value = value()
        return Path(value)

    def encode(self, fmt: str, options: EncodeOptions | None = None) -> Path:
        """
        Transcode the current file into *fmt* and replace it with the result.

        Returns:
            Path: The final output path (the original source path).

        Raises:
            ProcessingError: If the engine, the rename, the logger accessor or a
                lifecycle hook fails. The original error is chained.
        """
        options = options if options is not None else EncodeOptions()
        request = EncodeRequest(source_path=self.current_path(), format=fmt, options=options)
        active_logger: Optional[logging.Logger] = None
        outcome: EncodeOutcome = EncodeFailure(RuntimeError("encode did not run"))

        with ExitStack() as cleanup:
            try:
                if options.logger is not None:
                    active_logger = options.logger()
                    cleanup.enter_context(activate_logger(active_logger))
                outcome = self._run_lifecycle(request)
            except Exception as exc:
                outcome = EncodeFailure(exc)
            finally:
                outcome = self._run_always(request, outcome)

        if isinstance(outcome, EncodeFailure):
            error = outcome.error
            if active_logger is not None:
                log_failure(active_logger, error)
            raise ProcessingError(PROCESSING_ERROR_MESSAGE.format(error=error), original=error) from error
        return outcome.path

    def _run_lifecycle(self, request: EncodeRequest) -> EncodeOutcome:
        callbacks = request.options.callbacks
        _fire(callbacks.before_transcode, request.format, request.options)
        outcome = self._attempt(request)
        if isinstance(outcome, EncodeSuccess):
            _fire(callbacks.after_transcode, request.format, request.options)
        else:
            self._run_on_error(request, outcome)
        return outcome

    def _run_on_error(self, request: EncodeRequest, outcome: EncodeFailure) -> None:
        try:
            _fire(request.options.callbacks.on_error, request.format, request.options)
        except Exception as exc:
            logger.warning("on_error hook failed after %s: %s", type(outcome.error).__name__, exc)

    def _run_always(self, request: EncodeRequest, outcome: EncodeOutcome) -> EncodeOutcome:
        try:
            _fire(request.options.callbacks.always, request.format, request.options)
        except Exception as exc:
            if isinstance(outcome, EncodeSuccess):
                return EncodeFailure(exc)
            logger.warning("always hook failed after %s: %s", type(outcome.error).__name__, exc)
        return outcome

    def _attempt(self, request: EncodeRequest) -> EncodeOutcome:
        """Run the engine and the temp-file handoff, reporting instead of raising."""

        try:
            movie = self.movie_factory(request.source_path)
            engine_options = build_engine_options(request, lambda: movie.resolution)
            logger.debug(
                "Encoding %s as %s (resolution=%s, flags=%r)",
                request.source_path,
                request.format,
                engine_options.resolution,
                engine_options.custom,
            )
            movie.transcode(
                engine_options.output_path,
                engine_options.as_transcode_options(),
                engine_options.transcoder_options,
            )
            self.rename(engine_options.output_path, request.source_path)
        except Exception as exc:
            logger.debug("Encode of %s failed: %s", request.source_path, exc)
            return EncodeFailure(exc)
        return EncodeSuccess(request.source_path)

    def encode_alternate(self, options: EncodeOptions | None = None) -> Path:
        """
        Transcode the current file into an Ogg/Theora container.

        Hooks are not run and failures from the transcoder or the rename
        propagate unchanged.
        """
        options = options if options is not None else EncodeOptions()
        source_path = self.current_path()
        output_path = temp_output_path(source_path, OGV_EXTENSION)
        transcoder = self.theora_factory(source_path, output_path)
        if options.logger is not None:
            transcoder.run(options.logger())
        else:
            transcoder.run()
        self.rename(output_path, source_path)
        return source_path
