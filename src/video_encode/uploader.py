"""Declarative encode steps for upload-handling host classes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple

from video_encode.datatypes import EncodeCallbacks, EncodeOptions, EngineConfig, LoggerAccessor
from video_encode.errors import ConfigError
from video_encode.orchestration.lifecycle import VideoEncoder

__all__ = ["ModelBindings", "ProcessingStep", "VideoUploader"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelBindings:
    """Model method names resolved against the host's ``model`` when a step runs."""

    callbacks: Mapping[str, str] = field(default_factory=dict)
    logger: Optional[str] = None

    def resolve_logger(self, model: Any) -> Optional[LoggerAccessor]:
        if self.logger is None:
            return None
        target = getattr(model, self.logger, None)
        if isinstance(target, logging.Logger):
            return lambda: target
        if not callable(target):
            raise ConfigError(f"logger: model has no logger accessor named {self.logger!r}")
        return target

    def apply(self, model: Any, options: EncodeOptions) -> EncodeOptions:
        changes: Dict[str, Any] = {}
        if self.callbacks:
            changes["callbacks"] = EncodeCallbacks.from_model(model, self.callbacks)
        accessor = self.resolve_logger(model)
        if accessor is not None:
            changes["logger"] = accessor
        return replace(options, **changes) if changes else options


@dataclass(frozen=True)
class ProcessingStep:
    name: str
    args: Tuple[Any, ...]
    bindings: ModelBindings = field(default_factory=ModelBindings)


class VideoUploader:
    """
    Mixin adding video encode steps to a host class.

    The host provides ``current_path`` (the locally cached file) and ``model``
    (the record owning hook methods and the logger accessor). Steps are
    registered at class level and executed in order by :meth:`run_processors`.
    """

    processors: ClassVar[List[ProcessingStep]] = []
    engine_config: ClassVar[Optional[EngineConfig]] = None

    current_path: Any = None
    model: Any = None

    @classmethod
    def process(cls, bindings: ModelBindings | None = None, **steps: Any) -> None:
        """Append one processing step per keyword (``name=[args...]``)."""

        if "processors" not in cls.__dict__:
            cls.processors = list(cls.processors)
        for name, args in steps.items():
            cls.processors.append(ProcessingStep(name, tuple(args), bindings or ModelBindings()))

    @classmethod
    def encode_video(
        cls,
        fmt: str,
        options: EncodeOptions | None = None,
        *,
        callbacks: Mapping[str, str] | None = None,
        logger: str | None = None,
    ) -> None:
        """
        Schedule a primary encode into *fmt*.

        ``callbacks`` maps lifecycle slots to model method names and ``logger``
        names the model's logger accessor; both are bound when the step runs.
        """
        bindings = None
        if callbacks or logger:
            bindings = ModelBindings(callbacks=dict(callbacks or {}), logger=logger)
        cls.process(bindings, encode_video=[fmt, options if options is not None else EncodeOptions()])

    @classmethod
    def encode_ogv(cls, options: EncodeOptions | None = None, *, logger: str | None = None) -> None:
        bindings = ModelBindings(logger=logger) if logger else None
        cls.process(bindings, encode_ogv=[options if options is not None else EncodeOptions()])

    def encoder(self) -> VideoEncoder:
        return VideoEncoder(lambda: self.current_path, config=self.engine_config)

    def transcode_video(self, fmt: str, options: EncodeOptions | None = None) -> Path:
        return self.encoder().encode(fmt, options)

    def transcode_ogv(self, options: EncodeOptions | None = None) -> Path:
        return self.encoder().encode_alternate(options)

    def run_processors(self) -> List[Path]:
        """Execute every registered step in order, returning each final path."""

        handlers = {
            "encode_video": self.transcode_video,
            "encode_ogv": self.transcode_ogv,
        }
        results: List[Path] = []
        for step in type(self).processors:
            handler = handlers.get(step.name)
            if handler is None:
                raise ConfigError(f"Unknown processing step {step.name!r}")
            *leading, options = step.args
            bound = step.bindings.apply(self.model, options)
            logger.debug("Running processing step %s%r", step.name, tuple(leading))
            results.append(handler(*leading, bound))
        return results
