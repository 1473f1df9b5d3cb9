"""Configuration loader that parses and validates user-provided TOML."""

from __future__ import annotations

import math
import tomllib
from dataclasses import fields
from enum import Enum
from typing import Any, Dict, Optional

from .datatypes import (
    SAME_RESOLUTION,
    AppConfig,
    EncodeOptions,
    EngineConfig,
    PresetConfig,
    WatermarkConfig,
    WatermarkPosition,
)
from .errors import ConfigError
from .render.profiles import CODEC_PROFILES, normalise_format

__all__ = ["ConfigError", "load_config", "parse_config", "preset_options", "validate_resolution"]


def _coerce_enum(value: Any, dotted_key: str, enum_type: type[Enum]) -> Enum:
    """Return an enum member, coercing string values case-insensitively."""

    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower().replace("-", "_")
        for member in enum_type:
            if normalized == str(member.value).lower():
                return member
    raise ConfigError(
        f"{dotted_key} must be one of: {', '.join(str(member.value) for member in enum_type)}"
    )


def _coerce_optional_str(value: Any, dotted_key: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{dotted_key} must be a string")
    return value


def validate_resolution(value: Optional[str], dotted_key: str) -> Optional[str]:
    """Accept ``WIDTHxHEIGHT``, ``same`` or nothing."""

    if value is None:
        return None
    text = str(value).strip()
    if text.lower() == SAME_RESOLUTION:
        return SAME_RESOLUTION
    parts = text.lower().split("x")
    if len(parts) != 2 or not all(part.isdigit() and int(part) > 0 for part in parts):
        raise ConfigError(f"{dotted_key} must be WIDTHxHEIGHT (e.g. 640x360) or 'same'")
    return text


def _check_keys(raw: Dict[str, Any], name: str, allowed: set[str]) -> None:
    unknown = sorted(set(raw) - allowed)
    if unknown:
        raise ConfigError(f"Invalid keys in [{name}]: {', '.join(unknown)}")


def _sanitize_watermark(raw: Any, name: str) -> WatermarkConfig:
    if not isinstance(raw, dict):
        raise ConfigError(f"[{name}] must be a table")
    _check_keys(raw, name, {"path", "position", "pixels_from_edge"})
    path = raw.get("path")
    if not isinstance(path, str) or not path.strip():
        raise ConfigError(f"{name}.path must be a non-empty string")
    position_raw = raw.get("position")
    position = (
        None
        if position_raw is None
        else _coerce_enum(position_raw, f"{name}.position", WatermarkPosition)
    )
    edge = raw.get("pixels_from_edge")
    if edge is not None:
        if isinstance(edge, bool) or not isinstance(edge, int):
            raise ConfigError(f"{name}.pixels_from_edge must be an integer")
        if edge < 0:
            raise ConfigError(f"{name}.pixels_from_edge must be >= 0")
    return WatermarkConfig(path=path, position=position, pixels_from_edge=edge)  # type: ignore[arg-type]


def _sanitize_engine(raw: Any) -> EngineConfig:
    if not isinstance(raw, dict):
        raise ConfigError("[engine] must be a table")
    _check_keys(raw, "engine", {field.name for field in fields(EngineConfig)})
    engine = EngineConfig(**raw)
    for key in ("ffmpeg_binary", "ffprobe_binary"):
        value = getattr(engine, key)
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"engine.{key} must be a non-empty string")
    timeout = engine.timeout_seconds
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise ConfigError("engine.timeout_seconds must be a number")
    if not math.isfinite(float(timeout)):
        raise ConfigError("engine.timeout_seconds must be a finite number")
    if timeout < 0:
        raise ConfigError("engine.timeout_seconds must be >= 0")
    engine.timeout_seconds = float(timeout)
    return engine


def _sanitize_preset(raw: Any, name: str) -> PresetConfig:
    if not isinstance(raw, dict):
        raise ConfigError(f"[{name}] must be a table")
    _check_keys(raw, name, {"format", "resolution", "custom", "watermark"})
    fmt = raw.get("format", PresetConfig.format)
    if not isinstance(fmt, str) or normalise_format(fmt) not in CODEC_PROFILES:
        raise ConfigError(f"{name}.format must be one of: {', '.join(sorted(CODEC_PROFILES))}")
    watermark_raw = raw.get("watermark")
    return PresetConfig(
        format=normalise_format(fmt),
        resolution=validate_resolution(
            _coerce_optional_str(raw.get("resolution"), f"{name}.resolution"), f"{name}.resolution"
        ),
        custom=_coerce_optional_str(raw.get("custom"), f"{name}.custom"),
        watermark=None if watermark_raw is None else _sanitize_watermark(watermark_raw, f"{name}.watermark"),
    )


def parse_config(raw: Dict[str, Any]) -> AppConfig:
    """Validate an already-decoded TOML document."""

    _check_keys(raw, "root", {"engine", "presets"})
    presets_raw = raw.get("presets", {})
    if not isinstance(presets_raw, dict):
        raise ConfigError("[presets] must be a table")
    return AppConfig(
        engine=_sanitize_engine(raw.get("engine", {})),
        presets={
            name: _sanitize_preset(section, f"presets.{name}")
            for name, section in presets_raw.items()
        },
    )


def load_config(path: str) -> AppConfig:
    """
    Load and validate an encode configuration from a TOML file.

    Raises:
        ConfigError: If the file is not UTF-8, TOML parsing fails, or any
            validation rule is violated.
    """

    with open(path, "rb") as handle:
        raw_bytes = handle.read()
    if raw_bytes.startswith(b"\xef\xbb\xbf"):
        raw_bytes = raw_bytes[3:]
    try:
        raw = tomllib.loads(raw_bytes.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise ConfigError("Configuration file must be UTF-8 encoded") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse TOML: {exc}") from exc
    return parse_config(raw)


def preset_options(preset: PresetConfig) -> EncodeOptions:
    return EncodeOptions(
        resolution=preset.resolution,
        custom=preset.custom,
        watermark=preset.watermark,
    )
