"""Click CLI wiring and entry point for video_encode."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from video_encode.config_loader import load_config, preset_options, validate_resolution
from video_encode.datatypes import (
    AppConfig,
    EncodeOptions,
    WatermarkConfig,
    WatermarkPosition,
)
from video_encode.engine.theora import OGV_EXTENSION
from video_encode.errors import ConfigError, EngineError, ProcessingError, UnsupportedFormatError
from video_encode.orchestration.lifecycle import VideoEncoder
from video_encode.render.profiles import get_profile, normalise_format, supported_formats

logger = logging.getLogger("video_encode")

_POSITION_CHOICES = [position.value for position in WatermarkPosition]


def _configure_logging(console: Console, verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    handler = RichHandler(console=console, show_path=False, markup=False)
    logger.handlers[:] = [handler]
    logger.setLevel(level)
    logger.propagate = False


def _build_options(
    base: EncodeOptions,
    *,
    resolution: Optional[str],
    custom: Optional[str],
    watermark_path: Optional[str],
    watermark_position: Optional[str],
    watermark_edge: Optional[int],
) -> EncodeOptions:
    try:
        resolved = validate_resolution(resolution, "--resolution") if resolution else base.resolution
    except ConfigError as exc:
        raise click.BadParameter(str(exc), param_hint="--resolution") from exc
    watermark = base.watermark
    if watermark_path:
        watermark = WatermarkConfig(
            path=watermark_path,
            position=WatermarkPosition(watermark_position) if watermark_position else None,
            pixels_from_edge=watermark_edge,
        )
    elif watermark_position or watermark_edge is not None:
        raise click.UsageError("--watermark-position/--watermark-edge require --watermark.")
    return EncodeOptions(
        resolution=resolved,
        custom=custom if custom is not None else base.custom,
        watermark=watermark,
        logger=lambda: logger,
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "fmt", default=None, help=f"Target format ({', '.join(supported_formats())}).")
@click.option("--output", "output_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Destination file. Defaults to SOURCE with the target extension.")
@click.option("--resolution", default=None, help="WIDTHxHEIGHT, or 'same' to match the source.")
@click.option("--custom", default=None, help="Replace the format's default ffmpeg flags.")
@click.option("--watermark", "watermark_path", default=None, help="Image to overlay on every frame.")
@click.option("--watermark-position", type=click.Choice(_POSITION_CHOICES), default=None,
              help="Corner the watermark is anchored to.")
@click.option("--watermark-edge", type=int, default=None, help="Watermark distance from the edges in pixels.")
@click.option("--ogv", "use_ogv", is_flag=True, help="Produce an Ogg/Theora file with the dedicated transcoder.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), default=None,
              help="TOML file with [engine] settings and [presets.*] tables.")
@click.option("--preset", default=None, help="Preset name from --config.")
@click.option("--verbose", is_flag=True, help="Show debug output, including ffmpeg commands.")
def main(
    source: Path,
    fmt: Optional[str],
    output_path: Optional[Path],
    resolution: Optional[str],
    custom: Optional[str],
    watermark_path: Optional[str],
    watermark_position: Optional[str],
    watermark_edge: Optional[int],
    use_ogv: bool,
    config_path: Optional[str],
    preset: Optional[str],
    verbose: bool,
) -> None:
    """Transcode SOURCE into another video format."""

    console = Console(stderr=True)
    _configure_logging(console, verbose)

    app = AppConfig()
    base = EncodeOptions()
    if config_path:
        try:
            app = load_config(config_path)
        except ConfigError as exc:
            raise click.ClickException(f"Config error: {exc}") from exc
    if preset:
        if preset not in app.presets:
            raise click.ClickException(f"Unknown preset {preset!r}")
        preset_cfg = app.presets[preset]
        base = preset_options(preset_cfg)
        fmt = fmt or preset_cfg.format

    if use_ogv:
        target_ext = OGV_EXTENSION
    else:
        target_ext = normalise_format(fmt or "webm")
        try:
            get_profile(target_ext)
        except UnsupportedFormatError as exc:
            raise click.BadParameter(str(exc), param_hint="--format") from exc

    options = _build_options(
        base,
        resolution=resolution,
        custom=custom,
        watermark_path=watermark_path,
        watermark_position=watermark_position,
        watermark_edge=watermark_edge,
    )

    destination = output_path or source.with_suffix(f".{target_ext}")
    if destination.resolve() == source.resolve():
        raise click.UsageError(
            f"{source.name} would be overwritten in place; pass --output to choose another destination."
        )
    shutil.copyfile(source, destination)
    encoder = VideoEncoder(destination, config=app.engine)
    try:
        if use_ogv:
            final = encoder.encode_alternate(options)
        else:
            final = encoder.encode(target_ext, options)
    except (ProcessingError, EngineError, OSError) as exc:
        destination.unlink(missing_ok=True)
        raise click.ClickException(str(exc)) from exc
    console.print(f"[green]Wrote[/green] {final}")


if __name__ == "__main__":  # pragma: no cover
    main()
