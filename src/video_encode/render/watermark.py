from __future__ import annotations

from typing import Optional

from video_encode.datatypes import DEFAULT_PIXELS_FROM_EDGE, WatermarkConfig, WatermarkPosition

__all__ = [
    "build_watermark_filter",
    "overlay_coordinates",
    "watermark_clause",
]

_FAR_X = "frame_w-overlay_w-{edge}"
_FAR_Y = "frame_h-overlay_h-{edge}"


def overlay_coordinates(position: Optional[WatermarkPosition | str], pixels_from_edge: Optional[int] = None) -> str:
    """
    Return the ``X:Y`` overlay expression for a watermark anchored at *position*.

    An empty string is returned when *position* is ``None``; the overlay
    clause is then emitted without coordinates.
    """

    if position is None:
        return ""
    anchor = WatermarkPosition(position)
    edge = DEFAULT_PIXELS_FROM_EDGE if pixels_from_edge is None else int(pixels_from_edge)
    near = str(edge)
    far_x = _FAR_X.format(edge=edge)
    far_y = _FAR_Y.format(edge=edge)
    if anchor is WatermarkPosition.TOP_LEFT:
        return f"{near}:{near}"
    if anchor is WatermarkPosition.TOP_RIGHT:
        return f"{far_x}:{near}"
    if anchor is WatermarkPosition.BOTTOM_LEFT:
        return f"{near}:{far_y}"
    return f"{far_x}:{far_y}"


def build_watermark_filter(watermark: WatermarkConfig) -> str:
    """Compose the filter graph that overlays the watermark image."""

    coordinates = overlay_coordinates(watermark.position, watermark.pixels_from_edge)
    return f"movie={watermark.path} [logo]; [in][logo] overlay={coordinates} [out]"


def watermark_clause(watermark: WatermarkConfig) -> str:
    """Return the ``-vf`` flag carrying the watermark filter graph."""

    return f'-vf "{build_watermark_filter(watermark)}"'
