from __future__ import annotations

import pytest

from video_encode.datatypes import WatermarkConfig, WatermarkPosition
from video_encode.render import watermark


def test_bottom_left_watermark_uses_edge_offsets() -> None:
    cfg = WatermarkConfig(path="logo.png", position=WatermarkPosition.BOTTOM_LEFT, pixels_from_edge=5)
    assert (
        watermark.build_watermark_filter(cfg)
        == "movie=logo.png [logo]; [in][logo] overlay=5:frame_h-overlay_h-5 [out]"
    )


def test_watermark_without_position_has_empty_coordinates() -> None:
    cfg = WatermarkConfig(path="logo.png")
    assert watermark.build_watermark_filter(cfg) == "movie=logo.png [logo]; [in][logo] overlay= [out]"


def test_pixels_from_edge_defaults_to_five_when_position_given() -> None:
    assert watermark.overlay_coordinates(WatermarkPosition.TOP_LEFT) == "5:5"


def test_pixels_from_edge_is_ignored_without_position() -> None:
    assert watermark.overlay_coordinates(None, 12) == ""


@pytest.mark.parametrize(
    ("position", "expected"),
    [
        (WatermarkPosition.TOP_LEFT, "10:10"),
        (WatermarkPosition.TOP_RIGHT, "frame_w-overlay_w-10:10"),
        (WatermarkPosition.BOTTOM_LEFT, "10:frame_h-overlay_h-10"),
        (WatermarkPosition.BOTTOM_RIGHT, "frame_w-overlay_w-10:frame_h-overlay_h-10"),
    ],
)
def test_overlay_coordinates_per_corner(position: WatermarkPosition, expected: str) -> None:
    assert watermark.overlay_coordinates(position, 10) == expected


def test_overlay_coordinates_accept_position_strings() -> None:
    assert watermark.overlay_coordinates("top_right", 0) == "frame_w-overlay_w-0:0"


def test_watermark_clause_wraps_filter_in_vf_flag() -> None:
    cfg = WatermarkConfig(path="path/to/file.png")
    assert (
        watermark.watermark_clause(cfg)
        == '-vf "movie=path/to/file.png [logo]; [in][logo] overlay= [out]"'
    )
