"""
Tests for ripple geometry, parallax and the last-update stamp
"""

from datetime import datetime

from dashboard.interactions import (
    OVERLAY_HOVER_BACKGROUND,
    OVERLAY_REST_BACKGROUND,
    Rect,
    format_last_update,
    hover_overlay_background,
    parallax_offset,
    parallax_transform,
    ripple_geometry,
)
from dashboard.surveys import get_survey, list_surveys, total_surveyed_area


def test_ripple_centred_on_click():
    ripple = ripple_geometry(Rect(left=100, top=50, width=120, height=40), 160, 70)

    assert ripple.size == 120
    assert ripple.x == 160 - 100 - 60
    assert ripple.y == 70 - 50 - 60


def test_ripple_style():
    style = ripple_geometry(Rect(0, 0, 80, 100), 40, 50).style()

    assert style["width"] == style["height"] == "100px"
    assert style["left"] == "-10px"
    assert style["top"] == "0px"
    assert style["border-radius"] == "50%"


def test_parallax():
    assert parallax_offset(200) == -100
    assert parallax_transform(200) == "translateY(-100px)"
    assert parallax_transform(101) == "translateY(-50.5px)"
    assert parallax_transform(0) == "translateY(0px)"


def test_hover_overlay_background():
    assert hover_overlay_background(True) == OVERLAY_HOVER_BACKGROUND
    assert hover_overlay_background(False) == OVERLAY_REST_BACKGROUND


def test_format_last_update():
    assert format_last_update(datetime(2025, 9, 8, 7, 5)) == "08/09/2025 07:05"


def test_surveys():
    surveys = list_surveys()

    assert [s.id for s in surveys] == [1, 2, 3]
    assert total_surveyed_area() == 745
    assert get_survey(2).coverage == "Parcial"
    assert get_survey(4) is None
    assert surveys[0].to_dict()["resolution_cm"] == 5
