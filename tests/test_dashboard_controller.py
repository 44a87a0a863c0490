"""
Tests for the dashboard page lifecycle and user interactions
"""

import asyncio
import itertools
from dataclasses import replace
from datetime import datetime, timedelta

import pytest
import pytest_asyncio

from controllers.dashboard_controller import DashboardController
from dashboard.interactions import OVERLAY_HOVER_BACKGROUND, OVERLAY_REST_BACKGROUND, Rect
from lifecycle.task_registry import TaskRegistry
from models.config import JitterSettings
from models.enums import ChartID, MapLayer, NDVIRegion
from models.events import EventType
from utils.number_format import parse_display_value

FIXED_NOW = datetime(2025, 9, 28, 14, 30)


@pytest_asyncio.fixture
async def quiet_controller(services, rng):
    """Controller whose live refresh never fires during a test."""
    settings = services.config_manager.settings
    services.config_manager.settings = replace(
        settings, jitter=JitterSettings(period_ms=60000, metrics=settings.jitter.metrics)
    )
    controller = DashboardController(services, rng=rng, clock=lambda: FIXED_NOW)
    yield controller
    await controller.shutdown()


def texts_of(recorder, element_id):
    return [e.new for e in recorder.of_type(EventType.DISPLAY_TEXT_CHANGED) if e.element_id == element_id]


@pytest.mark.asyncio
async def test_start_renders_page(quiet_controller, recorder_factory):
    recorder = recorder_factory(EventType.CHART_UPDATED, EventType.DISPLAY_TEXT_CHANGED)

    await quiet_controller.start()

    assert quiet_controller.view.get("lastUpdate").text == "28/09/2025 14:30"
    assert {e.chart_id for e in recorder.of_type(EventType.CHART_UPDATED)} == set(ChartID)
    assert quiet_controller.started


@pytest.mark.asyncio
async def test_start_counts_up_kpis(quiet_controller, recorder_factory):
    recorder = recorder_factory(EventType.DISPLAY_TEXT_CHANGED)

    await quiet_controller.start()
    await asyncio.sleep(0.1)

    view = quiet_controller.view
    assert view.get("avgTemp").text == "24.5"
    assert view.get("avgNDVI").text == "0.78"
    assert view.get("totalPrecipitation").text == "1165"
    assert view.get("surveyedArea").text == "745"

    ndvi = texts_of(recorder, "avgNDVI")
    assert len(ndvi) == 5
    assert all(len(t.split(".")[1]) == 2 for t in ndvi)


@pytest.mark.asyncio
async def test_start_twice_rejected(quiet_controller):
    await quiet_controller.start()
    with pytest.raises(RuntimeError):
        await quiet_controller.start()


@pytest.mark.asyncio
async def test_counter_waits_for_visibility(quiet_controller, services, recorder_factory):
    recorder = recorder_factory(EventType.DISPLAY_TEXT_CHANGED)
    await quiet_controller.start()

    assert await services.visibility.report("statArea", 0.3) == 0
    await asyncio.sleep(0.05)
    assert texts_of(recorder, "statArea") == []

    assert await services.visibility.report("statArea", 0.6) == 1
    await asyncio.sleep(0.1)

    values = [parse_display_value(t).value for t in texts_of(recorder, "statArea")]
    assert values == [76, 152, 228, 304, 380]
    assert quiet_controller.view.get("statArea").text == "380"

    # one-shot: a second report does not replay the count
    assert await services.visibility.report("statArea", 1.0) == 0


@pytest.mark.asyncio
async def test_decorated_counter_keeps_format(quiet_controller, services):
    await quiet_controller.start()

    await services.visibility.report("statImages", 1.0)
    await services.visibility.report("statResolution", 1.0)
    await asyncio.sleep(0.1)

    assert quiet_controller.view.get("statImages").text == "2,500+"
    assert quiet_controller.view.get("statResolution").text == "5cm"


@pytest.mark.asyncio
async def test_reveal_on_scroll(quiet_controller, services):
    await quiet_controller.start()
    card = quiet_controller.view.get("serviceDrone")
    assert card.style["opacity"] == "0"
    assert card.style["transform"] == "translateY(30px)"

    await services.visibility.report("serviceDrone", 0.15)

    assert card.style["opacity"] == "1"
    assert card.style["transform"] == "translateY(0)"


@pytest.mark.asyncio
async def test_live_refresh_restamps(services, rng):
    times = (FIXED_NOW + timedelta(minutes=i) for i in itertools.count())
    controller = DashboardController(services, rng=rng, clock=lambda: next(times))
    try:
        await controller.start()
        await asyncio.sleep(0.15)

        assert controller.view.get("lastUpdate").text != "28/09/2025 14:30"
        temp = float(controller.view.get("avgTemp").text)
        assert -50 <= temp <= 60
    finally:
        await controller.shutdown()


@pytest.mark.asyncio
async def test_select_temperature_period(quiet_controller, recorder_factory):
    recorder = recorder_factory(EventType.CHART_UPDATED)

    chart = await quiet_controller.select_temperature_period(90)

    assert len(chart.labels) == len(chart.series(0)) == len(chart.series(1)) == 30
    assert chart.labels[-1] == "28/09"
    assert quiet_controller.temperature_period == 90
    assert recorder.events[-1].mode == "active"


@pytest.mark.asyncio
async def test_select_invalid_temperature_period(quiet_controller):
    with pytest.raises(ValueError):
        await quiet_controller.select_temperature_period(0)
    assert quiet_controller.temperature_period == 30


@pytest.mark.asyncio
async def test_select_ndvi_region(quiet_controller):
    chart = await quiet_controller.select_ndvi_region("north")
    assert chart.series(0)[0] == 0.70
    assert quiet_controller.ndvi_region is NDVIRegion.NORTH

    chart = await quiet_controller.select_ndvi_region("atlantis")
    assert chart.series(0)[0] == 0.65
    assert quiet_controller.ndvi_region is NDVIRegion.ALL


@pytest.mark.asyncio
async def test_select_map_layer(quiet_controller, services, recorder_factory):
    recorder = recorder_factory(EventType.NOTIFICATION_SHOWN, EventType.NOTIFICATION_DISMISSED)
    container = quiet_controller.view.get("mapContainer")

    handle = await quiet_controller.select_map_layer("ndvi")
    assert container.style["opacity"] == "0.7"
    assert services.map_model.layer is MapLayer.NDVI

    await handle.wait()
    assert container.style["opacity"] == "1"
    assert list(services.notifications.visible.values()) == [
        "Camada alterada para: Índice de Vegetação (NDVI)"
    ]

    await asyncio.sleep(0.1)
    assert services.notifications.visible == {}
    assert [e.type for e in recorder.events] == [
        EventType.NOTIFICATION_SHOWN,
        EventType.NOTIFICATION_DISMISSED,
    ]


@pytest.mark.asyncio
async def test_select_unknown_map_layer(quiet_controller, services):
    with pytest.raises(ValueError):
        await quiet_controller.select_map_layer("infrared")

    assert quiet_controller.view.get("mapContainer").style["opacity"] == "1"
    assert services.map_model.layer is MapLayer.SATELLITE


@pytest.mark.asyncio
async def test_button_ripple_removed(quiet_controller, recorder_factory):
    recorder = recorder_factory(EventType.ELEMENT_ADDED, EventType.ELEMENT_REMOVED)

    ripple = await quiet_controller.click_button(Rect(10, 10, 100, 40), 60, 30)
    assert ripple.size == 100
    assert "ripple-1" in quiet_controller.view

    await asyncio.sleep(0.1)
    assert "ripple-1" not in quiet_controller.view
    assert [e.type for e in recorder.events] == [EventType.ELEMENT_ADDED, EventType.ELEMENT_REMOVED]

    await quiet_controller.click_button(Rect(10, 10, 100, 40), 60, 30)
    assert "ripple-2" in quiet_controller.view


@pytest.mark.asyncio
async def test_shutdown_releases_everything(controller, services, recorder_factory):
    await controller.start()
    await services.visibility.report("statArea", 1.0)
    assert controller.running()

    await controller.shutdown()
    assert controller.running() == []

    recorder = recorder_factory(EventType.DISPLAY_TEXT_CHANGED)
    await asyncio.sleep(0.1)
    assert recorder.events == []


@pytest.mark.asyncio
async def test_visibility_after_shutdown_is_ignored(quiet_controller, services, recorder_factory):
    await quiet_controller.start()
    await quiet_controller.shutdown()
    recorder = recorder_factory(EventType.DISPLAY_TEXT_CHANGED, EventType.DISPLAY_STYLE_CHANGED)

    assert await services.visibility.report("statArea", 0.9) == 0
    assert await services.visibility.report("serviceDrone", 0.9) == 0
    await asyncio.sleep(0.05)

    assert services.visibility.armed_elements() == []
    assert TaskRegistry.instance().active() == []
    assert recorder.events == []


@pytest.mark.asyncio
async def test_interactions_after_shutdown_schedule_nothing(quiet_controller):
    await quiet_controller.shutdown()

    assert await quiet_controller.select_map_layer("ndvi") is None
    await quiet_controller.click_button(Rect(0, 0, 80, 40), 40, 20)
    await asyncio.sleep(0.05)

    assert quiet_controller.view.get("mapContainer").style["opacity"] == "1"
    assert "ripple-1" not in quiet_controller.view

    assert TaskRegistry.instance().active() == []
    assert quiet_controller.running() == []


@pytest.mark.asyncio
async def test_scroll_moves_hero_visual(quiet_controller, recorder_factory):
    recorder = recorder_factory(EventType.DISPLAY_STYLE_CHANGED)

    assert await quiet_controller.scroll_page(240) == "translateY(-120px)"
    assert quiet_controller.view.get("heroVisual").style["transform"] == "translateY(-120px)"
    await quiet_controller.scroll_page(0)
    assert quiet_controller.view.get("heroVisual").style["transform"] == "translateY(0px)"

    assert [e.element_id for e in recorder.events] == ["heroVisual", "heroVisual"]

    with pytest.raises(ValueError):
        await quiet_controller.scroll_page(float("nan"))


@pytest.mark.asyncio
async def test_card_hover_switches_overlay(quiet_controller):
    overlay = quiet_controller.view.get("projectQuilombolaOverlay")
    assert overlay.style["background"] == OVERLAY_REST_BACKGROUND

    await quiet_controller.hover_card("projectQuilombola", True)
    assert overlay.style["background"] == OVERLAY_HOVER_BACKGROUND

    await quiet_controller.hover_card("projectQuilombola", False)
    assert overlay.style["background"] == OVERLAY_REST_BACKGROUND

    with pytest.raises(ValueError):
        await quiet_controller.hover_card("serviceDrone", True)


@pytest.mark.asyncio
async def test_many_ripples_leave_no_task_records(quiet_controller):
    for _ in range(50):
        await quiet_controller.click_button(Rect(0, 0, 80, 40), 40, 20)
    await asyncio.sleep(0.1)

    assert TaskRegistry.instance().list_all() == []
    assert not any(e.group == "ripple" for e in quiet_controller.view.all())
