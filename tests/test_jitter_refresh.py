"""
Tests for the simulated live refresh of KPI values
"""

import asyncio
import random

import pytest

from models.animation import JitterRefresh
from models.display import DisplayElement
from services.dashboard_view import DashboardView
from services.jitter_refresh import JitterRefresher, jitter_tick


def make_view(event_bus, **texts):
    return DashboardView(event_bus, [DisplayElement(k, v, "kpi") for k, v in texts.items()])


def test_jitter_tick_stays_inside_domain():
    rng = random.Random(7)
    value = 0.78
    for _ in range(1000):
        value = jitter_tick(value, 0.0, 1.0, 0.005, rng)
        assert 0.0 <= value <= 1.0


def test_jitter_tick_thousand_ticks_in_percent_domain():
    value = 24.0
    for _ in range(1000):
        value = jitter_tick(value, 0, 100, 0.1)
        assert 0 <= value <= 100


def test_jitter_tick_clamps_at_bounds():
    rng = random.Random(3)
    for _ in range(100):
        assert jitter_tick(1.0, 0.0, 1.0, 0.5, rng) <= 1.0
        assert jitter_tick(0.0, 0.0, 1.0, 0.5, rng) >= 0.0


def test_jitter_tick_moves_at_most_max_delta():
    rng = random.Random(11)
    for _ in range(200):
        assert abs(jitter_tick(24.5, -50, 60, 0.1, rng) - 24.5) <= 0.1 + 1e-9


def test_jitter_tick_zero_delta_is_identity():
    assert jitter_tick(24.5, -50, 60, 0.0, random.Random(1)) == 24.5


def test_jitter_tick_rejects_empty_domain():
    with pytest.raises(ValueError):
        jitter_tick(0.5, 1.0, 0.0, 0.1)


def test_jitter_refresh_rejects_empty_domain():
    with pytest.raises(ValueError):
        JitterRefresh("avgNDVI", domain_min=1.0, domain_max=0.0, max_delta=0.1)


@pytest.mark.asyncio
async def test_refresh_once_keeps_values_in_domain(event_bus):
    view = make_view(event_bus, avgTemp="24.5", avgNDVI="0.99")
    refresher = JitterRefresher(view, random.Random(5))
    targets = [
        JitterRefresh("avgTemp", -50, 60, max_delta=0.1, decimals=1),
        JitterRefresh("avgNDVI", 0, 1, max_delta=0.005, decimals=2),
    ]

    for _ in range(1000):
        assert await refresher.refresh_once(targets) == 2
        temp = float(view.get("avgTemp").text)
        ndvi = float(view.get("avgNDVI").text)
        assert -50 <= temp <= 60
        assert 0 <= ndvi <= 1
        assert len(view.get("avgNDVI").text.split(".")[1]) == 2


@pytest.mark.asyncio
async def test_refresh_once_skips_non_numeric(event_bus):
    view = make_view(event_bus, avgTemp="N/A")
    refresher = JitterRefresher(view, random.Random(1))

    updated = await refresher.refresh_once([JitterRefresh("avgTemp", -50, 60, max_delta=0.1)])

    assert updated == 0
    assert view.get("avgTemp").text == "N/A"


@pytest.mark.asyncio
async def test_loop_refreshes_until_released(event_bus):
    view = make_view(event_bus, avgTemp="24.5")
    calls = []

    async def on_refresh():
        calls.append(view.get("avgTemp").text)

    refresher = JitterRefresher(view, random.Random(2), on_refresh=on_refresh)
    handle = refresher.start([JitterRefresh("avgTemp", -50, 60, max_delta=0.1, period_ms=10)])

    await asyncio.sleep(0.1)
    await handle.release()
    count = len(calls)
    await asyncio.sleep(0.05)

    assert count >= 2
    assert len(calls) == count
    assert handle.done


def test_start_requires_targets(event_bus):
    with pytest.raises(ValueError):
        JitterRefresher(make_view(event_bus)).start([])


def test_start_requires_one_period(event_bus):
    refresher = JitterRefresher(make_view(event_bus, a="1", b="2"))
    with pytest.raises(ValueError):
        refresher.start([
            JitterRefresh("a", 0, 10, 0.1, period_ms=100),
            JitterRefresh("b", 0, 10, 0.1, period_ms=200),
        ])
