"""
Shared fixtures for the dashboard tests.

Timings are shrunk (few steps, tens of milliseconds) so scheduled work
completes quickly; the behaviour under test does not depend on them.
"""

import random
import sys
from datetime import date, datetime
from pathlib import Path

import pytest
import pytest_asyncio

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from controllers.dashboard_controller import DashboardController
from dashboard.bootstrap import build_services
from lifecycle.task_registry import TaskRegistry
from managers.config_manager import ConfigManager
from models.config import (
    AnimationSettings,
    DashboardConfig,
    InteractionSettings,
    JitterSettings,
)
from services.event_bus import EventBus

FIXED_NOW = datetime(2025, 9, 28, 14, 30)


@pytest.fixture(autouse=True)
def fresh_task_registry():
    """Each test sees only the tasks it created."""
    TaskRegistry._instance = None
    yield
    TaskRegistry._instance = None


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def fast_config():
    config = ConfigManager()
    default_jitter = JitterSettings()
    config.settings = DashboardConfig(
        animation=AnimationSettings(steps=5, duration_ms=25),
        jitter=JitterSettings(period_ms=20, metrics=default_jitter.metrics),
        interaction=InteractionSettings(notification_ms=30, ripple_ms=20, map_fade_ms=10),
    )
    return config


@pytest.fixture
def services(fast_config, event_bus, rng):
    return build_services(fast_config, event_bus, rng, today=FIXED_NOW.date())


@pytest_asyncio.fixture
async def controller(services, rng):
    controller = DashboardController(services, rng=rng, clock=lambda: FIXED_NOW)
    yield controller
    await controller.shutdown()


class EventRecorder:
    """Collects every event of the given types published on a bus."""

    def __init__(self, bus: EventBus, *event_types):
        self.events = []
        for event_type in event_types:
            bus.subscribe(event_type, self.events.append)

    def of_type(self, event_type):
        return [e for e in self.events if e.type == event_type]


@pytest.fixture
def recorder_factory(event_bus):
    def make(*event_types):
        return EventRecorder(event_bus, *event_types)
    return make
