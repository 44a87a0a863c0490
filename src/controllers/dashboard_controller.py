"""
DashboardController - page lifecycle and user interactions

Owns everything scheduled on behalf of the dashboard page: count-up runs,
the live refresh loop, notification and ripple timers. All of them are
held in one HandleGroup so shutdown() releases them together.
"""

from __future__ import annotations

import asyncio
import itertools
import math
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

from dashboard.charts import ChartModel, ndvi_series, resolve_region, temperature_series
from dashboard.interactions import (
    MAP_FADE_OPACITY,
    REVEAL_HIDDEN_STYLE,
    REVEAL_SHOWN_STYLE,
    Rect,
    Ripple,
    format_last_update,
    hover_overlay_background,
    parallax_transform,
    ripple_geometry,
)
from dashboard.layout import (
    GROUP_COUNTER,
    GROUP_KPI,
    GROUP_REVEAL,
    HERO_VISUAL_ID,
    KPI_DECIMALS,
    LAST_UPDATE_ID,
    MAP_CONTAINER_ID,
    PROJECT_OVERLAYS,
)
from dashboard.map_overlays import MapModel, layer_name
from lifecycle.handles import HandleGroup, ScheduledHandle
from lifecycle.task_registry import create_tracked_task, TaskCategory
from models.animation import JitterRefresh
from models.display import DisplayElement
from models.enums import ChartID, MapLayer, NDVIRegion
from services.dashboard_view import DashboardView
from services.event_bus import EventBus
from services.jitter_refresh import JitterRefresher
from services.service_container import ServiceContainer
from services.value_animator import ValueAnimator
from services.visibility_tracker import VisibilitySubscription
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.DASHBOARD)


@dataclass
class DashboardContext:
    """Per-page state shared by the controller's operations"""
    view: DashboardView
    charts: Dict[ChartID, ChartModel]
    map: MapModel
    event_bus: EventBus
    handles: HandleGroup = field(default_factory=lambda: HandleGroup("dashboard"))


class DashboardController:
    """
    Drives one dashboard page.

    Example:
        controller = DashboardController(services)
        await controller.start()
        await services.visibility.report("statArea", 0.6)   # counter runs
        await controller.select_map_layer("ndvi")
        await controller.shutdown()
    """

    def __init__(
        self,
        services: ServiceContainer,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.services = services
        self.settings = services.config_manager.settings
        self.rng = rng or random.Random()
        self.clock = clock

        self.context = DashboardContext(
            view=services.view,
            charts=services.charts,
            map=services.map_model,
            event_bus=services.event_bus,
        )
        self.animator = ValueAnimator(
            services.view,
            steps=self.settings.animation.steps,
            duration_ms=self.settings.animation.duration_ms,
        )
        self.refresher = JitterRefresher(services.view, self.rng, on_refresh=self.stamp_last_update)

        self.temperature_period = 30
        self.ndvi_region = NDVIRegion.ALL
        self._ripple_ids = itertools.count(1)
        self._started = False
        self._subscriptions: List[VisibilitySubscription] = []

    @property
    def view(self) -> DashboardView:
        return self.context.view

    @property
    def handles(self) -> HandleGroup:
        return self.context.handles

    @property
    def started(self) -> bool:
        return self._started

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """
        Page load: stamp, render charts and map, run KPI counters, arm
        visibility triggers and start the live refresh.
        """
        if self._started:
            raise RuntimeError("Dashboard already started")
        self._started = True

        log.info("Starting dashboard")
        await self.stamp_last_update()

        for chart in self.context.charts.values():
            await chart.update()

        self._animate_kpis()
        self._arm_counters()
        await self._arm_reveals()
        self._start_refresh()

        log.info(
            "Dashboard started",
            elements=len(self.view.all()),
            armed=len(self.services.visibility.armed_elements()),
            running=len(self.handles)
        )

    async def shutdown(self) -> None:
        log.info("Stopping dashboard")
        for subscription in self._subscriptions:
            self.services.visibility.cancel(subscription)
        self._subscriptions.clear()
        await self.handles.release_all()

    def _own(self, handle: Optional[ScheduledHandle]) -> Optional[ScheduledHandle]:
        """Hand a handle to the page's group; work arriving after shutdown is cancelled."""
        if handle is None:
            return None
        if self.handles.closed:
            handle.task.cancel()
            log.debug(f"Dropped '{handle.description}' after shutdown")
            return None
        return self.handles.add(handle)

    # ------------------------------------------------------------------
    # Page-load work
    # ------------------------------------------------------------------

    async def stamp_last_update(self) -> None:
        await self.view.set_text(LAST_UPDATE_ID, format_last_update(self.clock()))

    def _animate_kpis(self) -> None:
        for element in self.view.by_group(GROUP_KPI):
            self._own(
                self.animator.animate_to(element.id, decimals=KPI_DECIMALS.get(element.id))
            )

    def _arm_counters(self) -> None:
        threshold = self.settings.visibility.counter_threshold
        for element in self.view.by_group(GROUP_COUNTER):
            self._subscriptions.append(self.services.visibility.register_once(
                element.id, self._on_counter_visible, threshold=threshold, name="counter"
            ))

    async def _arm_reveals(self) -> None:
        threshold = self.settings.visibility.reveal_threshold
        for element in self.view.by_group(GROUP_REVEAL):
            await self.view.set_style(element.id, **REVEAL_HIDDEN_STYLE)
            self._subscriptions.append(self.services.visibility.register_once(
                element.id, self._on_reveal_visible, threshold=threshold, name="reveal"
            ))

    def _start_refresh(self) -> None:
        jitter = self.settings.jitter
        targets = [
            JitterRefresh(
                element_id=m.element_id,
                domain_min=m.domain_min,
                domain_max=m.domain_max,
                max_delta=m.max_delta,
                decimals=m.decimals,
                period_ms=jitter.period_ms,
            )
            for m in jitter.metrics
            if m.element_id in self.view
        ]
        if not targets:
            log.warn("No live values configured, refresh not started")
            return
        self._own(self.refresher.start(targets))

    def _on_counter_visible(self, element_id: str) -> None:
        self._own(self.animator.animate_to(element_id))

    async def _on_reveal_visible(self, element_id: str) -> None:
        await self.view.set_style(element_id, **REVEAL_SHOWN_STYLE)

    # ------------------------------------------------------------------
    # User interactions
    # ------------------------------------------------------------------

    async def select_temperature_period(self, days: int) -> ChartModel:
        """
        Regenerate the temperature chart for the last ``days`` days.

        Raises:
            ValueError: if days is outside 1..365
        """
        labels, satellite, drone = temperature_series(days, self.rng, self.clock().date())
        chart = self.context.charts[ChartID.TEMPERATURE]
        chart.replace_labels(labels)
        chart.replace_series(0, satellite)
        chart.replace_series(1, drone)
        await chart.update("active")

        self.temperature_period = days
        log.info(f"Temperature period set to {days} days", points=len(labels))
        return chart

    async def select_ndvi_region(self, region: NDVIRegion | str) -> ChartModel:
        """Show a region's NDVI series; unknown regions show ALL."""
        self.ndvi_region = resolve_region(region)
        satellite, drone = ndvi_series(self.ndvi_region)
        chart = self.context.charts[ChartID.NDVI]
        chart.replace_series(0, satellite)
        chart.replace_series(1, drone)
        await chart.update("active")

        log.info(f"NDVI region set to {self.ndvi_region.value}")
        return chart

    async def select_map_layer(self, layer: MapLayer | str) -> Optional[ScheduledHandle]:
        """
        Switch the map layer: the map container dims at once, then after
        a short fade it is restored and a notification names the new layer.
        After shutdown the fade is not scheduled and None is returned.

        Raises:
            ValueError: if layer is unknown
        """
        new_layer = await self.context.map.select_layer(layer)
        await self.view.set_style(MAP_CONTAINER_ID, opacity=MAP_FADE_OPACITY)

        description = f"Map fade {new_layer.value}"
        task = create_tracked_task(
            self._finish_layer_switch(new_layer, self.settings.interaction.map_fade_ms / 1000),
            category=TaskCategory.INTERACTION,
            description=description,
            created_by=self.__class__.__name__
        )
        handle = self._own(ScheduledHandle(task, description))
        if handle is None:
            await self.view.set_style(MAP_CONTAINER_ID, opacity="1")
        return handle

    async def _finish_layer_switch(self, layer: MapLayer, delay_s: float) -> None:
        await asyncio.sleep(delay_s)
        await self.view.set_style(MAP_CONTAINER_ID, opacity="1")
        self._own(
            await self.services.notifications.show(f"Camada alterada para: {layer_name(layer)}")
        )

    async def click_button(self, rect: Rect, client_x: float, client_y: float) -> Ripple:
        """Insert a ripple at the click point; it is removed after its animation."""
        ripple = ripple_geometry(rect, client_x, client_y)
        ripple_id = f"ripple-{next(self._ripple_ids)}"
        await self.view.insert(DisplayElement(ripple_id, "", "ripple", ripple.style()))

        description = f"Remove {ripple_id}"
        task = create_tracked_task(
            self._remove_later(ripple_id, self.settings.interaction.ripple_ms / 1000),
            category=TaskCategory.INTERACTION,
            description=description,
            created_by=self.__class__.__name__
        )
        if self._own(ScheduledHandle(task, description)) is None:
            await self.view.remove(ripple_id)
        return ripple

    async def _remove_later(self, element_id: str, delay_s: float) -> None:
        await asyncio.sleep(delay_s)
        await self.view.remove(element_id)

    async def scroll_page(self, scroll_y: float) -> str:
        """Move the hero visual at half the scroll speed, upwards."""
        if not math.isfinite(scroll_y):
            raise ValueError(f"Scroll offset must be finite, got {scroll_y}")
        transform = parallax_transform(scroll_y)
        await self.view.set_style(HERO_VISUAL_ID, transform=transform)
        return transform

    async def hover_card(self, card_id: str, hovered: bool) -> str:
        """
        Darken a project card's overlay while the pointer is over it.

        Raises:
            ValueError: if the card has no overlay
        """
        overlay_id = PROJECT_OVERLAYS.get(card_id)
        if overlay_id is None:
            raise ValueError(f"Card '{card_id}' has no overlay")
        background = hover_overlay_background(hovered)
        await self.view.set_style(overlay_id, background=background)
        return background

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def chart(self, chart_id: ChartID) -> ChartModel:
        return self.context.charts[chart_id]

    def running(self) -> List[ScheduledHandle]:
        return self.handles.active()
