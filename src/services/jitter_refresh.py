"""
Jitter Refresh

Simulated "live" updates: every period each configured value is read back
from its displayed text, nudged by a small uniform random delta, clamped
to its domain and written again. There is no natural end; the loop runs
until its handle is released.
"""

import asyncio
import random
from typing import Awaitable, Callable, List, Optional, Sequence

from lifecycle.handles import ScheduledHandle
from lifecycle.task_registry import create_tracked_task, TaskCategory
from models.animation import JitterRefresh
from services.dashboard_view import DashboardView
from utils.logger import get_logger, LogCategory
from utils.number_format import clamp, fit_to_domain, parse_display_value

log = get_logger().for_category(LogCategory.REFRESH)


def jitter_tick(
    current: float,
    domain_min: float,
    domain_max: float,
    max_delta: float,
    rng: Optional[random.Random] = None,
) -> float:
    """
    next = clamp(current + uniform(-max_delta, +max_delta), domain_min, domain_max)
    """
    if domain_min > domain_max:
        raise ValueError(f"Empty domain [{domain_min}, {domain_max}]")
    delta = (rng or random).uniform(-max_delta, max_delta)
    return clamp(current + delta, domain_min, domain_max)


class JitterRefresher:
    """
    Periodic nudge of live values on a DashboardView.

    Example:
        refresher = JitterRefresher(view, on_refresh=stamp_last_update)
        handle = refresher.start([
            JitterRefresh("avgTemp", -50, 60, max_delta=0.1, decimals=1),
            JitterRefresh("avgNDVI", 0, 1, max_delta=0.005, decimals=2),
        ])
    """

    def __init__(
        self,
        view: DashboardView,
        rng: Optional[random.Random] = None,
        on_refresh: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        self.view = view
        self.rng = rng or random.Random()
        self.on_refresh = on_refresh

    async def refresh_once(self, targets: Sequence[JitterRefresh]) -> int:
        """
        Run one period over all targets.

        Returns the number of elements updated; unparseable ones are skipped.
        """
        updated = 0
        for target in targets:
            element = self.view.get(target.element_id)
            parsed = parse_display_value(element.text if element else None)
            if parsed is None:
                log.debug(f"Skipping refresh of '{target.element_id}': text is not a number")
                continue

            raw = jitter_tick(
                parsed.value, target.domain_min, target.domain_max, target.max_delta, self.rng
            )
            shown = fit_to_domain(raw, target.domain_min, target.domain_max, target.decimals)
            target.current_value = shown

            text = parsed.fmt.with_decimals(target.decimals).format(shown)
            await self.view.set_text(target.element_id, text)
            updated += 1

        return updated

    def start(self, targets: Sequence[JitterRefresh]) -> ScheduledHandle:
        """
        Start the refresh loop. All targets share one period.

        Raises:
            ValueError: if targets is empty or periods differ
        """
        targets: List[JitterRefresh] = list(targets)
        if not targets:
            raise ValueError("No jitter targets given")

        periods = {t.period_ms for t in targets}
        if len(periods) != 1:
            raise ValueError(f"Jitter targets must share one period, got {sorted(periods)}")

        period_s = targets[0].period_s
        log.info(
            "Live refresh started",
            elements=", ".join(t.element_id for t in targets),
            period_s=period_s
        )

        description = "Jitter refresh " + ",".join(t.element_id for t in targets)
        task = create_tracked_task(
            self._loop(targets, period_s),
            category=TaskCategory.REFRESH,
            description=description,
            created_by=self.__class__.__name__
        )
        return ScheduledHandle(task, description)

    async def _loop(self, targets: List[JitterRefresh], period_s: float) -> None:
        try:
            while True:
                await asyncio.sleep(period_s)
                updated = await self.refresh_once(targets)
                if self.on_refresh:
                    await self.on_refresh()
                log.debug(f"Live values refreshed ({updated}/{len(targets)})")
        except asyncio.CancelledError:
            log.debug("Live refresh loop cancelled")
            raise
