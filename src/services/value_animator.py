"""
Value Animator

Count-up animation for numeric display elements.

The animator reads the element's current text, strips its decorations
("1,250+", "5cm", "0.78"), and replays the number from 0 up to the target
over a fixed number of ticks. The final tick writes the target exactly.
Elements whose text is not a number ("N/A") are left alone.
"""

import asyncio
import math
from typing import Callable, Optional

from lifecycle.handles import ScheduledHandle
from lifecycle.task_registry import create_tracked_task, TaskCategory
from models.animation import AnimationTarget, DEFAULT_STEPS, DEFAULT_DURATION_MS
from services.dashboard_view import DashboardView
from utils.logger import get_logger, LogCategory
from utils.number_format import parse_display_value

log = get_logger().for_category(LogCategory.ANIMATION)


class ValueAnimator:
    """
    Schedules count-up runs on a DashboardView.

    Each run is an independent tracked task that releases itself after
    its final tick. The returned handle lets the owner cancel it earlier.

    Example:
        animator = ValueAnimator(view)
        handle = animator.animate_to("statArea")          # target read from text
        handle = animator.animate_to("avgNDVI", decimals=2)
        await handle.wait()
    """

    def __init__(
        self,
        view: DashboardView,
        steps: int = DEFAULT_STEPS,
        duration_ms: int = DEFAULT_DURATION_MS,
    ):
        self.view = view
        self.steps = steps
        self.duration_ms = duration_ms

    def plan(
        self,
        element_id: str,
        target: Optional[float] = None,
        steps: Optional[int] = None,
        duration_ms: Optional[int] = None,
        decimals: Optional[int] = None,
        formatter: Optional[Callable[[float], str]] = None,
    ) -> Optional[AnimationTarget]:
        """
        Build the AnimationTarget for an element without scheduling it.

        Args:
            element_id: Display element to animate
            target: Final value (defaults to the number currently displayed)
            steps: Number of display updates
            duration_ms: Total run time
            decimals: Fixed precision (defaults to the precision displayed)
            formatter: Replaces the display format read from the text

        Returns:
            None when the element is missing, its text cannot be parsed, or
            the target is not finite.
        """
        element = self.view.get(element_id)
        parsed = parse_display_value(element.text if element else None)
        if parsed is None:
            log.debug(f"Skipping count-up for '{element_id}': text is not a number")
            return None

        final = parsed.value if target is None else target
        if final is None or not math.isfinite(final):
            log.debug(f"Skipping count-up for '{element_id}': target {final!r} is not finite")
            return None

        fmt = parsed.fmt if decimals is None else parsed.fmt.with_decimals(decimals)

        return AnimationTarget(
            target_value=float(final),
            step_count=self.steps if steps is None else steps,
            duration_ms=self.duration_ms if duration_ms is None else duration_ms,
            formatter=formatter or fmt.format,
        )

    def animate_to(
        self,
        element_id: str,
        target: Optional[float] = None,
        steps: Optional[int] = None,
        duration_ms: Optional[int] = None,
        decimals: Optional[int] = None,
        formatter: Optional[Callable[[float], str]] = None,
    ) -> Optional[ScheduledHandle]:
        """
        Start a count-up run. Returns None (nothing scheduled) when the
        element text is not a number or the target is not finite.
        """
        anim = self.plan(element_id, target, steps, duration_ms, decimals, formatter)
        if anim is None:
            return None

        log.debug(
            "Count-up scheduled",
            element=element_id,
            target=anim.target_value,
            steps=anim.step_count,
            duration_ms=anim.duration_ms
        )

        description = f"Count-up {element_id}"
        task = create_tracked_task(
            self._run(element_id, anim),
            category=TaskCategory.ANIMATION,
            description=description,
            created_by=self.__class__.__name__
        )
        return ScheduledHandle(task, description)

    async def _run(self, element_id: str, anim: AnimationTarget) -> int:
        """Emit every tick, spaced interval_s apart. Returns ticks emitted."""
        interval = anim.interval_s
        for _tick, text in anim.frames():
            await asyncio.sleep(interval)
            await self.view.set_text(element_id, text)

        log.debug(f"Count-up finished for '{element_id}'", final=anim.formatter(anim.target_value))
        return anim.ticks_done
