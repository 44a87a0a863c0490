"""
Animation Models

Count-up animation of a displayed number and periodic jitter of a live
value. Both are plain data; scheduling lives in services.value_animator
and services.jitter_refresh.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional, Tuple

DEFAULT_STEPS = 60
DEFAULT_DURATION_MS = 2000
DEFAULT_JITTER_PERIOD_MS = 30000


def _str_formatter(value: float) -> str:
    return str(round(value))


@dataclass
class AnimationTarget:
    """
    One count-up run of a display element.

    The running value always starts at 0 and grows by target / steps per
    tick. On the last tick it is forced to target_value so the final text
    carries no floating-point drift.

    Attributes:
        target_value: Value the counter settles on
        step_count: Number of display updates (>= 1)
        duration_ms: Total duration of the run
        formatter: float -> display text
        current_value: Running value, mutated by advance()
        ticks_done: Number of ticks already emitted
    """
    target_value: float
    step_count: int = DEFAULT_STEPS
    duration_ms: int = DEFAULT_DURATION_MS
    formatter: Callable[[float], str] = _str_formatter
    current_value: float = 0.0
    ticks_done: int = 0

    def __post_init__(self):
        if not math.isfinite(self.target_value):
            raise ValueError(f"target must be finite, got {self.target_value}")
        if self.step_count < 1:
            raise ValueError(f"step_count must be >= 1, got {self.step_count}")
        if self.duration_ms <= 0:
            raise ValueError(f"duration_ms must be > 0, got {self.duration_ms}")

    @property
    def increment(self) -> float:
        return self.target_value / self.step_count

    @property
    def interval_s(self) -> float:
        """Delay between two ticks, in seconds"""
        return self.duration_ms / self.step_count / 1000

    @property
    def finished(self) -> bool:
        return self.ticks_done >= self.step_count

    def advance(self) -> str:
        """Emit the next tick and return its display text."""
        if self.finished:
            raise RuntimeError("Animation already finished")

        self.ticks_done += 1
        if self.ticks_done >= self.step_count:
            self.current_value = self.target_value
        else:
            self.current_value += self.increment
        return self.formatter(self.current_value)

    def frames(self) -> Iterator[Tuple[int, str]]:
        """Yield (tick, display_text) for every remaining tick."""
        while not self.finished:
            text = self.advance()
            yield self.ticks_done, text


@dataclass
class JitterRefresh:
    """
    Live value nudged by a small random delta every period.

    The value is read back from the displayed text on every period, so
    current_value only mirrors the last value written.
    """
    element_id: str
    domain_min: float
    domain_max: float
    max_delta: float
    decimals: int = 1
    period_ms: int = DEFAULT_JITTER_PERIOD_MS
    current_value: Optional[float] = field(default=None, compare=False)

    def __post_init__(self):
        if self.domain_min > self.domain_max:
            raise ValueError(
                f"domain_min {self.domain_min} > domain_max {self.domain_max} for {self.element_id}"
            )
        if self.max_delta < 0:
            raise ValueError(f"max_delta must be >= 0, got {self.max_delta}")
        if self.period_ms <= 0:
            raise ValueError(f"period_ms must be > 0, got {self.period_ms}")

    @property
    def period_s(self) -> float:
        return self.period_ms / 1000
