"""
Typed configuration sections

Built by ConfigManager from the merged YAML data. Every field has a
default so a missing section still yields a working dashboard.
"""

from dataclasses import asdict, dataclass, field
from typing import Dict, List

from models.animation import DEFAULT_STEPS, DEFAULT_DURATION_MS, DEFAULT_JITTER_PERIOD_MS


@dataclass(frozen=True)
class AnimationSettings:
    steps: int = DEFAULT_STEPS
    duration_ms: int = DEFAULT_DURATION_MS


@dataclass(frozen=True)
class JitterMetric:
    """One live value nudged by the refresh loop"""
    element_id: str
    max_delta: float
    domain_min: float
    domain_max: float
    decimals: int = 1


@dataclass(frozen=True)
class JitterSettings:
    period_ms: int = DEFAULT_JITTER_PERIOD_MS
    metrics: List[JitterMetric] = field(default_factory=lambda: [
        JitterMetric("avgTemp", 0.1, -50.0, 60.0, 1),
        JitterMetric("avgNDVI", 0.005, 0.0, 1.0, 2),
    ])


@dataclass(frozen=True)
class VisibilitySettings:
    counter_threshold: float = 0.5
    reveal_threshold: float = 0.1


@dataclass(frozen=True)
class InteractionSettings:
    notification_ms: int = 3000
    ripple_ms: int = 600
    map_fade_ms: int = 500


@dataclass(frozen=True)
class ApiSettings:
    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"
    use_colors: bool = True


@dataclass(frozen=True)
class DashboardConfig:
    animation: AnimationSettings = field(default_factory=AnimationSettings)
    jitter: JitterSettings = field(default_factory=JitterSettings)
    visibility: VisibilitySettings = field(default_factory=VisibilitySettings)
    interaction: InteractionSettings = field(default_factory=InteractionSettings)
    api: ApiSettings = field(default_factory=ApiSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def to_dict(self) -> Dict:
        return asdict(self)
