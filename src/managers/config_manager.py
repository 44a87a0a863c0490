"""
Config Manager

Turns the YAML files under config/ into the typed DashboardConfig.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional

from models.config import (
    AnimationSettings,
    ApiSettings,
    DashboardConfig,
    InteractionSettings,
    JitterMetric,
    JitterSettings,
    LoggingSettings,
    VisibilitySettings,
)
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

SRC_DIR = Path(__file__).parent.parent


class ConfigManager:
    """
    Reads config/config.yaml into a DashboardConfig.

    The main file either holds the sections itself or lists section files
    under ``include:``; included files are merged in order, a later file
    replacing whole top-level sections of an earlier one. When the main
    file or one of its includes cannot be read, factory_defaults.yaml is
    used instead, and when that fails too, the built-in dataclass defaults.
    Values that are read but make no sense (zero steps, a threshold above
    1) raise ValueError instead of falling back.

        config = ConfigManager()
        config.load()
        config.settings.jitter.period_ms
    """

    def __init__(self, config_path="config/config.yaml", defaults_path="config/factory_defaults.yaml"):
        # relative paths are taken from src/
        self.config_path = Path(config_path)
        self.factory_defaults_path = Path(defaults_path)
        self.data: Dict[str, Any] = {}
        self.settings = DashboardConfig()

    def load(self) -> DashboardConfig:
        try:
            self.data = self._read_config(self._resolve(self.config_path))
        except (OSError, yaml.YAMLError, ValueError) as ex:
            log.warn(
                f"{self.config_path.name} unusable, loading factory defaults",
                error=f"{type(ex).__name__}: {ex}"
            )
            self.data = self._read_factory_defaults()

        self.settings = self._build_settings(self.data)
        return self.settings

    def _resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else SRC_DIR / path

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path.name}: top level must be a mapping")
        return data

    def _read_config(self, path: Path) -> Dict[str, Any]:
        main = self._read_yaml(path)
        includes: Optional[List[str]] = main.get("include")
        if not includes:
            log.info(f"Loaded {path.name}", sections=", ".join(main))
            return main

        merged: Dict[str, Any] = {}
        for name in includes:
            part = self._read_yaml(path.parent / name)
            log.debug(f"Included {name}", sections=", ".join(part))
            merged.update(part)
        log.info(f"Loaded {path.name} with {len(includes)} include(s)", sections=", ".join(merged))
        return merged

    def _read_factory_defaults(self) -> Dict[str, Any]:
        path = self._resolve(self.factory_defaults_path)
        try:
            return self._read_yaml(path)
        except (OSError, yaml.YAMLError, ValueError) as ex:
            log.error(f"{path.name} unusable too, using built-in defaults", error=str(ex))
            return {}

    # ===== Section parsing =====

    def _build_settings(self, data: Dict[str, Any]) -> DashboardConfig:
        settings = DashboardConfig(
            animation=self._parse_section(data, "animation", AnimationSettings),
            jitter=self._parse_jitter(data.get("jitter") or {}),
            visibility=self._parse_section(data, "visibility", VisibilitySettings),
            interaction=self._parse_section(data, "interaction", InteractionSettings),
            api=self._parse_section(data, "api", ApiSettings),
            logging=self._parse_section(data, "logging", LoggingSettings),
        )
        self._validate(settings)
        log.info(
            "Configuration ready",
            steps=settings.animation.steps,
            jitter_period_ms=settings.jitter.period_ms,
            api=f"{settings.api.host}:{settings.api.port}" if settings.api.enabled else "disabled"
        )
        return settings

    @staticmethod
    def _parse_section(data: Dict[str, Any], key: str, cls):
        raw = data.get(key) or {}
        known = cls.__dataclass_fields__.keys()
        unknown = set(raw) - set(known)
        if unknown:
            log.warn(f"Ignoring unknown keys in '{key}'", keys=", ".join(sorted(unknown)))
        return cls(**{k: v for k, v in raw.items() if k in known})

    @staticmethod
    def _parse_jitter(raw: Dict[str, Any]) -> JitterSettings:
        defaults = JitterSettings()
        metrics_raw: Optional[list] = raw.get("metrics")
        if metrics_raw is None:
            metrics = defaults.metrics
        else:
            metrics = []
            for entry in metrics_raw:
                try:
                    metrics.append(JitterMetric(
                        element_id=entry["element_id"],
                        max_delta=float(entry["max_delta"]),
                        domain_min=float(entry["domain_min"]),
                        domain_max=float(entry["domain_max"]),
                        decimals=int(entry.get("decimals", 1)),
                    ))
                except (KeyError, TypeError, ValueError) as e:
                    log.error(f"Invalid jitter metric entry: {entry}, error: {e}")
                    continue
        return JitterSettings(period_ms=int(raw.get("period_ms", defaults.period_ms)), metrics=metrics)

    @staticmethod
    def _validate(settings: DashboardConfig) -> None:
        if settings.animation.steps < 1:
            raise ValueError(f"animation.steps must be >= 1, got {settings.animation.steps}")
        if settings.animation.duration_ms <= 0:
            raise ValueError(f"animation.duration_ms must be > 0, got {settings.animation.duration_ms}")
        if settings.jitter.period_ms <= 0:
            raise ValueError(f"jitter.period_ms must be > 0, got {settings.jitter.period_ms}")
        for name in ("counter_threshold", "reveal_threshold"):
            value = getattr(settings.visibility, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"visibility.{name} must be within [0, 1], got {value}")
        for metric in settings.jitter.metrics:
            if metric.domain_min > metric.domain_max:
                raise ValueError(f"jitter metric '{metric.element_id}' has an empty domain")
