"""
Tests for YAML configuration loading
"""

import textwrap

import pytest

from managers.config_manager import ConfigManager
from models.config import DashboardConfig


def write(path, text):
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


def test_shipped_configuration_loads():
    settings = ConfigManager().load()

    assert settings.animation.steps == 60
    assert settings.animation.duration_ms == 2000
    assert settings.jitter.period_ms == 30000
    assert [m.element_id for m in settings.jitter.metrics] == ["avgTemp", "avgNDVI"]
    assert settings.interaction.notification_ms == 3000
    assert settings.api.port == 8000


def test_include_files_are_merged(tmp_path):
    write(tmp_path / "config.yaml", """
        include:
          - timing.yaml
          - api.yaml
    """)
    write(tmp_path / "timing.yaml", """
        animation:
          steps: 10
          duration_ms: 500
    """)
    write(tmp_path / "api.yaml", """
        api:
          enabled: false
          port: 9000
    """)

    config = ConfigManager(tmp_path / "config.yaml", tmp_path / "missing.yaml")
    settings = config.load()

    assert settings.animation.steps == 10
    assert settings.api.enabled is False
    assert settings.api.port == 9000
    assert settings.visibility.counter_threshold == 0.5
    assert set(config.data) == {"animation", "api"}


def test_monolithic_config(tmp_path):
    write(tmp_path / "config.yaml", """
        jitter:
          period_ms: 1000
          metrics:
            - element_id: avgTemp
              max_delta: 0.5
              domain_min: 0
              domain_max: 40
    """)

    settings = ConfigManager(tmp_path / "config.yaml").load()

    assert settings.jitter.period_ms == 1000
    metric = settings.jitter.metrics[0]
    assert (metric.element_id, metric.max_delta, metric.domain_max, metric.decimals) == ("avgTemp", 0.5, 40.0, 1)


def test_falls_back_to_factory_defaults(tmp_path):
    write(tmp_path / "defaults.yaml", """
        animation:
          steps: 7
    """)

    settings = ConfigManager(tmp_path / "absent.yaml", tmp_path / "defaults.yaml").load()

    assert settings.animation.steps == 7


def test_missing_include_falls_back(tmp_path):
    write(tmp_path / "config.yaml", """
        include:
          - nowhere.yaml
    """)
    write(tmp_path / "defaults.yaml", """
        interaction:
          ripple_ms: 100
    """)

    settings = ConfigManager(tmp_path / "config.yaml", tmp_path / "defaults.yaml").load()

    assert settings.interaction.ripple_ms == 100


def test_built_in_defaults_when_nothing_loads(tmp_path):
    settings = ConfigManager(tmp_path / "a.yaml", tmp_path / "b.yaml").load()
    assert settings == DashboardConfig()


def test_unknown_keys_are_ignored(tmp_path):
    write(tmp_path / "config.yaml", """
        animation:
          steps: 30
          easing: cubic
    """)

    settings = ConfigManager(tmp_path / "config.yaml").load()

    assert settings.animation.steps == 30


def test_invalid_jitter_metric_is_skipped(tmp_path):
    write(tmp_path / "config.yaml", """
        jitter:
          metrics:
            - element_id: avgTemp
            - element_id: avgNDVI
              max_delta: 0.005
              domain_min: 0
              domain_max: 1
              decimals: 2
    """)

    settings = ConfigManager(tmp_path / "config.yaml").load()

    assert [m.element_id for m in settings.jitter.metrics] == ["avgNDVI"]


@pytest.mark.parametrize("yaml_text", [
    "animation:\n  steps: 0\n",
    "animation:\n  duration_ms: -1\n",
    "jitter:\n  period_ms: 0\n",
    "visibility:\n  counter_threshold: 1.5\n",
    "jitter:\n  metrics:\n    - {element_id: x, max_delta: 1, domain_min: 5, domain_max: 1}\n",
])
def test_invalid_values_rejected(tmp_path, yaml_text):
    write(tmp_path / "config.yaml", yaml_text)

    with pytest.raises(ValueError):
        ConfigManager(tmp_path / "config.yaml").load()


def test_to_dict():
    data = DashboardConfig().to_dict()

    assert data["animation"] == {"steps": 60, "duration_ms": 2000}
    assert data["jitter"]["metrics"][1]["element_id"] == "avgNDVI"
