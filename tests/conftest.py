"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from prometheus_client import CollectorRegistry as PrometheusRegistry

from metricbuddy.adapters.metric_registry import MetricRegistry
from metricbuddy.config.models import MetricsConfig
from metricbuddy.facade.metrics_collectors import MetricsCollectors
from metricbuddy.observability.binding_events import BindingEventLog
from metricbuddy.registry.collector_registry import CollectorRegistry


class FakeClock:
    """Manually advanced clock for meters and timers."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fixtures_path() -> Path:
    """Directory holding YAML fixtures and profiles."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_config_path(fixtures_path: Path) -> Path:
    """Path to sample configuration file."""
    return fixtures_path / "sample_config.yaml"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def metric_registry() -> MetricRegistry:
    """Create an empty backend registry."""
    return MetricRegistry()


@pytest.fixture
def events() -> BindingEventLog:
    return BindingEventLog()


@pytest.fixture
def collector_registry(metric_registry: MetricRegistry, events: BindingEventLog) -> CollectorRegistry:
    """Create a collector registry on the shared backend."""
    return CollectorRegistry(metric_registry, events)


@pytest.fixture
def collectors(metric_registry: MetricRegistry) -> MetricsCollectors:
    """Create a facade using snake-case naming."""
    return MetricsCollectors(metric_registry).with_snake_case_naming()


@pytest.fixture
def prometheus_registry() -> PrometheusRegistry:
    """Create an isolated Prometheus registry."""
    return PrometheusRegistry()


@pytest.fixture
def default_config() -> MetricsConfig:
    return MetricsConfig()
