"""
Metrics Collectors - Public Entry Point of the Binding Engine.

Usage:
    collectors = MetricsCollectors().with_snake_case_naming()
    metrics = collectors.metrics_collector(OrderService, OrderMetrics)
    metrics.orders_placed()

    # Anywhere else, lookup only
    metrics = collectors(OrderService)

A facade is an immutable value. The with_* methods return new facades that
share the backend registry, the collector caches and the event log with the
facade they were derived from.
"""

from __future__ import annotations

import inspect
import logging
import threading
from typing import Any, Optional

from prometheus_client import CollectorRegistry as PrometheusRegistry

from metricbuddy.adapters.metric_registry import MetricRegistry
from metricbuddy.adapters.prometheus_reporter import PrometheusReporter
from metricbuddy.binding.naming import (
    MetricNameStrategy,
    PathNamer,
    SnakeCaseNamer,
    describe_strategy,
    naming_strategy_for,
)
from metricbuddy.config.models import MetricsConfig
from metricbuddy.observability.binding_events import BindingEventLog
from metricbuddy.registry.collector_registry import CollectorRegistry

logger = logging.getLogger(__name__)


class _SharedState:
    """State shared by a family of facades."""

    def __init__(self, metric_registry: MetricRegistry) -> None:
        self.metric_registry = metric_registry
        self.events = BindingEventLog()
        self.collectors = CollectorRegistry(metric_registry, self.events)
        self.reporter = PrometheusReporter(metric_registry)


class MetricsCollectors:
    """Creates, caches and looks up metrics collectors per source type."""

    __slots__ = ("_shared", "_naming_strategy", "_reporting")

    def __init__(
        self,
        metric_registry: Optional[MetricRegistry] = None,
        naming_strategy: Optional[MetricNameStrategy] = None,
    ) -> None:
        """
        Initialize a facade with fresh caches.

        Args:
            metric_registry: Backend registry (a new MetricRegistry by default)
            naming_strategy: Strategy for metric names; None keeps operation names
        """
        self._shared = _SharedState(metric_registry if metric_registry is not None else MetricRegistry())
        self._naming_strategy = naming_strategy
        self._reporting = False

    @classmethod
    def _derived(
        cls,
        shared: _SharedState,
        naming_strategy: Optional[MetricNameStrategy],
        reporting: bool,
    ) -> "MetricsCollectors":
        facade = cls.__new__(cls)
        facade._shared = shared
        facade._naming_strategy = naming_strategy
        facade._reporting = reporting
        return facade

    @property
    def metric_registry(self) -> MetricRegistry:
        return self._shared.metric_registry

    @property
    def collectors(self) -> CollectorRegistry:
        return self._shared.collectors

    @property
    def events(self) -> BindingEventLog:
        return self._shared.events

    @property
    def reporter(self) -> PrometheusReporter:
        return self._shared.reporter

    @property
    def naming_strategy(self) -> Optional[MetricNameStrategy]:
        return self._naming_strategy

    @property
    def reporting_enabled(self) -> bool:
        return self._reporting

    def metrics_collector(self, source: Any, collector_type: Optional[type] = None) -> Any:
        """
        Get the metrics collector of a source.

        Args:
            source: Class, module or instance (its class is used) being
                instrumented
            collector_type: Collector interface or MetricsSupport subclass;
                None looks up an existing collector only

        Returns:
            The collector registered for the source type

        Raises:
            TypeError: If source is None
            NoCollectorRegistered: Lookup only, and nothing registered
            MetricsBindingError: See CollectorRegistry.get_or_create
        """
        source_type = _source_type_of(source)
        if collector_type is None:
            return self._shared.collectors.get_existing(source_type)
        return self._shared.collectors.get_or_create(
            source_type, collector_type, self._naming_strategy
        )

    def __call__(self, source: Any) -> Any:
        return self.metrics_collector(source)

    def with_naming_strategy(self, strategy: Optional[MetricNameStrategy]) -> "MetricsCollectors":
        """Derive a facade generating metric names with another strategy."""
        return self._derived(self._shared, strategy, self._reporting)

    def with_snake_case_naming(self) -> "MetricsCollectors":
        return self.with_naming_strategy(SnakeCaseNamer())

    def with_path_naming(self) -> "MetricsCollectors":
        return self.with_naming_strategy(PathNamer())

    def with_prometheus_registration(
        self,
        registry: Optional[PrometheusRegistry] = None,
    ) -> "MetricsCollectors":
        """
        Expose the backend registry to Prometheus.

        Reporting is started once per facade family; calling this on a
        facade that already reports returns the same facade.

        Args:
            registry: Prometheus registry (prometheus_client.REGISTRY by default)
        """
        if self._reporting:
            return self
        self._shared.reporter.start(registry)
        return self._derived(self._shared, self._naming_strategy, True)

    def __repr__(self) -> str:
        return (
            f"MetricsCollectors(naming={describe_strategy(self._naming_strategy)}, "
            f"reporting={self._reporting}, "
            f"collectors={self._shared.collectors.registered_count})"
        )


def _source_type_of(source: Any) -> Any:
    if source is None:
        raise TypeError("Metrics source must not be None")
    if inspect.isclass(source) or inspect.ismodule(source):
        return source
    return type(source)


_default_instance: Optional[MetricsCollectors] = None
_default_lock = threading.Lock()


def default_instance() -> MetricsCollectors:
    """Get the process-wide facade, creating it on first use."""
    global _default_instance
    with _default_lock:
        if _default_instance is None:
            _default_instance = MetricsCollectors()
        return _default_instance


def create_metrics_collectors(
    config: Optional[MetricsConfig] = None,
    metric_registry: Optional[MetricRegistry] = None,
    prometheus_registry: Optional[PrometheusRegistry] = None,
) -> MetricsCollectors:
    """
    Build a facade from configuration.

    Args:
        config: Validated configuration (defaults when None)
        metric_registry: Backend registry; created from config.backend when None
        prometheus_registry: Target of Prometheus reporting, if enabled

    Returns:
        Configured MetricsCollectors
    """
    config = config or MetricsConfig()
    if metric_registry is None:
        metric_registry = MetricRegistry(reservoir_size=config.backend.reservoir_size)

    strategy = naming_strategy_for(config.naming.strategy, config.naming.separator)
    collectors = MetricsCollectors(metric_registry, strategy)
    if config.reporting.prometheus:
        collectors = collectors.with_prometheus_registration(prometheus_registry)

    logger.info(
        f"Created MetricsCollectors (naming={describe_strategy(strategy)}, "
        f"prometheus={config.reporting.prometheus})"
    )
    return collectors
