"""
metricbuddy - Annotation-Driven Metrics Collectors.

Declare a collector as an interface class whose operations are marked with
metric kinds, and get a live implementation bound to a metric registry.

Architecture:
    - Declarations read once per interface, never per call
    - Generated collectors are plain dispatch tables over MetricsSupport
    - One collector per instrumented source type, created exactly once
    - Configuration-driven naming and reporting via YAML

Main Components:
    - domain: Metric kinds, declarations, errors
    - binding: Markers, classification, validation, generation
    - registry: Memoized collector classes and instances
    - adapters: In-memory metric registry, Prometheus reporter
    - facade: MetricsCollectors entry point
    - config: Configuration models and loaders
    - observability: Structured binding events

Example:
    >>> from typing import Protocol
    >>> from metricbuddy import MetricsCollectors, MetricKind, Timer, default_metric
    >>> class Service:
    ...     pass
    >>> @default_metric(MetricKind.COUNTER)
    ... class ServiceMetrics(Protocol):
    ...     def requests(self) -> None: ...
    ...     def handle(self) -> Timer: ...
    >>> metrics = MetricsCollectors().metrics_collector(Service, ServiceMetrics)
    >>> metrics.requests()
"""

import logging
from typing import Union

import structlog

from metricbuddy.adapters.metric_registry import MetricRegistry
from metricbuddy.binding.markers import (
    counter,
    default_metric,
    histogram,
    meter,
    metric,
    metric_name,
    timed,
)
from metricbuddy.binding.naming import (
    IdentityNamer,
    MetricNameStrategy,
    PathNamer,
    SeparatorNamer,
    SnakeCaseNamer,
)
from metricbuddy.binding.support import MetricsSupport
from metricbuddy.config.loader import ConfigLoader, load_config
from metricbuddy.config.models import MetricsConfig
from metricbuddy.domain.entities import MetricKind, Timer
from metricbuddy.domain.errors import (
    AmbiguousMetricKind,
    CollectorInstantiationError,
    CollectorInterfaceMismatch,
    CollectorTypeConflict,
    InvalidCollectorInterface,
    MetricsBindingError,
    NoCollectorRegistered,
    NoMatchingPrimitive,
    ShapeViolation,
    TimedCallFailed,
    UndeterminedMetricKind,
)
from metricbuddy.facade.metrics_collectors import (
    MetricsCollectors,
    create_metrics_collectors,
    default_instance,
)

__version__ = "0.4.0"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    json: bool = False,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for metricbuddy.

    Module loggers go through the standard library; binding events go
    through structlog, rendered as JSON or for the console.

    Args:
        level: Logging level, as number or name (default: INFO)
        json: Render structured events as JSON
        format: Log message format for standard logging

    Example:
        >>> import metricbuddy
        >>> config = metricbuddy.load_config("metrics.yaml")
        >>> metricbuddy.configure_logging(config.logging.level, json=config.logging.json_output)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("metricbuddy").setLevel(level)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


__all__ = [
    "__version__",
    "configure_logging",
    "MetricRegistry",
    "counter",
    "default_metric",
    "histogram",
    "meter",
    "metric",
    "metric_name",
    "timed",
    "IdentityNamer",
    "MetricNameStrategy",
    "PathNamer",
    "SeparatorNamer",
    "SnakeCaseNamer",
    "MetricsSupport",
    "ConfigLoader",
    "load_config",
    "MetricsConfig",
    "MetricKind",
    "Timer",
    "AmbiguousMetricKind",
    "CollectorInstantiationError",
    "CollectorInterfaceMismatch",
    "CollectorTypeConflict",
    "InvalidCollectorInterface",
    "MetricsBindingError",
    "NoCollectorRegistered",
    "NoMatchingPrimitive",
    "ShapeViolation",
    "TimedCallFailed",
    "UndeterminedMetricKind",
    "MetricsCollectors",
    "create_metrics_collectors",
    "default_instance",
]
