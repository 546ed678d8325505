"""
Adapters Layer - Backend and Reporting Implementations.

Adapters:
    - MetricRegistry: In-memory, thread-safe metric backend
    - PrometheusReporter: Exposes a MetricRegistry to prometheus_client
"""

from metricbuddy.adapters.metric_registry import (
    Counter,
    Histogram,
    Meter,
    MetricRegistry,
    Snapshot,
    Timer,
    TimerContext,
)
from metricbuddy.adapters.prometheus_reporter import PrometheusReporter, prometheus_name

__all__ = [
    "Counter",
    "Histogram",
    "Meter",
    "MetricRegistry",
    "Snapshot",
    "Timer",
    "TimerContext",
    "PrometheusReporter",
    "prometheus_name",
]
