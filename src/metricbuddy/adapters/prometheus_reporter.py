"""
Prometheus Reporter - Exposes a MetricRegistry to prometheus_client.

The reporter is a custom collector: on every scrape it reads the current
state of the registry and yields metric families.

Mapping:
    - Counter   -> counter family  (<name>_total)
    - Meter     -> counter family  (<name>_total) + gauge (<name>_mean_rate)
    - Histogram -> summary family  (<name>_count, <name>_sum)
    - Timer     -> summary family  (<name>_seconds_count, <name>_seconds_sum)
"""

from __future__ import annotations

import logging
import re
from threading import Lock
from typing import Iterator, List, Optional

from prometheus_client import REGISTRY, CollectorRegistry
from prometheus_client.core import (
    CounterMetricFamily,
    GaugeMetricFamily,
    Metric,
    SummaryMetricFamily,
)

from metricbuddy.adapters.metric_registry import MetricRegistry

logger = logging.getLogger(__name__)

_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_:]")


def prometheus_name(name: str) -> str:
    """Map a dotted/dashed metric name onto the Prometheus name charset."""
    sanitized = _INVALID_CHARS.sub("_", name)
    if not sanitized or sanitized[0].isdigit():
        sanitized = f"_{sanitized}"
    return sanitized


class PrometheusReporter:
    """Custom prometheus_client collector reading a MetricRegistry."""

    def __init__(self, metric_registry: MetricRegistry) -> None:
        self._metric_registry = metric_registry
        self._registered_with: Optional[CollectorRegistry] = None
        self._lock = Lock()

    @property
    def started(self) -> bool:
        return self._registered_with is not None

    def start(self, registry: Optional[CollectorRegistry] = None) -> None:
        """
        Register with a Prometheus registry. Calling start twice is a no-op.

        Args:
            registry: Target registry (prometheus_client.REGISTRY by default)
        """
        with self._lock:
            if self._registered_with is not None:
                return
            target = registry if registry is not None else REGISTRY
            target.register(self)
            self._registered_with = target
            logger.info("Prometheus reporting started")

    def stop(self) -> None:
        """Unregister from the Prometheus registry, if registered."""
        with self._lock:
            if self._registered_with is None:
                return
            self._registered_with.unregister(self)
            self._registered_with = None
            logger.info("Prometheus reporting stopped")

    def describe(self) -> List[Metric]:
        # Names are dynamic; skip the registry's duplicate-name check.
        return []

    def collect(self) -> Iterator[Metric]:
        registry = self._metric_registry

        for name, counter in registry.get_counters().items():
            family = CounterMetricFamily(prometheus_name(name), f"Counter {name}")
            family.add_metric([], counter.count)
            yield family

        for name, meter in registry.get_meters().items():
            base = prometheus_name(name)
            family = CounterMetricFamily(base, f"Meter {name}")
            family.add_metric([], meter.count)
            yield family
            rate = GaugeMetricFamily(f"{base}_mean_rate", f"Mean rate of {name} per second")
            rate.add_metric([], meter.mean_rate)
            yield rate

        for name, histogram in registry.get_histograms().items():
            family = SummaryMetricFamily(prometheus_name(name), f"Histogram {name}")
            family.add_metric([], count_value=histogram.count, sum_value=histogram.sum)
            yield family

        for name, timer in registry.get_timers().items():
            family = SummaryMetricFamily(
                f"{prometheus_name(name)}_seconds", f"Timer {name}"
            )
            family.add_metric([], count_value=timer.count, sum_value=timer.sum)
            yield family
