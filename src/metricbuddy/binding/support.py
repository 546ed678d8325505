"""
Metrics Support - Base Class of Every Collector.

Generated collectors subclass MetricsSupport and forward each declared
operation to one of its primitives. Hand-written collectors may subclass it
directly and call the primitives themselves.

Primitives:
    - inc(name, n=1) / dec(name, n=1): counter
    - update(name, value): histogram
    - meter(name, n=1): meter
    - timer(name) -> Timer: timer
    - time(name, fn): run fn under a timer

Every name is prefixed with the source type the collector is bound to.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, TypeVar

from metricbuddy.adapters.metric_registry import MetricRegistry
from metricbuddy.domain.entities import Binding, Timer
from metricbuddy.domain.errors import MetricsBindingError, TimedCallFailed, type_name

T = TypeVar("T")


class MetricsSupport:
    """Holds the backend registry and source type; implements the primitives."""

    # Dispatch table of generated subclasses, keyed by operation name
    __metric_bindings__: Mapping[str, Binding] = {}

    def __init__(self) -> None:
        self._metric_registry: Optional[MetricRegistry] = None
        self._source_type: Any = None

    def _manage(self, metric_registry: MetricRegistry, source_type: Any) -> None:
        """Bind to a backend registry and the source type being instrumented."""
        self._metric_registry = metric_registry
        self._source_type = source_type

    @property
    def metric_registry(self) -> Optional[MetricRegistry]:
        return self._metric_registry

    @property
    def source_type(self) -> Any:
        return self._source_type

    def _full_name(self, name: str) -> str:
        return MetricRegistry.name(self._source_type, name)

    def _registry(self) -> MetricRegistry:
        if self._metric_registry is None:
            raise MetricsBindingError(
                f"{type_name(type(self))} is not bound to a metric registry"
            )
        return self._metric_registry

    def inc(self, name: str, n: int = 1) -> None:
        self._registry().counter(self._full_name(name)).inc(n)

    def dec(self, name: str, n: int = 1) -> None:
        self._registry().counter(self._full_name(name)).dec(n)

    def update(self, name: str, value: int) -> None:
        self._registry().histogram(self._full_name(name)).update(value)

    def meter(self, name: str, n: int = 1) -> None:
        self._registry().meter(self._full_name(name)).mark(n)

    def timer(self, name: str) -> Timer:
        return self._registry().timer(self._full_name(name)).time()

    def time(self, name: str, fn: Callable[[], T]) -> T:
        """
        Run fn and record its duration under the named timer.

        Raises:
            TimedCallFailed: If fn raises; the duration is still recorded
        """
        handle = self.timer(name)
        try:
            return fn()
        except Exception as e:
            raise TimedCallFailed(name, e) from e
        finally:
            handle.stop()

    def __repr__(self) -> str:
        return f"<{type(self).__qualname__} for {type_name(self._source_type)}>"
