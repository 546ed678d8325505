"""
Declaration Markers - Decorators for Collector Interfaces.

Usage:
    @default_metric(MetricKind.COUNTER)
    class OrderMetrics(Protocol):
        def order_placed(self) -> None: ...

        @histogram
        def basket_size(self, items: int) -> None: ...

        @metric_name("checkout")
        def checkout_time(self) -> Timer: ...

Markers only annotate functions and classes; nothing is checked until the
interface is bound.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Tuple, TypeVar

from metricbuddy.domain.entities import MetricKind

METRIC_KINDS_ATTR = "__metric_kinds__"
METRIC_NAME_ATTR = "__metric_name__"
DEFAULT_METRIC_ATTR = "__default_metric__"

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=type)


def metric(kind: MetricKind) -> Callable[[F], F]:
    """
    Mark an operation with a metric kind.

    Stacked markers accumulate; more than one distinct kind on an
    operation is rejected when the interface is bound.
    """
    if not isinstance(kind, MetricKind):
        raise TypeError(f"Expected a MetricKind, got {kind!r}")

    def decorate(func: F) -> F:
        if not callable(func):
            raise TypeError(f"Metric markers apply to functions, got {func!r}")
        setattr(func, METRIC_KINDS_ATTR, markers_of(func) + (kind,))
        return func

    return decorate


counter = metric(MetricKind.COUNTER)
histogram = metric(MetricKind.HISTOGRAM)
meter = metric(MetricKind.METER)
timed = metric(MetricKind.TIMER)


def metric_name(name: str) -> Callable[[F], F]:
    """Override the backend metric name of an operation."""
    if not isinstance(name, str) or not name:
        raise ValueError(f"Metric name must be a non-empty string, got {name!r}")

    def decorate(func: F) -> F:
        setattr(func, METRIC_NAME_ATTR, name)
        return func

    return decorate


def default_metric(kind: MetricKind) -> Callable[[C], C]:
    """Set the kind used by unmarked, non-timer operations of an interface."""
    if not isinstance(kind, MetricKind):
        raise TypeError(f"Expected a MetricKind, got {kind!r}")

    def decorate(cls: C) -> C:
        if not isinstance(cls, type):
            raise TypeError(f"default_metric applies to classes, got {cls!r}")
        setattr(cls, DEFAULT_METRIC_ATTR, kind)
        return cls

    return decorate


def markers_of(func: Any) -> Tuple[MetricKind, ...]:
    return tuple(getattr(func, METRIC_KINDS_ATTR, ()))


def name_override_of(func: Any) -> Optional[str]:
    return getattr(func, METRIC_NAME_ATTR, None)


def default_metric_of(cls: Any) -> Optional[MetricKind]:
    return getattr(cls, DEFAULT_METRIC_ATTR, None)
