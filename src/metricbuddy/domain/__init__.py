"""
Domain Layer - Metric Kinds, Declarations and Errors.

Entities:
    - MetricKind: Counter, Histogram, Meter, Timer
    - Timer: Handle returned by timer operations
    - OperationDeclaration: One operation read from an interface
    - CollectorInterface: An interface and its operations
    - Binding: One row of a generated dispatch table
    - CollectorInfo: Metadata about a registered collector
"""

from metricbuddy.domain.entities import (
    KIND_SHAPES,
    Binding,
    CollectorInfo,
    CollectorInterface,
    KindShape,
    MetricKind,
    OperationDeclaration,
    Timer,
    is_timer_type,
)
from metricbuddy.domain.errors import (
    AmbiguousMetricKind,
    CollectorInstantiationError,
    CollectorInterfaceMismatch,
    CollectorTypeConflict,
    InvalidCollectorInterface,
    MetricsBindingError,
    NoCollectorRegistered,
    NoMatchingPrimitive,
    OperationError,
    ShapeViolation,
    TimedCallFailed,
    UndeterminedMetricKind,
)

__all__ = [
    "KIND_SHAPES",
    "Binding",
    "CollectorInfo",
    "CollectorInterface",
    "KindShape",
    "MetricKind",
    "OperationDeclaration",
    "Timer",
    "is_timer_type",
    "AmbiguousMetricKind",
    "CollectorInstantiationError",
    "CollectorInterfaceMismatch",
    "CollectorTypeConflict",
    "InvalidCollectorInterface",
    "MetricsBindingError",
    "NoCollectorRegistered",
    "NoMatchingPrimitive",
    "OperationError",
    "ShapeViolation",
    "TimedCallFailed",
    "UndeterminedMetricKind",
]
