"""
Binding Errors - Exception Taxonomy.

Every error raised here is a configuration or programming error detected
while wiring a collector interface. None of them is transient, so none of
them is ever retried.

Raised at:
    - Declaration reading: InvalidCollectorInterface
    - Classification: AmbiguousMetricKind, UndeterminedMetricKind
    - Validation: ShapeViolation
    - Generation: NoMatchingPrimitive (should be unreachable after validation)
    - Registry lookup: CollectorTypeConflict, CollectorInterfaceMismatch,
      NoCollectorRegistered, CollectorInstantiationError
    - Runtime helper: TimedCallFailed
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Tuple

if TYPE_CHECKING:
    from metricbuddy.domain.entities import MetricKind


def type_name(value: Any) -> str:
    """Readable name for a class, module or arbitrary object."""
    qualname = getattr(value, "__qualname__", None)
    module = getattr(value, "__module__", None)
    if qualname and module:
        return f"{module}.{qualname}"
    return getattr(value, "__name__", None) or repr(value)


class MetricsBindingError(Exception):
    """Base class for all binding errors."""

    # Filled in when the error is the first of an aggregated validation report
    violations: Tuple["MetricsBindingError", ...] = ()


class InvalidCollectorInterface(MetricsBindingError, TypeError):
    """Raised when a collector type cannot be read as an interface."""
    pass


class OperationError(MetricsBindingError):
    """An error tied to one operation of a collector interface."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(f"{operation}: {message}")


class AmbiguousMetricKind(OperationError):
    """Raised when an operation carries more than one metric-kind marker."""

    def __init__(self, operation: str, kinds: Tuple["MetricKind", ...]) -> None:
        self.kinds = kinds
        names = ", ".join(k.value for k in kinds)
        super().__init__(operation, f"multiple metric markers ({names})")


class UndeterminedMetricKind(OperationError):
    """Raised when no marker, return type or interface default gives a kind."""

    def __init__(self, operation: str, interface: str) -> None:
        self.interface = interface
        super().__init__(
            operation,
            f"no metric marker, return type is not Timer and {interface} "
            f"declares no default metric",
        )


class ShapeViolation(OperationError):
    """Raised when an operation's parameters or return type do not fit its kind."""

    def __init__(self, operation: str, kind: "MetricKind", reason: str) -> None:
        self.kind = kind
        self.reason = reason
        super().__init__(operation, f"{kind.value.lower()} operation {reason}")


class NoMatchingPrimitive(OperationError):
    """Raised when no base primitive accepts the operation's arity."""

    def __init__(self, operation: str, kind: "MetricKind", arity: int) -> None:
        self.kind = kind
        self.arity = arity
        super().__init__(
            operation,
            f"no {kind.value.lower()} primitive taking {arity} argument(s)",
        )


class CollectorTypeConflict(MetricsBindingError):
    """Raised when a cached collector is bound to another source type."""

    def __init__(self, collector: Any, bound_to: Any, requested: Any) -> None:
        self.bound_to = bound_to
        self.requested = requested
        super().__init__(
            f"Metrics collector {type_name(type(collector))} already registered "
            f"as metering for {type_name(bound_to)}, cannot use it again for "
            f"{type_name(requested)}"
        )


class CollectorInterfaceMismatch(MetricsBindingError):
    """Raised when a source type already has a collector of another interface."""

    def __init__(self, source_type: Any, existing: Any, requested: Any) -> None:
        self.source_type = source_type
        self.existing = existing
        self.requested = requested
        super().__init__(
            f"Metrics collector for {type_name(source_type)} already registered "
            f"as {type_name(existing)}, could not register new: {type_name(requested)}"
        )


class NoCollectorRegistered(MetricsBindingError, LookupError):
    """Raised by lookup-only access when the source type has no collector."""

    def __init__(self, source_type: Any) -> None:
        self.source_type = source_type
        super().__init__(f"No metrics collector registered for {type_name(source_type)}")


class CollectorInstantiationError(MetricsBindingError):
    """Raised when a collector class fails to construct."""

    def __init__(self, collector_class: Any, cause: Optional[BaseException] = None) -> None:
        self.collector_class = collector_class
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Unable to instantiate {type_name(collector_class)}{detail}")


class TimedCallFailed(MetricsBindingError):
    """Raised by MetricsSupport.time() when the timed callable fails."""

    def __init__(self, name: str, cause: BaseException) -> None:
        self.name = name
        super().__init__(f"Timing of '{name}' failed: {cause}")
