"""
Core Domain Entities.

This module defines the vocabulary of the binding engine: metric kinds,
the timer handle, declared operations, collector interfaces and the rows of
a generated dispatch table.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Tuple, runtime_checkable

from pydantic import BaseModel, Field

from metricbuddy.domain.errors import type_name


class MetricKind(str, Enum):
    """Closed set of metric kinds an operation can be bound to."""

    COUNTER = "COUNTER"
    HISTOGRAM = "HISTOGRAM"
    METER = "METER"
    TIMER = "TIMER"


@runtime_checkable
class Timer(Protocol):
    """
    Handle for a running timer.

    Operations returning this type are bound as timers. Calling stop()
    records the elapsed time with the backend and returns it in seconds.
    """

    def stop(self) -> float:
        """Stop the timer and return elapsed seconds."""
        ...

    def done(self) -> None:
        """Stop the timer, discarding the elapsed value."""
        ...


def is_timer_type(annotation: Any) -> bool:
    """Check whether a return annotation is the Timer handle type."""
    return Timer in getattr(annotation, "__mro__", ())


class KindShape(BaseModel):
    """Parameter and return contract of one metric kind."""

    primitive: str
    arities: Tuple[int, ...]
    returns_timer: bool = False

    model_config = {"frozen": True}


# Counter and meter accept an optional delta, histogram a required value,
# timer nothing.
KIND_SHAPES: Dict[MetricKind, KindShape] = {
    MetricKind.COUNTER: KindShape(primitive="inc", arities=(0, 1)),
    MetricKind.HISTOGRAM: KindShape(primitive="update", arities=(1,)),
    MetricKind.METER: KindShape(primitive="meter", arities=(0, 1)),
    MetricKind.TIMER: KindShape(primitive="timer", arities=(0,), returns_timer=True),
}


class OperationDeclaration(BaseModel):
    """One operation read from a collector interface."""

    name: str = Field(..., description="Attribute name on the interface")
    parameter_names: Tuple[str, ...] = Field(default_factory=tuple)
    parameter_types: Tuple[Any, ...] = Field(
        default_factory=tuple, description="Resolved annotations, or Parameter.empty"
    )
    parameter_kinds: Tuple[str, ...] = Field(
        default_factory=tuple, description="inspect.Parameter kind names"
    )
    defaulted_parameters: Tuple[str, ...] = Field(
        default_factory=tuple, description="Names of parameters declaring a default"
    )
    return_type: Any = Field(default=None, description="None means no return value")
    markers: Tuple[MetricKind, ...] = Field(default_factory=tuple)
    name_override: Optional[str] = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def arity(self) -> int:
        return len(self.parameter_names)

    @property
    def returns_void(self) -> bool:
        return self.return_type is None or self.return_type is type(None)


class CollectorInterface(BaseModel):
    """A collector interface: its class, operations and default kind."""

    interface: Any
    operations: Tuple[OperationDeclaration, ...] = Field(default_factory=tuple)
    default_kind: Optional[MetricKind] = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def name(self) -> str:
        return getattr(self.interface, "__qualname__", repr(self.interface))

    def operation(self, name: str) -> Optional[OperationDeclaration]:
        """Get a declared operation by name."""
        for operation in self.operations:
            if operation.name == name:
                return operation
        return None


class Binding(BaseModel):
    """One row of a dispatch table: operation to backend primitive."""

    operation: str
    kind: MetricKind
    metric_name: str
    primitive: str
    arity: int = Field(ge=0, le=1)
    parameter_name: Optional[str] = None

    model_config = {"frozen": True}


class CollectorInfo(BaseModel):
    """Metadata about a registered collector instance."""

    source_type: Any
    collector_class: Any
    created_at: datetime = Field(default_factory=datetime.now)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        bindings = getattr(self.collector_class, "__metric_bindings__", {})
        return {
            "source_type": type_name(self.source_type),
            "collector_class": type_name(self.collector_class),
            "created_at": self.created_at.isoformat(),
            "metrics": sorted(b.metric_name for b in bindings.values()),
        }
