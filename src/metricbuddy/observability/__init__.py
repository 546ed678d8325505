"""
Observability - Structured Events of the Binding Engine.
"""

from metricbuddy.observability.binding_events import (
    BINDING_FAILED,
    CLASS_GENERATED,
    COLLECTOR_CREATED,
    BindingEvent,
    BindingEventLog,
)

__all__ = [
    "BINDING_FAILED",
    "CLASS_GENERATED",
    "COLLECTOR_CREATED",
    "BindingEvent",
    "BindingEventLog",
]
