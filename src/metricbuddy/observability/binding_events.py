"""
Binding Event Log - Structured Events of the Binding Engine.

Records what the collector registry does:
    - class_generated: a collector class was built for an interface
    - collector_created: a collector instance was bound to a source type
    - binding_failed: generation or instantiation raised

Events go to structlog and into a bounded in-memory history. Listeners
are called synchronously on the emitting thread; their exceptions
propagate to the caller.
"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Deque, Dict, List, Optional

import structlog

from metricbuddy.domain.errors import type_name

CLASS_GENERATED = "class_generated"
COLLECTOR_CREATED = "collector_created"
BINDING_FAILED = "binding_failed"

EventListener = Callable[["BindingEvent"], None]


@dataclass(frozen=True)
class BindingEvent:
    """A single binding event."""

    type: str
    subject: str
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type,
            "subject": self.subject,
            "timestamp": self.timestamp.isoformat(),
            **self.details,
        }


class BindingEventLog:
    """Thread-safe event history with listener hooks."""

    def __init__(self, max_events: int = 1000, logger_name: str = "metricbuddy") -> None:
        """
        Initialize event log.

        Args:
            max_events: Number of events kept in history
            logger_name: structlog logger name
        """
        self._events: Deque[BindingEvent] = deque(maxlen=max_events)
        self._listeners: List[EventListener] = []
        self._lock = threading.Lock()
        self._logger = structlog.get_logger(logger_name)

    def add_listener(self, listener: EventListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: EventListener) -> bool:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)
                return True
            return False

    def class_generated(self, interface: Any, collector_class: type, naming: str) -> BindingEvent:
        bindings = getattr(collector_class, "__metric_bindings__", {})
        return self._emit(
            CLASS_GENERATED,
            type_name(interface),
            collector_class=type_name(collector_class),
            naming=naming,
            operations=len(bindings),
        )

    def collector_created(self, source_type: Any, collector: Any) -> BindingEvent:
        return self._emit(
            COLLECTOR_CREATED,
            type_name(source_type),
            collector_class=type_name(type(collector)),
        )

    def binding_failed(self, subject: Any, error: BaseException) -> BindingEvent:
        return self._emit(
            BINDING_FAILED,
            type_name(subject),
            error_type=type(error).__name__,
            error=str(error),
        )

    def events(self, event_type: Optional[str] = None) -> List[BindingEvent]:
        """Get recorded events, optionally of one type, oldest first."""
        with self._lock:
            return [e for e in self._events if event_type is None or e.type == event_type]

    def count(self, event_type: Optional[str] = None) -> int:
        return len(self.events(event_type))

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def _emit(self, event_type: str, subject: str, **details: Any) -> BindingEvent:
        event = BindingEvent(type=event_type, subject=subject, details=details)
        with self._lock:
            self._events.append(event)
            listeners = list(self._listeners)

        if event_type == BINDING_FAILED:
            self._logger.warning(event_type, subject=subject, **details)
        else:
            self._logger.info(event_type, subject=subject, **details)

        for listener in listeners:
            listener(event)
        return event
