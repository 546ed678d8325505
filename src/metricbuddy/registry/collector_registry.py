"""
Collector Registry - One Collector per Source Type.

This module memoizes two things:
    - collector classes, keyed by (collector type, naming strategy)
    - collector instances, keyed by source type

Usage:
    registry = CollectorRegistry(MetricRegistry())
    collector = registry.get_or_create(Service, ServiceMetrics)
    collector.requests()

    # Later, lookup only
    same = registry.get_existing(Service)
"""

from __future__ import annotations

import inspect
import logging
from threading import RLock
from typing import Any, Dict, Hashable, Optional, Tuple, Type

from metricbuddy.adapters.metric_registry import MetricRegistry
from metricbuddy.binding.generator import generate
from metricbuddy.binding.naming import MetricNameStrategy, describe_strategy
from metricbuddy.binding.support import MetricsSupport
from metricbuddy.domain.entities import CollectorInfo
from metricbuddy.domain.errors import (
    CollectorInstantiationError,
    CollectorInterfaceMismatch,
    CollectorTypeConflict,
    InvalidCollectorInterface,
    MetricsBindingError,
    NoCollectorRegistered,
    type_name,
)
from metricbuddy.observability.binding_events import BindingEventLog
from metricbuddy.registry.keyed_cache import CacheStats, KeyedCache

logger = logging.getLogger(__name__)


class CollectorRegistry:
    """
    Thread-safe registry of collector classes and instances.

    Supports:
        - Generated collectors for interface classes
        - Hand-written MetricsSupport subclasses, used as-is
        - Exactly-once class generation and instantiation per key
    """

    def __init__(
        self,
        metric_registry: MetricRegistry,
        events: Optional[BindingEventLog] = None,
    ) -> None:
        """
        Initialize empty registry.

        Args:
            metric_registry: Backend every collector is bound to
            events: Event log receiving generation and creation events
        """
        self.metric_registry = metric_registry
        self.events = events or BindingEventLog()
        self._classes: KeyedCache[Tuple[type, Hashable], Type[MetricsSupport]] = KeyedCache("classes")
        self._instances: KeyedCache[Any, MetricsSupport] = KeyedCache("collectors")
        self._info: Dict[Any, CollectorInfo] = {}
        self._lock = RLock()
        logger.debug("CollectorRegistry initialized")

    def get_or_create(
        self,
        source_type: Any,
        collector_type: type,
        naming_strategy: Optional[MetricNameStrategy] = None,
    ) -> MetricsSupport:
        """
        Get the collector of a source type, creating it on first access.

        Args:
            source_type: Class or module being instrumented
            collector_type: Interface class, or MetricsSupport subclass
            naming_strategy: Strategy for generated metric names

        Returns:
            Collector bound to source_type and implementing collector_type

        Raises:
            InvalidCollectorInterface: collector_type is not a class
            MetricsBindingError: Generation failed (see binding errors)
            CollectorInstantiationError: Collector class failed to construct
            CollectorTypeConflict: Cached collector bound to another type
            CollectorInterfaceMismatch: Cached collector has another interface
        """
        if not inspect.isclass(collector_type):
            raise InvalidCollectorInterface(
                f"Collector type must be a class, got: {collector_type!r}"
            )

        collector = self._instances.get_or_build(
            source_type,
            lambda: self._new_collector(source_type, collector_type, naming_strategy),
        )
        return self._validated(collector, source_type, collector_type)

    def get_existing(self, source_type: Any) -> MetricsSupport:
        """
        Get the collector already registered for a source type.

        Raises:
            NoCollectorRegistered: If none was created yet
        """
        collector = self._instances.get(source_type)
        if collector is None:
            raise NoCollectorRegistered(source_type)
        return collector

    def collector_class(
        self,
        collector_type: type,
        naming_strategy: Optional[MetricNameStrategy] = None,
    ) -> Type[MetricsSupport]:
        """Get the (memoized) collector class of an interface."""
        if inspect.isclass(collector_type) and issubclass(collector_type, MetricsSupport):
            return collector_type
        return self._classes.get_or_build(
            (collector_type, naming_strategy),
            lambda: self._generate(collector_type, naming_strategy),
        )

    @property
    def registered_count(self) -> int:
        """Number of source types with a collector."""
        return len(self._instances)

    @property
    def generated_count(self) -> int:
        """Number of generated collector classes."""
        return len(self._classes)

    def list_all(self) -> Dict[Any, CollectorInfo]:
        """List all registered collectors by source type."""
        with self._lock:
            return dict(self._info)

    def cache_stats(self) -> Dict[str, CacheStats]:
        return {
            "classes": self._classes.get_stats(),
            "collectors": self._instances.get_stats(),
        }

    def _generate(
        self,
        collector_type: type,
        naming_strategy: Optional[MetricNameStrategy],
    ) -> Type[MetricsSupport]:
        try:
            collector_class = generate(collector_type, naming_strategy)
        except MetricsBindingError as e:
            logger.warning(f"Cannot generate collector for {type_name(collector_type)}: {e}")
            self.events.binding_failed(collector_type, e)
            raise
        self.events.class_generated(
            collector_type, collector_class, describe_strategy(naming_strategy)
        )
        return collector_class

    def _new_collector(
        self,
        source_type: Any,
        collector_type: type,
        naming_strategy: Optional[MetricNameStrategy],
    ) -> MetricsSupport:
        collector_class = self.collector_class(collector_type, naming_strategy)
        try:
            collector = collector_class()
        except Exception as e:
            logger.error(f"Cannot instantiate {type_name(collector_class)}: {e}")
            self.events.binding_failed(collector_class, e)
            raise CollectorInstantiationError(collector_class, e) from e

        collector._manage(self.metric_registry, source_type)
        # Listener errors fail the build, so record info only once they ran
        self.events.collector_created(source_type, collector)
        with self._lock:
            self._info[source_type] = CollectorInfo(
                source_type=source_type,
                collector_class=collector_class,
            )
        logger.info(f"Registered collector {type_name(collector_class)} for {type_name(source_type)}")
        return collector

    def _validated(
        self,
        collector: MetricsSupport,
        source_type: Any,
        collector_type: type,
    ) -> MetricsSupport:
        if collector.source_type is not source_type:
            raise CollectorTypeConflict(collector, collector.source_type, source_type)
        if collector_type not in type(collector).__mro__:
            logger.warning(
                f"Collector for {type_name(source_type)} is a "
                f"{type_name(type(collector))}, not a {type_name(collector_type)}"
            )
            raise CollectorInterfaceMismatch(source_type, type(collector), collector_type)
        return collector
