"""
Unit Tests for the Binding Generator.

Tests:
    - Dispatch tables: names, primitives, arities
    - Generated classes: bases, forwarding, signatures
    - Rejected interfaces generate nothing
"""

from __future__ import annotations

import inspect
from typing import Protocol

import pytest

from metricbuddy.adapters.metric_registry import MetricRegistry
from metricbuddy.binding.declarations import read_interface
from metricbuddy.binding.generator import PRIMITIVE_OVERLOADS, compile_bindings, generate
from metricbuddy.binding.markers import counter
from metricbuddy.binding.naming import NameResolver, SnakeCaseNamer
from metricbuddy.binding.support import MetricsSupport
from metricbuddy.domain.entities import MetricKind
from metricbuddy.domain.errors import NoMatchingPrimitive, ShapeViolation

from tests.fixtures.interfaces import (
    BadTimerReturnsNone,
    Service,
    ServiceMetrics,
)


class TestCompileBindings:
    """Tests for dispatch table compilation."""

    def test_bindings_for_service_metrics(self) -> None:
        """
        SCENARIO: ServiceMetrics with snake-case naming
        EXPECTED: One binding per operation, names resolved, primitives chosen
        """
        interface = read_interface(ServiceMetrics)
        kinds = {op.name: MetricKind.COUNTER for op in interface.operations}
        kinds.update(
            test_meter=MetricKind.METER,
            test_meters=MetricKind.METER,
            test_length=MetricKind.HISTOGRAM,
            test_size=MetricKind.HISTOGRAM,
            test_timer=MetricKind.TIMER,
        )

        # Act
        bindings = compile_bindings(interface, kinds, NameResolver(SnakeCaseNamer()))

        # Assert
        assert bindings["test_run"].metric_name == "test-run"
        assert bindings["test_run"].primitive == "inc"
        assert bindings["test_steps"].arity == 1
        assert bindings["test_steps"].parameter_name == "steps"
        assert bindings["test_bogus"].metric_name == "baloney"
        assert bindings["test_size"].metric_name == "bigness"
        assert bindings["test_length"].primitive == "update"
        assert bindings["test_meters"].primitive == "meter"
        assert bindings["test_timer"].primitive == "timer"

    def test_missing_primitive(self) -> None:
        """
        SCENARIO: Kind/arity pair without a primitive (bypassing validation)
        EXPECTED: NoMatchingPrimitive
        """
        class Metrics(Protocol):
            def op(self) -> None: ...

        interface = read_interface(Metrics)

        with pytest.raises(NoMatchingPrimitive, match="no histogram primitive taking 0"):
            compile_bindings(interface, {"op": MetricKind.HISTOGRAM}, NameResolver())

    def test_every_overload_is_a_primitive(self) -> None:
        for overloads in PRIMITIVE_OVERLOADS.values():
            for primitive in overloads.values():
                assert callable(getattr(MetricsSupport, primitive))


class TestGenerate:
    """Tests for generated collector classes."""

    def test_generated_class_implements_interface(self) -> None:
        collector_class = generate(ServiceMetrics)

        assert issubclass(collector_class, MetricsSupport)
        assert ServiceMetrics in collector_class.__mro__
        assert collector_class.__name__ == "ServiceMetricsMetrics"
        assert collector_class.__metric_interface__ is ServiceMetrics

    def test_dispatch_table_is_read_only(self) -> None:
        collector_class = generate(ServiceMetrics)

        with pytest.raises(TypeError):
            collector_class.__metric_bindings__["test_run"] = None  # type: ignore[index]

    def test_generated_methods_keep_declared_signature(self) -> None:
        collector_class = generate(ServiceMetrics)

        signature = inspect.signature(collector_class.test_steps)

        assert list(signature.parameters) == ["self", "steps"]
        assert collector_class.test_steps.__name__ == "test_steps"

    def test_operations_forward_to_primitives(self) -> None:
        """
        SCENARIO: Generated collector bound to a registry, every operation called
        EXPECTED: Metrics recorded under the source type and resolved names
        """
        # Arrange
        registry = MetricRegistry()
        collector = generate(ServiceMetrics, SnakeCaseNamer())()
        collector._manage(registry, Service)

        # Act
        collector.test_run()
        collector.test_steps(4)
        collector.test_steps(steps=6)
        collector.test_length(7)
        collector.test_meters(3)
        timer = collector.test_timer()
        timer.stop()

        # Assert
        base = MetricRegistry.name(Service)
        assert registry.counter(f"{base}.test-run").count == 1
        assert registry.counter(f"{base}.test-steps").count == 10
        assert registry.histogram(f"{base}.test-length").count == 1
        assert registry.meter(f"{base}.test-meters").count == 3
        assert registry.timer(f"{base}.test-timer").count == 1

    def test_void_operations_return_none(self) -> None:
        collector = generate(ServiceMetrics)()
        collector._manage(MetricRegistry(), Service)

        assert collector.test_run() is None
        assert collector.test_length(1) is None

    def test_wrong_argument_count(self) -> None:
        collector = generate(ServiceMetrics)()
        collector._manage(MetricRegistry(), Service)

        with pytest.raises(TypeError, match="exactly one argument 'steps'"):
            collector.test_steps(1, 2)
        with pytest.raises(TypeError, match="exactly one argument"):
            collector.test_steps(count=1)

    def test_identity_naming_by_default(self) -> None:
        collector_class = generate(ServiceMetrics)

        assert collector_class.__metric_bindings__["test_run"].metric_name == "test_run"

    def test_rejected_interface_raises(self) -> None:
        with pytest.raises(ShapeViolation, match="should return Timer"):
            generate(BadTimerReturnsNone)

    def test_parameter_default_rejected_before_generation(self) -> None:
        """
        SCENARIO: Counter declared as steps(n: int = 1)
        EXPECTED: ShapeViolation at generation, not a TypeError on steps()
        """
        class Metrics(Protocol):
            @counter
            def steps(self, n: int = 1) -> None: ...

        with pytest.raises(ShapeViolation, match="should not declare parameter defaults"):
            generate(Metrics)

    def test_each_call_generates_a_new_class(self) -> None:
        class Metrics(Protocol):
            @counter
            def op(self) -> None: ...

        assert generate(Metrics) is not generate(Metrics)
