"""
Binding Generator - Interface to Dispatch Table to Collector Class.

For an interface, the generator:
    1. reads its operations (declarations.read_interface)
    2. classifies and validates them (validator.vet), failing as a whole
    3. compiles a dispatch table: operation -> Binding(metric name,
       primitive, arity)
    4. assembles a subclass of MetricsSupport and the interface whose
       methods forward (metric name, *args) to the bound primitive

Generated methods contain no logic beyond name and argument forwarding.
No source code is synthesized; methods are closures over their Binding.
"""

from __future__ import annotations

import functools
import inspect
import logging
import types
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type

from metricbuddy.binding.declarations import read_interface
from metricbuddy.binding.naming import MetricNameStrategy, NameResolver
from metricbuddy.binding.support import MetricsSupport
from metricbuddy.binding.validator import vet
from metricbuddy.domain.entities import Binding, CollectorInterface, MetricKind
from metricbuddy.domain.errors import NoMatchingPrimitive, type_name

logger = logging.getLogger(__name__)

# Base primitive per kind and arity
PRIMITIVE_OVERLOADS: Dict[MetricKind, Dict[int, str]] = {
    MetricKind.COUNTER: {0: "inc", 1: "inc"},
    MetricKind.HISTOGRAM: {1: "update"},
    MetricKind.METER: {0: "meter", 1: "meter"},
    MetricKind.TIMER: {0: "timer"},
}


def generate(
    interface_type: type,
    naming_strategy: Optional[MetricNameStrategy] = None,
) -> Type[MetricsSupport]:
    """
    Generate the collector class implementing an interface.

    Args:
        interface_type: Collector interface class
        naming_strategy: Strategy for operations without a name override

    Returns:
        Subclass of MetricsSupport and interface_type

    Raises:
        InvalidCollectorInterface: Interface cannot be read
        AmbiguousMetricKind, UndeterminedMetricKind, ShapeViolation:
            First problem found; all problems in ``error.violations``
        NoMatchingPrimitive: No primitive for an operation's arity
    """
    interface = read_interface(interface_type)
    report = vet(interface)
    report.raise_for_violations()

    bindings = compile_bindings(interface, report.kinds, NameResolver(naming_strategy))
    collector_class = build_class(interface_type, bindings)
    logger.debug(
        f"Generated {collector_class.__qualname__} for {type_name(interface_type)} "
        f"with {len(bindings)} operations"
    )
    return collector_class


def compile_bindings(
    interface: CollectorInterface,
    kinds: Mapping[str, MetricKind],
    resolver: NameResolver,
) -> Dict[str, Binding]:
    """Build the dispatch table of an already validated interface."""
    bindings: Dict[str, Binding] = {}
    for operation in interface.operations:
        kind = kinds[operation.name]
        primitive = PRIMITIVE_OVERLOADS.get(kind, {}).get(operation.arity)
        if primitive is None or not callable(getattr(MetricsSupport, primitive, None)):
            raise NoMatchingPrimitive(
                f"{type_name(interface.interface)}.{operation.name}", kind, operation.arity
            )
        bindings[operation.name] = Binding(
            operation=operation.name,
            kind=kind,
            metric_name=resolver.resolve(operation),
            primitive=primitive,
            arity=operation.arity,
            parameter_name=operation.parameter_names[0] if operation.arity else None,
        )
    return bindings


def build_class(interface_type: type, bindings: Mapping[str, Binding]) -> Type[MetricsSupport]:
    """Assemble a collector class answering each operation from its Binding."""
    namespace: Dict[str, Any] = {
        "__metric_bindings__": MappingProxyType(dict(bindings)),
        "__metric_interface__": interface_type,
        "__module__": interface_type.__module__,
        "__doc__": f"Generated metrics collector for {type_name(interface_type)}.",
    }
    for name, binding in bindings.items():
        method = _operation_method(binding)
        declared = inspect.getattr_static(interface_type, name, None)
        if declared is not None:
            functools.update_wrapper(method, declared)
        namespace[name] = method

    class_name = f"{interface_type.__name__}Metrics"
    bases: Tuple[type, ...] = (MetricsSupport, interface_type)
    return types.new_class(class_name, bases, exec_body=lambda ns: ns.update(namespace))


def _operation_method(binding: Binding) -> Callable[..., Any]:
    primitive = getattr(MetricsSupport, binding.primitive)
    metric_name = binding.metric_name

    if binding.arity == 0:
        def operation(self: MetricsSupport) -> Any:
            return primitive(self, metric_name)
    else:
        def operation(self: MetricsSupport, *args: Any, **kwargs: Any) -> Any:
            return primitive(self, metric_name, _single_argument(binding, args, kwargs))

    return operation


def _single_argument(binding: Binding, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Any:
    if len(args) == 1 and not kwargs:
        return args[0]
    if not args and len(kwargs) == 1 and binding.parameter_name in kwargs:
        return kwargs[binding.parameter_name]
    raise TypeError(
        f"{binding.operation}() takes exactly one argument "
        f"'{binding.parameter_name}' ({len(args) + len(kwargs)} given)"
    )
