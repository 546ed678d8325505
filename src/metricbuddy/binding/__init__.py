"""
Binding Engine - Collector Interfaces to Live Implementations.

Components (leaves first):
    - markers: Decorators declaring metric kinds, names and defaults
    - declarations: Reads operations from an interface class
    - classifier: Determines the metric kind of an operation
    - validator: Checks operation shapes, aggregates problems
    - naming: Naming strategies and the name resolver
    - support: MetricsSupport, base class holding the primitives
    - generator: Compiles dispatch tables and collector classes
"""

from metricbuddy.binding.classifier import classify
from metricbuddy.binding.declarations import read_interface
from metricbuddy.binding.generator import PRIMITIVE_OVERLOADS, build_class, compile_bindings, generate
from metricbuddy.binding.markers import (
    counter,
    default_metric,
    histogram,
    meter,
    metric,
    metric_name,
    timed,
)
from metricbuddy.binding.naming import (
    IdentityNamer,
    MetricNameStrategy,
    NameResolver,
    PathNamer,
    SeparatorNamer,
    SnakeCaseNamer,
    naming_strategy_for,
)
from metricbuddy.binding.support import MetricsSupport
from metricbuddy.binding.validator import ValidationReport, validate, vet

__all__ = [
    "classify",
    "read_interface",
    "PRIMITIVE_OVERLOADS",
    "build_class",
    "compile_bindings",
    "generate",
    "counter",
    "default_metric",
    "histogram",
    "meter",
    "metric",
    "metric_name",
    "timed",
    "IdentityNamer",
    "MetricNameStrategy",
    "NameResolver",
    "PathNamer",
    "SeparatorNamer",
    "SnakeCaseNamer",
    "naming_strategy_for",
    "MetricsSupport",
    "ValidationReport",
    "validate",
    "vet",
]
