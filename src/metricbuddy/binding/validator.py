"""
Shape Validator - Parameter and Return Contracts per Metric Kind.

    | Kind      | Return | Parameters               |
    |-----------|--------|--------------------------|
    | COUNTER   | None   | none, or one int         |
    | HISTOGRAM | None   | exactly one int          |
    | METER     | None   | none, or one int         |
    | TIMER     | Timer  | none                     |

Parameters must be positional and must not declare defaults.

Design Notes:
    - Runs once, when an interface is first bound, never per call
    - Collects every problem of the interface into a ValidationReport
    - The first problem is raised, with the full list attached as
      ``error.violations``; nothing is generated for a failing interface
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from metricbuddy.binding.classifier import classify
from metricbuddy.domain.entities import (
    KIND_SHAPES,
    CollectorInterface,
    MetricKind,
    OperationDeclaration,
    is_timer_type,
)
from metricbuddy.domain.errors import MetricsBindingError, ShapeViolation, type_name

logger = logging.getLogger(__name__)

_POSITIONAL = ("POSITIONAL_ONLY", "POSITIONAL_OR_KEYWORD")


def validate(
    operation: OperationDeclaration,
    kind: MetricKind,
    interface_name: str = "interface",
) -> Optional[ShapeViolation]:
    """
    Check an operation against the shape of its metric kind.

    Args:
        operation: Declared operation
        kind: Kind the operation was classified as
        interface_name: Interface name used in error messages

    Returns:
        ShapeViolation describing the first problem, or None if valid
    """
    reason = _validate_return(operation, kind) or _validate_parameters(operation, kind)
    if reason is None:
        return None
    return ShapeViolation(f"{interface_name}.{operation.name}", kind, reason)


def _validate_return(operation: OperationDeclaration, kind: MetricKind) -> Optional[str]:
    if KIND_SHAPES[kind].returns_timer:
        if not is_timer_type(operation.return_type):
            return f"should return Timer, not {_describe(operation.return_type)}"
        return None
    if not operation.returns_void:
        return f"should return None, not {_describe(operation.return_type)}"
    return None


def _validate_parameters(operation: OperationDeclaration, kind: MetricKind) -> Optional[str]:
    non_positional = [
        name
        for name, param_kind in zip(operation.parameter_names, operation.parameter_kinds)
        if param_kind not in _POSITIONAL
    ]
    if non_positional:
        return f"should take positional parameters only, got {', '.join(non_positional)}"
    if operation.defaulted_parameters:
        return f"should not declare parameter defaults, got {', '.join(operation.defaulted_parameters)}"

    arities = KIND_SHAPES[kind].arities
    if operation.arity not in arities:
        return f"should take {_describe_arities(arities)}, got {operation.arity}"

    for name, annotation in zip(operation.parameter_names, operation.parameter_types):
        if not _is_numeric(annotation):
            return f"parameter '{name}' should be int, not {_describe(annotation)}"
    return None


def _is_numeric(annotation: Any) -> bool:
    # bool is an int subclass but never a metric value
    return annotation is int


def _describe_arities(arities: Any) -> str:
    if tuple(arities) == (0,):
        return "no parameters"
    if tuple(arities) == (1,):
        return "exactly one int parameter"
    return "no parameters or one int parameter"


def _describe(annotation: Any) -> str:
    if annotation is inspect.Parameter.empty:
        return "unannotated"
    if annotation is None or annotation is type(None):
        return "None"
    if isinstance(annotation, type):
        return annotation.__qualname__
    return repr(annotation)


@dataclass
class ValidationReport:
    """Outcome of classifying and validating every operation of an interface."""

    interface: CollectorInterface
    kinds: Dict[str, MetricKind] = field(default_factory=dict)
    violations: List[MetricsBindingError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    def raise_for_violations(self) -> None:
        """
        Raise the first problem found, if any.

        Raises:
            MetricsBindingError: First violation, carrying all of them
                in its ``violations`` attribute
        """
        if self.ok:
            return
        first = self.violations[0]
        first.violations = tuple(self.violations)
        raise first


def vet(interface: CollectorInterface) -> ValidationReport:
    """
    Classify and validate all operations of an interface.

    Args:
        interface: Interface read by read_interface()

    Returns:
        ValidationReport with the kind of every valid operation and all
        classification and shape problems
    """
    name = type_name(interface.interface)
    report = ValidationReport(interface=interface)

    for operation in interface.operations:
        try:
            kind = classify(operation, interface.default_kind, name)
        except MetricsBindingError as e:
            report.violations.append(e)
            continue
        violation = validate(operation, kind, name)
        if violation is not None:
            report.violations.append(violation)
        else:
            report.kinds[operation.name] = kind

    if report.ok:
        logger.debug(f"Validated {name}: {len(report.kinds)} operations")
    else:
        logger.warning(
            f"Collector interface {name} rejected: "
            + "; ".join(str(v) for v in report.violations)
        )
    return report
