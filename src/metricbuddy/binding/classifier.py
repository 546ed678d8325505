"""
Metric-Kind Classifier.

Rules, in order:
    1. One marker on the operation decides its kind; several distinct
       markers are ambiguous.
    2. Unmarked operations returning Timer are timers.
    3. Anything else takes the interface default, if one is declared.
"""

from __future__ import annotations

from typing import Optional

from metricbuddy.domain.entities import MetricKind, OperationDeclaration, is_timer_type
from metricbuddy.domain.errors import AmbiguousMetricKind, UndeterminedMetricKind


def classify(
    operation: OperationDeclaration,
    interface_default: Optional[MetricKind],
    interface_name: str = "interface",
) -> MetricKind:
    """
    Determine the metric kind of a declared operation.

    Args:
        operation: Declared operation
        interface_default: Default kind declared on the interface, if any
        interface_name: Interface name used in error messages

    Returns:
        The operation's MetricKind

    Raises:
        AmbiguousMetricKind: More than one distinct marker
        UndeterminedMetricKind: No marker, no Timer return, no default
    """
    label = f"{interface_name}.{operation.name}"
    kinds = tuple(dict.fromkeys(operation.markers))
    if len(kinds) > 1:
        raise AmbiguousMetricKind(label, kinds)
    if kinds:
        return kinds[0]
    if is_timer_type(operation.return_type):
        return MetricKind.TIMER
    if interface_default is None:
        raise UndeterminedMetricKind(label, interface_name)
    return interface_default
