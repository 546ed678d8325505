"""
Unit Tests for the Metric-Kind Classifier.

Test Aspects Covered:
    ✅ Business Logic: marker, Timer return, interface default
    ✅ Error Handling: ambiguous and undetermined kinds
"""

from __future__ import annotations

from typing import Optional, Tuple

import pytest

from metricbuddy.binding.classifier import classify
from metricbuddy.domain.entities import MetricKind, OperationDeclaration, Timer
from metricbuddy.domain.errors import AmbiguousMetricKind, UndeterminedMetricKind


def declaration(
    markers: Tuple[MetricKind, ...] = (),
    return_type: Optional[type] = None,
) -> OperationDeclaration:
    return OperationDeclaration(name="op", markers=markers, return_type=return_type)


class TestClassify:
    """Test cases for classify()."""

    def test_single_marker_decides(self) -> None:
        """
        SCENARIO: Operation marked as meter, interface default counter
        EXPECTED: METER
        """
        kind = classify(declaration(markers=(MetricKind.METER,)), MetricKind.COUNTER)

        assert kind is MetricKind.METER

    def test_marker_wins_over_timer_return(self) -> None:
        kind = classify(
            declaration(markers=(MetricKind.COUNTER,), return_type=Timer),
            None,
        )

        assert kind is MetricKind.COUNTER

    def test_repeated_same_marker_is_not_ambiguous(self) -> None:
        kind = classify(declaration(markers=(MetricKind.COUNTER, MetricKind.COUNTER)), None)

        assert kind is MetricKind.COUNTER

    def test_timer_return_implies_timer(self) -> None:
        """
        SCENARIO: Unmarked operation returning Timer, default counter
        EXPECTED: TIMER, the default does not apply
        """
        kind = classify(declaration(return_type=Timer), MetricKind.COUNTER)

        assert kind is MetricKind.TIMER

    def test_interface_default_applies(self) -> None:
        kind = classify(declaration(), MetricKind.HISTOGRAM)

        assert kind is MetricKind.HISTOGRAM

    def test_multiple_markers_ambiguous(self) -> None:
        """
        SCENARIO: Operation marked counter and meter
        EXPECTED: AmbiguousMetricKind naming both kinds
        """
        with pytest.raises(AmbiguousMetricKind, match="COUNTER, METER") as exc_info:
            classify(
                declaration(markers=(MetricKind.COUNTER, MetricKind.METER)),
                MetricKind.COUNTER,
                "app.Metrics",
            )

        assert exc_info.value.operation == "app.Metrics.op"
        assert exc_info.value.kinds == (MetricKind.COUNTER, MetricKind.METER)

    def test_no_marker_no_default_undetermined(self) -> None:
        """
        SCENARIO: Unmarked void operation on an interface without default
        EXPECTED: UndeterminedMetricKind
        """
        with pytest.raises(UndeterminedMetricKind, match="declares no default metric"):
            classify(declaration(), None, "app.Metrics")
