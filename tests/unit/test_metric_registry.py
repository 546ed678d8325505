"""
Unit Tests for the In-Memory MetricRegistry.

Tests:
    - Get-or-create per kind, kind clashes
    - Counter, histogram, meter and timer semantics
    - Naming helper, views and dump
    - Thread safety
"""

from __future__ import annotations

import threading

import pytest

from metricbuddy.adapters.metric_registry import MetricRegistry, Snapshot, TimerContext
from metricbuddy.domain.entities import Timer as TimerHandle

from tests.fixtures.interfaces import Service


class TestMetricNames:
    """Tests for MetricRegistry.name()."""

    def test_class_source(self) -> None:
        assert MetricRegistry.name(Service, "calls") == "tests.fixtures.interfaces.Service.calls"

    def test_module_source(self) -> None:
        assert MetricRegistry.name(threading, "calls") == "threading.calls"

    def test_string_source_and_empty_parts(self) -> None:
        assert MetricRegistry.name("app", None, "calls", "") == "app.calls"


class TestGetOrCreate:
    """Metrics are created once per name."""

    def test_same_metric_returned(self) -> None:
        registry = MetricRegistry()

        assert registry.counter("a") is registry.counter("a")
        assert len(registry) == 1

    def test_kind_clash(self) -> None:
        registry = MetricRegistry()
        registry.counter("a")

        with pytest.raises(ValueError, match="already registered as a counter"):
            registry.histogram("a")

    def test_invalid_reservoir(self) -> None:
        with pytest.raises(ValueError, match="reservoir_size"):
            MetricRegistry(reservoir_size=0)


class TestMetricKinds:
    """Semantics of each metric kind."""

    def test_counter(self) -> None:
        counter = MetricRegistry().counter("c")

        counter.inc()
        counter.inc(4)
        counter.dec(2)

        assert counter.count == 3

    def test_histogram_snapshot(self) -> None:
        """
        SCENARIO: Histogram updated with 2 and 10
        EXPECTED: count 2, mean 6.0, min 2, max 10
        """
        histogram = MetricRegistry().histogram("h")

        histogram.update(2)
        histogram.update(10)
        snapshot = histogram.snapshot()

        assert snapshot.count == 2
        assert snapshot.mean == 6.0
        assert snapshot.min == 2.0
        assert snapshot.max == 10.0
        assert snapshot.stddev == 4.0
        assert histogram.sum == 12

    def test_histogram_reservoir_keeps_newest(self) -> None:
        histogram = MetricRegistry(reservoir_size=3).histogram("h")

        for value in range(1, 6):
            histogram.update(value)

        snapshot = histogram.snapshot()
        assert snapshot.count == 5
        assert snapshot.values == (3, 4, 5)
        assert histogram.sum == 15

    def test_empty_snapshot(self) -> None:
        assert Snapshot.of(0, []) == Snapshot(0, 0.0, 0.0, 0.0, 0.0, ())

    def test_meter_rate(self, clock) -> None:
        meter = MetricRegistry(clock=clock).meter("m")

        meter.mark()
        meter.mark(3)
        clock.advance(2.0)

        assert meter.count == 4
        assert meter.mean_rate == pytest.approx(2.0)

    def test_meter_rate_without_events(self, clock) -> None:
        assert MetricRegistry(clock=clock).meter("m").mean_rate == 0.0

    def test_timer_context(self, clock) -> None:
        """
        SCENARIO: Timer started, clock advanced 0.25s, stopped twice
        EXPECTED: One recorded duration of 0.25s
        """
        timer = MetricRegistry(clock=clock).timer("t")

        context = timer.time()
        clock.advance(0.25)
        elapsed = context.stop()
        clock.advance(1.0)

        assert isinstance(context, TimerHandle)
        assert elapsed == pytest.approx(0.25)
        assert context.stop() == elapsed
        assert timer.count == 1
        assert timer.snapshot().mean == pytest.approx(0.25)

    def test_timer_as_context_manager(self, clock) -> None:
        timer = MetricRegistry(clock=clock).timer("t")

        with timer.time():
            clock.advance(0.5)

        assert timer.sum == pytest.approx(0.5)

    def test_timer_done(self) -> None:
        timer = MetricRegistry().timer("t")

        context: TimerContext = timer.time()
        context.done()

        assert timer.count == 1

    def test_timer_rejects_negative(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            MetricRegistry().timer("t").update(-1.0)


class TestViews:
    """Views over the registry."""

    def test_views_by_kind(self) -> None:
        registry = MetricRegistry()
        registry.counter("b")
        registry.counter("a")
        registry.histogram("h")
        registry.meter("m")
        registry.timer("t")

        assert list(registry.get_counters()) == ["a", "b"]
        assert list(registry.get_histograms()) == ["h"]
        assert list(registry.get_meters()) == ["m"]
        assert list(registry.get_timers()) == ["t"]
        assert registry.names() == ["a", "b", "h", "m", "t"]

    def test_remove_and_clear(self) -> None:
        registry = MetricRegistry()
        registry.counter("a")
        registry.counter("b")

        assert registry.remove("a") is True
        assert registry.remove("a") is False
        registry.clear()
        assert len(registry) == 0

    def test_dump(self) -> None:
        registry = MetricRegistry()
        registry.counter("c").inc(2)
        registry.histogram("h").update(5)

        summary = registry.dump()

        assert summary["c"] == {"type": "counter", "count": 2}
        assert summary["h"]["type"] == "histogram"
        assert summary["h"]["mean"] == 5.0


class TestThreadSafety:

    def test_concurrent_increments(self) -> None:
        registry = MetricRegistry()

        def worker() -> None:
            for _ in range(1000):
                registry.counter("shared").inc()

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert registry.counter("shared").count == 8000
