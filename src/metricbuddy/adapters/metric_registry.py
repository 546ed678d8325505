"""
In-Memory Metric Registry.

A thread-safe registry of named counters, histograms, meters and timers.
Collectors address metrics by dotted names built from the source type and
the resolved metric name.

Design Notes:
    - Get-or-create per name, one metric kind per name
    - Histograms and timers keep a bounded reservoir of recent values
    - Clock is injectable for deterministic rate tests
"""

from __future__ import annotations

import inspect
import logging
import math
import time
from collections import deque
from dataclasses import dataclass
from threading import Lock, RLock
from typing import Any, Callable, Deque, Dict, Iterable, List, Optional, Tuple, Type, TypeVar

from metricbuddy.domain.entities import Timer as TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_RESERVOIR_SIZE = 1028

Clock = Callable[[], float]

M = TypeVar("M")


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time statistics over a reservoir of values."""

    count: int
    min: float
    max: float
    mean: float
    stddev: float
    values: Tuple[float, ...]

    @classmethod
    def of(cls, count: int, values: Iterable[float]) -> "Snapshot":
        data = tuple(values)
        if not data:
            return cls(count=count, min=0.0, max=0.0, mean=0.0, stddev=0.0, values=())
        mean = sum(data) / len(data)
        variance = sum((v - mean) ** 2 for v in data) / len(data)
        return cls(
            count=count,
            min=float(min(data)),
            max=float(max(data)),
            mean=mean,
            stddev=math.sqrt(variance),
            values=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "min": self.min,
            "max": self.max,
            "mean": self.mean,
            "stddev": self.stddev,
        }


class Counter:
    """Value that can be incremented and decremented."""

    def __init__(self) -> None:
        self._count = 0
        self._lock = Lock()

    def inc(self, n: int = 1) -> None:
        with self._lock:
            self._count += n

    def dec(self, n: int = 1) -> None:
        with self._lock:
            self._count -= n

    @property
    def count(self) -> int:
        with self._lock:
            return self._count


class Histogram:
    """Distribution of recorded values."""

    def __init__(self, reservoir_size: int = DEFAULT_RESERVOIR_SIZE) -> None:
        self._values: Deque[float] = deque(maxlen=reservoir_size)
        self._count = 0
        self._sum = 0.0
        self._lock = Lock()

    def update(self, value: float) -> None:
        with self._lock:
            self._values.append(value)
            self._count += 1
            self._sum += value

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    @property
    def sum(self) -> float:
        """Sum of all recorded values, including those evicted from the reservoir."""
        with self._lock:
            return self._sum

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot.of(self._count, list(self._values))


class Meter:
    """Event count with a mean rate since creation."""

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._start = clock()
        self._count = 0
        self._lock = Lock()

    def mark(self, n: int = 1) -> None:
        with self._lock:
            self._count += n

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    @property
    def mean_rate(self) -> float:
        """Events per second since the meter was created."""
        with self._lock:
            count = self._count
        if count == 0:
            return 0.0
        elapsed = self._clock() - self._start
        if elapsed <= 0:
            return float(count)
        return count / elapsed


class TimerContext(TimerHandle):
    """A running measurement of one Timer. Stops once; later stops are no-ops."""

    def __init__(self, timer: "Timer", clock: Clock) -> None:
        self._timer = timer
        self._clock = clock
        self._start = clock()
        self._elapsed: Optional[float] = None
        self._lock = Lock()

    def stop(self) -> float:
        with self._lock:
            if self._elapsed is None:
                self._elapsed = self._clock() - self._start
                self._timer.update(self._elapsed)
            return self._elapsed

    def done(self) -> None:
        self.stop()

    def __enter__(self) -> "TimerContext":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()


class Timer:
    """Histogram of durations (seconds) plus a meter of their rate."""

    def __init__(
        self,
        reservoir_size: int = DEFAULT_RESERVOIR_SIZE,
        clock: Clock = time.perf_counter,
    ) -> None:
        self._clock = clock
        self._histogram = Histogram(reservoir_size)
        self._meter = Meter(clock)

    def time(self) -> TimerContext:
        """Start a measurement."""
        return TimerContext(self, self._clock)

    def update(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError(f"Timer duration must be non-negative, got {seconds}")
        self._histogram.update(seconds)
        self._meter.mark()

    @property
    def count(self) -> int:
        return self._histogram.count

    @property
    def sum(self) -> float:
        return self._histogram.sum

    @property
    def mean_rate(self) -> float:
        return self._meter.mean_rate

    def snapshot(self) -> Snapshot:
        return self._histogram.snapshot()


class MetricRegistry:
    """
    Thread-safe registry of named metrics.

    Usage:
        registry = MetricRegistry()
        registry.counter("app.Service.requests").inc()
        registry.histogram("app.Service.payload").update(512)
        with registry.timer("app.Service.handle").time():
            ...
    """

    def __init__(
        self,
        reservoir_size: int = DEFAULT_RESERVOIR_SIZE,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Initialize the registry.

        Args:
            reservoir_size: Values kept per histogram/timer for snapshots
            clock: Seconds clock for meters and timers (monotonic by default)
        """
        if reservoir_size < 1:
            raise ValueError(f"reservoir_size must be positive, got {reservoir_size}")
        self.reservoir_size = reservoir_size
        self._clock = clock
        self._metrics: Dict[str, Any] = {}
        self._lock = RLock()

    @staticmethod
    def name(source: Any, *names: Optional[str]) -> str:
        """
        Build a dotted metric name.

        Args:
            source: Class, module or string used as the prefix
            names: Further name parts; empty parts are skipped

        Returns:
            e.g. "app.service.OrderService.orders-placed"
        """
        if isinstance(source, str):
            prefix = source
        elif inspect.ismodule(source):
            prefix = source.__name__
        else:
            prefix = f"{source.__module__}.{source.__qualname__}"
        return ".".join([prefix, *(n for n in names if n)])

    def counter(self, name: str) -> Counter:
        return self._get_or_add(name, Counter, Counter)

    def histogram(self, name: str) -> Histogram:
        return self._get_or_add(name, Histogram, lambda: Histogram(self.reservoir_size))

    def meter(self, name: str) -> Meter:
        if self._clock is None:
            return self._get_or_add(name, Meter, Meter)
        return self._get_or_add(name, Meter, lambda: Meter(self._clock))

    def timer(self, name: str) -> Timer:
        if self._clock is None:
            return self._get_or_add(name, Timer, lambda: Timer(self.reservoir_size))
        return self._get_or_add(name, Timer, lambda: Timer(self.reservoir_size, self._clock))

    def _get_or_add(self, name: str, kind: Type[M], factory: Callable[[], M]) -> M:
        with self._lock:
            existing = self._metrics.get(name)
            if existing is None:
                existing = factory()
                self._metrics[name] = existing
                logger.debug(f"Created {kind.__name__.lower()} {name}")
            elif not isinstance(existing, kind):
                raise ValueError(
                    f"{name} is already registered as a "
                    f"{type(existing).__name__.lower()}, not a {kind.__name__.lower()}"
                )
            return existing

    def get_counters(self) -> Dict[str, Counter]:
        return self._of_kind(Counter)

    def get_histograms(self) -> Dict[str, Histogram]:
        return self._of_kind(Histogram)

    def get_meters(self) -> Dict[str, Meter]:
        return self._of_kind(Meter)

    def get_timers(self) -> Dict[str, Timer]:
        return self._of_kind(Timer)

    def _of_kind(self, kind: Type[M]) -> Dict[str, M]:
        with self._lock:
            return {
                name: metric
                for name, metric in sorted(self._metrics.items())
                if isinstance(metric, kind)
            }

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._metrics)

    def remove(self, name: str) -> bool:
        """Remove a metric, returning False if it was not registered."""
        with self._lock:
            return self._metrics.pop(name, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._metrics.clear()
            logger.info("Cleared all metrics from registry")

    def dump(self) -> Dict[str, Dict[str, Any]]:
        """
        Summarize all metrics.

        Returns:
            Dict of metric name to a JSON-serializable summary
        """
        summary: Dict[str, Dict[str, Any]] = {}
        for name, c in self.get_counters().items():
            summary[name] = {"type": "counter", "count": c.count}
        for name, h in self.get_histograms().items():
            summary[name] = {"type": "histogram", **h.snapshot().to_dict()}
        for name, m in self.get_meters().items():
            summary[name] = {"type": "meter", "count": m.count, "mean_rate": m.mean_rate}
        for name, t in self.get_timers().items():
            summary[name] = {
                "type": "timer",
                **t.snapshot().to_dict(),
                "mean_rate": t.mean_rate,
            }
        return dict(sorted(summary.items()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._metrics)
