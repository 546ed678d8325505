"""
Metric Naming - Strategies and Name Resolution.

A naming strategy maps an operation name to a backend metric name. The
resolver applies, in order: the operation's explicit override, the
configured strategy, the raw operation name.

Strategies:
    - IdentityNamer: name unchanged
    - SeparatorNamer: word boundaries (camelCase humps, underscores) become
      a separator, e.g. "testRun" / "test_run" -> "test-run"
    - SnakeCaseNamer: SeparatorNamer("-")
    - PathNamer: SeparatorNamer("."), e.g. "test_run" -> "test.run"
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable

from metricbuddy.domain.entities import OperationDeclaration


@runtime_checkable
class MetricNameStrategy(Protocol):
    """Pure mapping from operation name to metric name."""

    def metric_name(self, name: str) -> str:
        ...


class IdentityNamer:
    """Returns operation names unchanged."""

    def metric_name(self, name: str) -> str:
        return name

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SeparatorNamer:
    """Splits names at upper-case letters and underscores, joining with a separator."""

    def __init__(self, separator: str) -> None:
        if not isinstance(separator, str) or len(separator) != 1:
            raise ValueError(f"Separator must be a single character, got {separator!r}")
        self.separator = separator
        self._cache: Dict[str, str] = {}

    def metric_name(self, name: str) -> str:
        cached = self._cache.get(name)
        if cached is None:
            cached = self._cache.setdefault(name, self._cased_name(name))
        return cached

    def _cased_name(self, name: str) -> str:
        parts = []
        for c in name:
            if c.isupper():
                parts.append(self.separator)
                parts.append(c.lower())
            elif c == "_":
                parts.append(self.separator)
            else:
                parts.append(c)
        return "".join(parts)

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.separator == other.separator  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.separator))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.separator!r})"


class SnakeCaseNamer(SeparatorNamer):
    """Dash-separated lower-case names: "testRun" -> "test-run"."""

    def __init__(self) -> None:
        super().__init__("-")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PathNamer(SeparatorNamer):
    """Dot-separated lower-case names: "testRun" -> "test.run"."""

    def __init__(self) -> None:
        super().__init__(".")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NameResolver:
    """Resolves the backend metric name of a declared operation."""

    def __init__(self, strategy: Optional[MetricNameStrategy] = None) -> None:
        self.strategy = strategy

    def resolve(self, operation: OperationDeclaration) -> str:
        if operation.name_override is not None:
            return operation.name_override
        if self.strategy is not None:
            return self.strategy.metric_name(operation.name)
        return operation.name


def naming_strategy_for(
    strategy: str,
    separator: Optional[str] = None,
) -> Optional[MetricNameStrategy]:
    """
    Build a naming strategy from its configuration name.

    Args:
        strategy: "identity", "snake" or "path"
        separator: Optional separator replacing the snake/path default

    Returns:
        Strategy instance, or None for identity

    Raises:
        ValueError: If the strategy name is unknown
    """
    if strategy == "identity":
        return None
    if strategy in ("snake", "path"):
        if separator:
            return SeparatorNamer(separator)
        return SnakeCaseNamer() if strategy == "snake" else PathNamer()
    raise ValueError(f"Unknown naming strategy: {strategy!r}")


def describe_strategy(strategy: Any) -> str:
    return "identity" if strategy is None else repr(strategy)
