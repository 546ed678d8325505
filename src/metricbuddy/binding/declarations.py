"""
Interface Reader - Collector Classes to Operation Declarations.

An operation is any public plain function defined on the interface class
or one of its interface bases. typing.Protocol, typing.Generic and object
contribute nothing. The most derived definition of a name wins.
"""

from __future__ import annotations

import inspect
import typing
from typing import Any, Dict, List, Protocol

from metricbuddy.binding.markers import default_metric_of, markers_of, name_override_of
from metricbuddy.domain.entities import CollectorInterface, OperationDeclaration
from metricbuddy.domain.errors import InvalidCollectorInterface, type_name

_SKIPPED_BASES = (object, Protocol, typing.Generic)


def read_interface(interface: Any) -> CollectorInterface:
    """
    Read the operations declared by a collector interface.

    Args:
        interface: The interface class

    Returns:
        CollectorInterface with operations in declaration order

    Raises:
        InvalidCollectorInterface: If interface is not a class, or an
            operation's signature or annotations cannot be read
    """
    if not inspect.isclass(interface):
        raise InvalidCollectorInterface(
            f"Collector interface must be a class, got: {interface!r}"
        )

    operations: List[OperationDeclaration] = []
    seen = set()
    for klass in interface.__mro__:
        if klass in _SKIPPED_BASES:
            continue
        for attr, value in vars(klass).items():
            if attr.startswith("_") or attr in seen:
                continue
            seen.add(attr)
            if inspect.isfunction(value):
                operations.append(_read_operation(interface, attr, value))

    return CollectorInterface(
        interface=interface,
        operations=tuple(operations),
        default_kind=default_metric_of(interface),
    )


def _read_operation(interface: type, name: str, func: Any) -> OperationDeclaration:
    label = f"{type_name(interface)}.{name}"
    try:
        hints: Dict[str, Any] = typing.get_type_hints(func)
    except Exception as e:
        raise InvalidCollectorInterface(
            f"Cannot resolve annotations of {label}: {e}"
        ) from e

    parameters = list(inspect.signature(func).parameters.values())
    if not parameters or parameters[0].kind not in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        raise InvalidCollectorInterface(f"{label} must be an instance method")
    declared = parameters[1:]

    return OperationDeclaration(
        name=name,
        parameter_names=tuple(p.name for p in declared),
        parameter_types=tuple(hints.get(p.name, inspect.Parameter.empty) for p in declared),
        parameter_kinds=tuple(p.kind.name for p in declared),
        defaulted_parameters=tuple(
            p.name for p in declared if p.default is not inspect.Parameter.empty
        ),
        return_type=hints.get("return"),
        markers=markers_of(func),
        name_override=name_override_of(func),
    )
