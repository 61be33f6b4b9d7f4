"""Value model for JSON-like trees.

Documents are plain Python values: ``None``, ``bool``, ``int``, ``float``,
``Decimal``, ``str``, ``list``/``tuple`` and ``dict`` with ``str`` keys.

Two comparison relations are provided:

- ``equivalent`` is numeric-aware: numbers compare by mathematical value, so
  ``1``, ``1.0`` and ``Decimal("1.00")`` are all equivalent.
- ``strictly_equal`` is representation-level: numbers must also share their
  concrete type, so ``1`` and ``1.0`` differ.

``bool`` is never treated as a number by either relation.
"""

from __future__ import annotations

import math
from decimal import Decimal
from enum import Enum
from typing import Any, Iterator, Tuple

from .errors import InvalidArgumentError

MAX_VALIDATION_DEPTH = 256


class NodeType(str, Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


_CONTAINER_TYPES = frozenset({NodeType.ARRAY, NodeType.OBJECT})


def node_type(value: Any) -> NodeType:
    """Return the JSON node type of *value*.

    Raises:
        InvalidArgumentError: if *value* is not a JSON-like value.
    """
    if value is None:
        return NodeType.NULL
    if isinstance(value, bool):
        return NodeType.BOOLEAN
    if isinstance(value, (int, float, Decimal)):
        return NodeType.NUMBER
    if isinstance(value, str):
        return NodeType.STRING
    if isinstance(value, (list, tuple)):
        return NodeType.ARRAY
    if isinstance(value, dict):
        return NodeType.OBJECT
    raise InvalidArgumentError(f"Unsupported value type: {type(value).__name__}")


def is_container(value: Any) -> bool:
    return node_type(value) in _CONTAINER_TYPES


def is_empty(value: Any) -> bool:
    """True for ``None`` and for containers without children."""
    return value is None or (is_container(value) and len(value) == 0)


def is_non_empty(value: Any) -> bool:
    """True for containers with at least one child."""
    return is_container(value) and len(value) > 0


def children(value: Any) -> Iterator[Tuple[Any, Any]]:
    """Yield ``(token, child)`` pairs: indexes for arrays, sorted names for objects."""
    kind = node_type(value)
    if kind is NodeType.ARRAY:
        yield from enumerate(value)
    elif kind is NodeType.OBJECT:
        for name in sorted(value):
            yield name, value[name]


def equivalent(first: Any, second: Any) -> bool:
    """Numeric-aware structural equivalence."""
    first_type = node_type(first)
    if first_type is not node_type(second):
        return False

    if first_type is NodeType.ARRAY:
        if len(first) != len(second):
            return False
        return all(equivalent(a, b) for a, b in zip(first, second))

    if first_type is NodeType.OBJECT:
        if first.keys() != second.keys():
            return False
        return all(equivalent(first[name], second[name]) for name in first)

    # int, float and Decimal compare exactly by mathematical value
    return first == second


def strictly_equal(first: Any, second: Any) -> bool:
    """Representation-level equality: numbers must also share their concrete type."""
    first_type = node_type(first)
    if first_type is not node_type(second):
        return False

    if first_type is NodeType.ARRAY:
        if len(first) != len(second):
            return False
        return all(strictly_equal(a, b) for a, b in zip(first, second))

    if first_type is NodeType.OBJECT:
        if first.keys() != second.keys():
            return False
        return all(strictly_equal(first[name], second[name]) for name in first)

    if first_type is NodeType.NUMBER and type(first) is not type(second):
        return False
    return first == second


def validate_document(value: Any, name: str = "document") -> Any:
    """Check that *value* is a well-formed JSON-like tree.

    ``None`` is JSON null and is accepted. Nesting is capped at
    ``MAX_VALIDATION_DEPTH`` on purpose: the engines recurse several frames per
    level, and the cap keeps a deep document from hitting the interpreter's
    recursion limit halfway through a walk.

    Raises:
        InvalidArgumentError: on unsupported types, non-string object keys,
            non-finite numbers or nesting beyond ``MAX_VALIDATION_DEPTH``.
    """

    def _check(node: Any, path: str, depth: int) -> None:
        if depth > MAX_VALIDATION_DEPTH:
            raise InvalidArgumentError(f"{name} exceeds maximum nesting depth at {path or '/'}")
        try:
            kind = node_type(node)
        except InvalidArgumentError as exc:
            raise InvalidArgumentError(f"{name} contains {exc.explanation.lower()} at {path or '/'}") from exc

        if kind is NodeType.NUMBER:
            if isinstance(node, Decimal):
                finite = node.is_finite()
            elif isinstance(node, float):
                finite = math.isfinite(node)
            else:
                finite = True
            if not finite:
                raise InvalidArgumentError(f"{name} contains a non-finite number at {path or '/'}")
        elif kind is NodeType.ARRAY:
            for index, child in enumerate(node):
                _check(child, f"{path}/{index}", depth + 1)
        elif kind is NodeType.OBJECT:
            for key, child in node.items():
                if not isinstance(key, str):
                    raise InvalidArgumentError(
                        f"{name} has a non-string object key {key!r} at {path or '/'}"
                    )
                _check(child, f"{path}/{key}", depth + 1)

    _check(value, "", 0)
    return value


def json_default(value: Any) -> Any:
    """``json.dumps`` hook writing ``Decimal`` values back as numbers."""
    if isinstance(value, Decimal):
        if value.as_tuple().exponent >= 0:
            return int(value)
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
