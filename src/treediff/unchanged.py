"""Locations whose subtree is identical in both documents.

The map feeds move/copy factoring: a value added at one location can be copied
from a location where it is known to be unchanged.
"""

from __future__ import annotations

from typing import Any, Dict

from .pointer import Pointer
from .values import NodeType, equivalent, node_type


def compute_unchanged(source: Any, target: Any) -> Dict[Pointer, Any]:
    """Return every maximal location where *source* and *target* are equivalent."""
    unchanged: Dict[Pointer, Any] = {}
    _compute(unchanged, Pointer.root(), source, target)
    return unchanged


def _compute(unchanged: Dict[Pointer, Any], pointer: Pointer, first: Any, second: Any) -> None:
    if equivalent(first, second):
        unchanged[pointer] = second
        return

    first_type = node_type(first)
    if first_type is not node_type(second):
        return

    if first_type is NodeType.OBJECT:
        for name in first:
            if name in second:
                _compute(unchanged, pointer.append(name), first[name], second[name])
    elif first_type is NodeType.ARRAY:
        for index in range(min(len(first), len(second))):
            _compute(unchanged, pointer.append(index), first[index], second[index])
