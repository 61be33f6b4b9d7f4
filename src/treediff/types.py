"""Typed diff events emitted by the engines.

Events are immutable and ordered by emission. They are not yet a patch:
factoring removals/additions into moves and copies is the sink's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union

from .pointer import Pointer


@dataclass(frozen=True)
class ValueAdded:
    path: Pointer
    value: Any

    op = "add"

    def as_dict(self) -> Dict[str, Any]:
        return {"op": self.op, "path": self.path.path, "value": self.value}


@dataclass(frozen=True)
class ValueRemoved:
    path: Pointer
    value: Any

    op = "remove"

    def as_dict(self) -> Dict[str, Any]:
        return {"op": self.op, "path": self.path.path, "value": self.value}


@dataclass(frozen=True)
class ValueReplaced:
    path: Pointer
    old_value: Any
    new_value: Any

    op = "replace"

    def as_dict(self) -> Dict[str, Any]:
        return {"op": self.op, "path": self.path.path, "old_value": self.old_value, "value": self.new_value}


@dataclass(frozen=True)
class ArrayElementRemoved:
    """Removal originating inside an array; never factored into a move."""

    path: Pointer
    value: Any

    op = "array_remove"

    def as_dict(self) -> Dict[str, Any]:
        return {"op": self.op, "path": self.path.path, "value": self.value}


@dataclass(frozen=True)
class ArrayElementReplaced:
    """Field-level replacement scoped to a key-matched array element.

    ``context`` is the whole source element the field belongs to.
    """

    path: Pointer
    context: Any
    value: Any

    op = "array_replace"

    def as_dict(self) -> Dict[str, Any]:
        return {"op": self.op, "path": self.path.path, "context": self.context, "value": self.value}


DiffEvent = Union[ValueAdded, ValueRemoved, ValueReplaced, ArrayElementRemoved, ArrayElementReplaced]
