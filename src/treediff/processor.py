"""Operation sinks that receive diff events in emission order.

``EventRecorder`` keeps the events verbatim. ``DiffProcessor`` turns them into an
RFC 6902 patch, factoring plain removal/addition pairs into ``move`` operations
and additions of a value that is unchanged elsewhere into ``copy`` operations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol

from .pointer import Pointer
from .types import (
    ArrayElementRemoved,
    ArrayElementReplaced,
    DiffEvent,
    ValueAdded,
    ValueRemoved,
    ValueReplaced,
)
from .values import equivalent

logger = logging.getLogger(__name__)


class OperationSink(Protocol):
    def value_added(self, path: Pointer, value: Any) -> None: ...

    def value_removed(self, path: Pointer, value: Any) -> None: ...

    def value_replaced(self, path: Pointer, old_value: Any, new_value: Any) -> None: ...

    def array_element_removed(self, path: Pointer, value: Any) -> None: ...

    def array_element_replaced(self, path: Pointer, context: Any, new_value: Any) -> None: ...

    def finalize(self) -> Any: ...


class EventRecorder:
    """Sink that records every event as emitted."""

    def __init__(self, unchanged: Optional[Mapping[Pointer, Any]] = None):
        self.unchanged = dict(unchanged or {})
        self.events: List[DiffEvent] = []

    def value_added(self, path: Pointer, value: Any) -> None:
        self.events.append(ValueAdded(path, value))

    def value_removed(self, path: Pointer, value: Any) -> None:
        self.events.append(ValueRemoved(path, value))

    def value_replaced(self, path: Pointer, old_value: Any, new_value: Any) -> None:
        self.events.append(ValueReplaced(path, old_value, new_value))

    def array_element_removed(self, path: Pointer, value: Any) -> None:
        self.events.append(ArrayElementRemoved(path, value))

    def array_element_replaced(self, path: Pointer, context: Any, new_value: Any) -> None:
        self.events.append(ArrayElementReplaced(path, context, new_value))

    def finalize(self) -> List[DiffEvent]:
        return list(self.events)


@dataclass
class _PatchOperation:
    op: str
    path: Pointer
    value: Any = None
    from_path: Optional[Pointer] = None
    # only plain removals may later become the source of a move
    movable: bool = False

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"op": self.op}
        if self.from_path is not None:
            payload["from"] = self.from_path.path
        payload["path"] = self.path.path
        if self.op in {"add", "replace"}:
            payload["value"] = self.value
        return payload


class DiffProcessor:
    """Sink building an RFC 6902 patch with move/copy factoring."""

    def __init__(self, unchanged: Optional[Mapping[Pointer, Any]] = None, factor_moves: bool = True):
        self.unchanged = dict(unchanged or {})
        self.factor_moves = factor_moves
        self._operations: List[_PatchOperation] = []

    def value_added(self, path: Pointer, value: Any) -> None:
        if self.factor_moves:
            removal_index = self._find_previously_removed(value)
            if removal_index is not None:
                removed = self._operations.pop(removal_index)
                logger.debug("Factoring removal at %s and addition at %s into a move", removed.path, path)
                self._operations.append(_PatchOperation("move", path, value, from_path=removed.path))
                return

            source = self._find_unchanged_value(value)
            if source is not None:
                self._operations.append(_PatchOperation("copy", path, value, from_path=source))
                return

        self._operations.append(_PatchOperation("add", path, value))

    def value_removed(self, path: Pointer, value: Any) -> None:
        self._operations.append(_PatchOperation("remove", path, value, movable=True))

    def value_replaced(self, path: Pointer, old_value: Any, new_value: Any) -> None:
        self._operations.append(_PatchOperation("replace", path, new_value))

    def array_element_removed(self, path: Pointer, value: Any) -> None:
        self._operations.append(_PatchOperation("remove", path, value))

    def array_element_replaced(self, path: Pointer, context: Any, new_value: Any) -> None:
        self._operations.append(_PatchOperation("replace", path, new_value))

    def finalize(self) -> List[Dict[str, Any]]:
        return [operation.as_dict() for operation in self._operations]

    def _find_previously_removed(self, value: Any) -> Optional[int]:
        for index, operation in enumerate(self._operations):
            if operation.movable and equivalent(value, operation.value):
                return index
        return None

    def _find_unchanged_value(self, value: Any) -> Optional[Pointer]:
        for pointer in sorted(self.unchanged):
            if equivalent(value, self.unchanged[pointer]):
                return pointer
        return None
