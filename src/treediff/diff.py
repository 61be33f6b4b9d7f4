"""Structural diff of JSON-like trees.

Diff semantics:
- Equivalent values (numeric-aware) produce no event.
- A node type change produces one replace event at that location.
- Differing scalars of the same type produce one replace event.
- Objects emit all removals, then all additions, then the results of recursing
  into common fields; each group is walked in sorted field order.
- Arrays are compared by position. Surplus source elements are removed at the
  shrinking boundary index, surplus target elements are appended at ``-``.

The removal-before-addition order is what lets a sink factor pairs into moves.
When a key-field table is supplied the key-aware engine in ``treediff.keyed`` is
used instead.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from typing import Any, Callable, Dict, List, Optional

from .errors import InvalidArgumentError
from .keyed import generate_keyed_diffs
from .pointer import END_OF_ARRAY, Pointer
from .processor import DiffProcessor, EventRecorder, OperationSink
from .schema import KeyFieldsInput, parse_key_fields
from .types import DiffEvent
from .unchanged import compute_unchanged
from .values import NodeType, equivalent, is_container, json_default, node_type, validate_document

logger = logging.getLogger(__name__)

SinkFactory = Callable[[Dict[Pointer, Any]], OperationSink]

_MISSING = object()


def diff(
    source: Any = _MISSING,
    target: Any = _MISSING,
    key_fields: Optional[KeyFieldsInput] = None,
    *,
    sink_factory: SinkFactory = EventRecorder,
) -> Any:
    """Diff *source* against *target* and return ``sink.finalize()``.

    Without *key_fields* the structural engine runs. Any mapping, even an empty
    one, selects the key-aware engine. All inputs are validated before the sink
    is created, so a failing call never produces partial output.

    Raises:
        InvalidArgumentError: if a document is missing or not JSON-like.
        MalformedLocationError: if the key-field table is malformed.
    """
    if source is _MISSING or target is _MISSING:
        raise InvalidArgumentError("Both source and target documents are required")
    validate_document(source, "source")
    validate_document(target, "target")
    table = parse_key_fields(key_fields) if key_fields is not None else None

    unchanged = compute_unchanged(source, target)
    sink = sink_factory(unchanged)
    logger.debug(
        "Diffing documents (%s engine, %d unchanged locations)",
        "structural" if table is None else "key-aware",
        len(unchanged),
    )

    if table is None:
        generate_diffs(sink, Pointer.root(), source, target)
    else:
        generate_keyed_diffs(sink, Pointer.root(), source, target, table)
    return sink.finalize()


def as_json_patch(
    source: Any = _MISSING,
    target: Any = _MISSING,
    key_fields: Optional[KeyFieldsInput] = None,
    factor_moves: bool = True,
) -> List[Dict[str, Any]]:
    """Diff two documents into an RFC 6902 operation list."""
    return diff(
        source,
        target,
        key_fields,
        sink_factory=lambda unchanged: DiffProcessor(unchanged, factor_moves=factor_moves),
    )


def generate_diffs(sink: OperationSink, pointer: Pointer, source: Any, target: Any) -> None:
    if equivalent(source, target):
        return

    source_type = node_type(source)
    if source_type is not node_type(target):
        sink.value_replaced(pointer, source, target)
        return

    if not is_container(source):
        sink.value_replaced(pointer, source, target)
        return

    if source_type is NodeType.OBJECT:
        _generate_object_diffs(sink, pointer, source, target)
    else:
        _generate_array_diffs(sink, pointer, source, target)


def _generate_object_diffs(sink: OperationSink, pointer: Pointer, source: dict, target: dict) -> None:
    source_fields = set(source)
    target_fields = set(target)

    for name in sorted(source_fields - target_fields):
        sink.value_removed(pointer.append(name), source[name])

    for name in sorted(target_fields - source_fields):
        sink.value_added(pointer.append(name), target[name])

    for name in sorted(source_fields & target_fields):
        generate_diffs(sink, pointer.append(name), source[name], target[name])


def _generate_array_diffs(sink: OperationSink, pointer: Pointer, source: list, target: list) -> None:
    size = min(len(source), len(target))

    # each removal shifts the tail left, so every one happens at the boundary
    for index in range(size, len(source)):
        sink.value_removed(pointer.append(size), source[index])

    for index in range(size):
        generate_diffs(sink, pointer.append(index), source[index], target[index])

    for index in range(size, len(target)):
        sink.value_added(pointer.append(END_OF_ARRAY), target[index])


def summarize_events(events: List[DiffEvent]) -> str:
    """Produce a deterministic short summary of events."""
    if not events:
        return "No differences."

    counters = Counter(event.op for event in events)
    counters_text = ", ".join(f"{name}={count}" for name, count in sorted(counters.items()))
    top_paths = ", ".join(event.path.path or "(root)" for event in events[:3])
    return f"Detected {len(events)} difference(s): {counters_text}. First paths: {top_paths}."


def _render(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=json_default, ensure_ascii=False)


def format_human_diff(events: List[DiffEvent]) -> str:
    """Render a concise human-readable diff from events."""
    if not events:
        return "No differences."

    lines = []
    for event in events:
        path = event.path.path or "(root)"
        if event.op == "add":
            lines.append(f"+ {path}: {_render(event.value)}")
        elif event.op in {"remove", "array_remove"}:
            lines.append(f"- {path}: {_render(event.value)}")
        elif event.op == "replace":
            lines.append(f"~ {path}: {_render(event.old_value)} -> {_render(event.new_value)}")
        elif event.op == "array_replace":
            previous = event.context.get(event.path.parts[-1], _MISSING) if isinstance(event.context, dict) else _MISSING
            if previous is _MISSING:
                lines.append(f"+ {path}: {_render(event.value)}")
            else:
                lines.append(f"~ {path}: {_render(previous)} -> {_render(event.value)}")
        else:
            lines.append(f"? {path}: {_render(event.as_dict())}")
    return "\n".join(lines)
