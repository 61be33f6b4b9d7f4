"""Key-aware diff: reconcile array elements by identity instead of position.

A key-field table maps array pointers to the name of a field identifying each
element. Matched elements are compared field by field and reported as
``array_element_replaced`` events scoped to the element, instead of a removal
plus an addition of the whole element. Arrays without a configured key fall
back to whole-value matching.

Null and empty containers are interchangeable here: a transition between them
emits nothing, and filling or emptying one emits per-element events.
"""

from __future__ import annotations

import logging
from typing import Any, List

from .pointer import END_OF_ARRAY, Pointer
from .processor import OperationSink
from .schema import KeyFieldTable
from .values import (
    NodeType,
    children,
    equivalent,
    is_container,
    is_empty,
    is_non_empty,
    node_type,
    strictly_equal,
)

logger = logging.getLogger(__name__)

_NO_KEY = object()


def generate_keyed_diffs(
    sink: OperationSink, pointer: Pointer, source: Any, target: Any, key_fields: KeyFieldTable
) -> None:
    """Only null and empty containers count as empty, so ``"x" -> 5`` or ``None -> "x"`` is a replace."""
    if equivalent(source, target):
        return

    source_type = node_type(source)
    target_type = node_type(target)

    if is_empty(source) and is_empty(target):
        # null vs [] vs {}: nothing worth reporting
        return

    if is_empty(source) and is_non_empty(target):
        if target_type is NodeType.ARRAY:
            for element in target:
                sink.value_added(pointer, element)
        else:
            sink.value_added(pointer, target)
        return

    if source_type is NodeType.ARRAY and is_non_empty(source) and is_empty(target):
        for index, element in enumerate(source):
            sink.array_element_removed(pointer.append(index), element)
        return

    if source_type is not target_type or not is_container(source):
        sink.value_replaced(pointer, source, target)
        return

    if source_type is NodeType.OBJECT:
        _generate_object_diffs(sink, pointer, source, target, key_fields)
    else:
        _generate_array_diffs(sink, pointer, source, target, key_fields)


def _generate_object_diffs(
    sink: OperationSink, pointer: Pointer, source: dict, target: dict, key_fields: KeyFieldTable
) -> None:
    source_fields = set(source)
    target_fields = set(target)

    for name in sorted(source_fields - target_fields):
        value = source[name]
        if is_non_empty(value):
            field_pointer = pointer.append(name)
            for token, child in children(value):
                sink.array_element_removed(field_pointer.append(token), child)
        else:
            sink.value_removed(pointer.append(name), value)

    for name in sorted(target_fields - source_fields):
        sink.value_added(pointer.append(name), target[name])

    for name in sorted(source_fields & target_fields):
        generate_keyed_diffs(sink, pointer.append(name), source[name], target[name], key_fields)


def _generate_array_diffs(
    sink: OperationSink, pointer: Pointer, source: list, target: list, key_fields: KeyFieldTable
) -> None:
    key_field = key_fields.get(pointer)
    if key_field is None:
        logger.debug("Key field not available for pointer at %s", pointer.path or "(root)")
        _generate_whole_value_diffs(sink, pointer, source, target)
    else:
        _generate_key_field_diffs(sink, pointer, source, target, key_field)


def _generate_whole_value_diffs(sink: OperationSink, pointer: Pointer, source: list, target: list) -> None:
    remaining: List[Any] = list(target)

    for index, element in enumerate(source):
        for position, candidate in enumerate(remaining):
            if strictly_equal(element, candidate):
                del remaining[position]
                break
        else:
            sink.array_element_removed(pointer.append(index), element)

    for element in remaining:
        sink.value_added(pointer.append(END_OF_ARRAY), element)


def _key_of(element: Any, key_field: str) -> Any:
    if node_type(element) is NodeType.OBJECT and key_field in element:
        return element[key_field]
    return _NO_KEY


def _contains_key(keys: List[Any], key: Any) -> bool:
    return any(candidate is not _NO_KEY and equivalent(candidate, key) for candidate in keys)


def _generate_key_field_diffs(
    sink: OperationSink, pointer: Pointer, source: list, target: list, key_field: str
) -> None:
    target_keys = [_key_of(element, key_field) for element in target]
    matched_keys: List[Any] = []

    for index, element in enumerate(source):
        key = _key_of(element, key_field)
        if key is _NO_KEY or not _contains_key(target_keys, key):
            sink.array_element_removed(pointer.append(index), element)
            continue

        matched_keys.append(key)
        element_pointer = pointer.append(index)
        for candidate, candidate_key in zip(target, target_keys):
            if candidate_key is _NO_KEY or not equivalent(candidate_key, key):
                continue
            if not strictly_equal(candidate, element):
                diff_matched_element(sink, element_pointer, element, candidate)

    for element, key in zip(target, target_keys):
        if key is _NO_KEY or not _contains_key(matched_keys, key):
            sink.value_added(pointer.append(END_OF_ARRAY), element)


def diff_matched_element(sink: OperationSink, pointer: Pointer, source: dict, target: dict) -> None:
    """Compare two key-matched elements one field deep.

    Uses strict equality, so ``1`` and ``1.0`` count as a change here even though
    the rest of the engine treats them as equivalent. Nested containers are
    replaced whole, never recursed into. A field dropped from the target is
    reported as replaced with ``None``.
    """
    for name in sorted(source):
        if name not in target:
            sink.array_element_replaced(pointer.append(name), source, None)
        elif not strictly_equal(source[name], target[name]):
            sink.array_element_replaced(pointer.append(name), source, target[name])

    for name in sorted(set(target) - set(source)):
        sink.array_element_replaced(pointer.append(name), source, target[name])
