from decimal import Decimal

import pytest

from treediff import diff
from treediff.errors import InvalidArgumentError
from treediff.pointer import Pointer
from treediff.types import ValueAdded, ValueRemoved, ValueReplaced


def P(text):
    return Pointer.parse(text)


@pytest.mark.parametrize(
    "document",
    [None, True, 0, "text", [], {}, [1, [2, {"a": None}]], {"a": {"b": [1, 2, 3]}, "c": Decimal("1.5")}],
)
def test_identical_documents_produce_no_events(document):
    assert diff(document, document) == []


def test_numeric_representation_is_ignored():
    assert diff(1, 1.0) == []
    assert diff({"a": [1, 2]}, {"a": [1.0, Decimal("2.000")]}) == []


def test_type_change_is_a_single_replace():
    assert diff({}, []) == [ValueReplaced(P(""), {}, [])]
    assert diff({"a": 1}, {"a": "1"}) == [ValueReplaced(P("/a"), 1, "1")]


def test_scalar_change_is_a_replace():
    assert diff({"a": {"b": True}}, {"a": {"b": False}}) == [ValueReplaced(P("/a/b"), True, False)]


def test_object_fields_emit_removals_then_additions_then_recursion():
    events = diff({"a": 1, "b": 2}, {"b": 2, "c": 3})

    assert events == [ValueRemoved(P("/a"), 1), ValueAdded(P("/c"), 3)]


def test_object_groups_are_each_sorted():
    source = {"z": 1, "m": 1, "y": 0, "x": 0}
    target = {"b": 2, "a": 2, "y": 1, "x": 1}

    events = diff(source, target)

    assert events == [
        ValueRemoved(P("/m"), 1),
        ValueRemoved(P("/z"), 1),
        ValueAdded(P("/a"), 2),
        ValueAdded(P("/b"), 2),
        ValueReplaced(P("/x"), 0, 1),
        ValueReplaced(P("/y"), 0, 1),
    ]


def test_array_shrink_removes_at_the_boundary_index():
    assert diff([1, 2, 3], [1, 2]) == [ValueRemoved(P("/2"), 3)]
    assert diff([1, 2, 3, 4], [1]) == [
        ValueRemoved(P("/1"), 2),
        ValueRemoved(P("/1"), 3),
        ValueRemoved(P("/1"), 4),
    ]


def test_array_grow_appends_at_end_marker():
    assert diff([1, 2], [1, 2, 3]) == [ValueAdded(P("/-"), 3)]
    assert diff([], ["a", "b"]) == [ValueAdded(P("/-"), "a"), ValueAdded(P("/-"), "b")]


def test_array_removals_precede_pairwise_diffs():
    events = diff({"l": [1, 2, 3]}, {"l": [9, 2]})

    assert events == [ValueRemoved(P("/l/2"), 3), ValueReplaced(P("/l/0"), 1, 9)]


def test_arrays_compare_by_position_not_identity():
    events = diff([{"id": 1}, {"id": 2}], [{"id": 2}, {"id": 1}])

    assert events == [
        ValueReplaced(P("/0/id"), 1, 2),
        ValueReplaced(P("/1/id"), 2, 1),
    ]


def test_null_to_container_is_a_replace_without_key_table():
    assert diff({"a": None}, {"a": []}) == [ValueReplaced(P("/a"), None, [])]


def test_inputs_are_not_mutated():
    source = {"a": [1, 2, 3], "b": {"c": 1}}
    target = {"a": [1], "b": {"d": 2}}
    source_copy = {"a": [1, 2, 3], "b": {"c": 1}}
    target_copy = {"a": [1], "b": {"d": 2}}

    diff(source, target)

    assert source == source_copy
    assert target == target_copy


def test_missing_document_is_an_invalid_argument():
    with pytest.raises(InvalidArgumentError, match="required"):
        diff({"a": 1})


def test_non_json_document_is_an_invalid_argument():
    with pytest.raises(InvalidArgumentError):
        diff({"a": object()}, {})


def test_none_is_json_null():
    assert diff(None, 1) == [ValueReplaced(P(""), None, 1)]
