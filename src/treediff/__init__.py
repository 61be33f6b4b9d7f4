"""Semantic, key-aware structural diffs of JSON-like documents."""

__version__ = "0.3.0"

from .diff import as_json_patch, diff, format_human_diff, generate_diffs, summarize_events
from .errors import ConfigError, InvalidArgumentError, MalformedLocationError, TreeDiffError
from .keyed import diff_matched_element, generate_keyed_diffs
from .pointer import END_OF_ARRAY, Pointer
from .processor import DiffProcessor, EventRecorder, OperationSink
from .schema import KeyFieldTable, parse_key_fields
from .types import (
    ArrayElementRemoved,
    ArrayElementReplaced,
    DiffEvent,
    ValueAdded,
    ValueRemoved,
    ValueReplaced,
)
from .unchanged import compute_unchanged
from .values import equivalent, strictly_equal

__all__ = [
    "__version__",
    "diff",
    "as_json_patch",
    "generate_diffs",
    "generate_keyed_diffs",
    "diff_matched_element",
    "compute_unchanged",
    "summarize_events",
    "format_human_diff",
    "equivalent",
    "strictly_equal",
    "Pointer",
    "END_OF_ARRAY",
    "KeyFieldTable",
    "parse_key_fields",
    "OperationSink",
    "EventRecorder",
    "DiffProcessor",
    "DiffEvent",
    "ValueAdded",
    "ValueRemoved",
    "ValueReplaced",
    "ArrayElementRemoved",
    "ArrayElementReplaced",
    "TreeDiffError",
    "InvalidArgumentError",
    "MalformedLocationError",
    "ConfigError",
]
