"""Strict validation of caller-supplied key-field tables."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from .errors import MalformedLocationError
from .pointer import Pointer

KeyFieldsInput = Mapping[Union[Pointer, str], Optional[str]]


class KeyFieldTable:
    """Read-only mapping from array pointer to identifying field name.

    An entry mapped to ``None`` means "present, but match by whole value".
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[Pointer, Optional[str]] | None = None):
        self._entries = MappingProxyType(dict(entries or {}))

    def __contains__(self, pointer: object) -> bool:
        return pointer in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def get(self, pointer: Pointer) -> Optional[str]:
        return self._entries.get(pointer)

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {pointer.path: field for pointer, field in sorted(self._entries.items())}

    def __repr__(self) -> str:
        return f"KeyFieldTable({self.as_dict()!r})"


def parse_key_fields(raw: Any) -> KeyFieldTable:
    """Validate *raw* and return a ``KeyFieldTable``.

    Keys may be ``Pointer`` objects or RFC 6901 strings. Values may be a field
    name, ``None`` or ``""``; the last two both mean "match by whole value".

    Raises:
        MalformedLocationError: if a key is not a valid pointer or a value is
            neither a string nor ``None``.
    """
    if isinstance(raw, KeyFieldTable):
        return raw
    if not isinstance(raw, Mapping):
        raise MalformedLocationError(f"Key-field table must be a mapping, got {type(raw).__name__}")

    entries: Dict[Pointer, Optional[str]] = {}
    for key, field_name in raw.items():
        if isinstance(key, Pointer):
            pointer = key
        elif isinstance(key, str):
            pointer = Pointer.parse(key)
        else:
            raise MalformedLocationError(
                f"Key-field table keys must be pointers or strings, got {type(key).__name__}"
            )

        if field_name is not None and not isinstance(field_name, str):
            actual = type(field_name).__name__
            raise MalformedLocationError(
                f"Invalid key field for {pointer.path or '/'}: expected str or None, got {actual}"
            )
        entries[pointer] = field_name or None
    return KeyFieldTable(entries)
