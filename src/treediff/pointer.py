"""Immutable locations inside a JSON-like tree.

A ``Pointer`` is a tuple of RFC 6901 reference tokens. Array indexes are kept in
their decimal text form so that a pointer parsed from ``"/items/0"`` equals one
built with ``Pointer.root().append("items").append(0)``. Escaping and parsing are
delegated to ``jsonpointer``.
"""

from __future__ import annotations

from functools import total_ordering
from typing import Any, Iterable, Tuple, Union

from jsonpointer import JsonPointer, JsonPointerException

from .errors import MalformedLocationError

END_OF_ARRAY = "-"

Token = Union[str, int]


@total_ordering
class Pointer:
    """Hashable, ordered path addressing one node of a tree."""

    __slots__ = ("_tokens",)

    def __init__(self, tokens: Iterable[Token] = ()):
        object.__setattr__(self, "_tokens", tuple(_token_text(token) for token in tokens))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Pointer is immutable")

    @classmethod
    def root(cls) -> "Pointer":
        return _ROOT

    @classmethod
    def parse(cls, text: str) -> "Pointer":
        """Parse an RFC 6901 pointer string.

        Raises:
            MalformedLocationError: if *text* is not a valid pointer.
        """
        if not isinstance(text, str):
            raise MalformedLocationError(f"Pointer must be a string, got {type(text).__name__}")
        try:
            parsed = JsonPointer(text)
        except JsonPointerException as exc:
            raise MalformedLocationError(f"Invalid pointer {text!r}: {exc}") from exc
        return cls(parsed.parts)

    @property
    def parts(self) -> Tuple[str, ...]:
        return self._tokens

    @property
    def path(self) -> str:
        return JsonPointer.from_parts(list(self._tokens)).path

    def append(self, token: Token) -> "Pointer":
        """Return a new pointer one level deeper."""
        return Pointer(self._tokens + (_token_text(token),))

    def is_root(self) -> bool:
        return not self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pointer):
            return NotImplemented
        return self._tokens == other._tokens

    def __lt__(self, other: "Pointer") -> bool:
        if not isinstance(other, Pointer):
            return NotImplemented
        return self._tokens < other._tokens

    def __hash__(self) -> int:
        return hash(self._tokens)

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        return f"Pointer({self.path!r})"


def _token_text(token: Token) -> str:
    if isinstance(token, bool):
        raise TypeError("Pointer tokens must be str or non-negative int, got bool")
    if isinstance(token, int):
        if token < 0:
            raise ValueError(f"Array index must be non-negative, got {token}")
        return str(token)
    if isinstance(token, str):
        return token
    raise TypeError(f"Pointer tokens must be str or non-negative int, got {type(token).__name__}")


_ROOT = Pointer()
