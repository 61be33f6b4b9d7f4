"""Structured treediff error taxonomy used for deterministic, auditable failures."""

from __future__ import annotations


class TreeDiffError(Exception):
    """Base class for all treediff domain exceptions."""

    def __init__(self, error_code: str, category: str, explanation: str):
        self.error_code = error_code
        self.category = category
        self.explanation = explanation
        super().__init__(f"[{self.category}:{self.error_code}] {self.explanation}")


class InvalidArgumentError(TreeDiffError, ValueError):
    """Raised when a required input is missing or is not a JSON-like value."""

    def __init__(self, explanation: str):
        super().__init__("INVALID_ARGUMENT", "INPUT", explanation)


class MalformedLocationError(TreeDiffError, ValueError):
    """Raised when a key-field table entry cannot be turned into a pointer."""

    def __init__(self, explanation: str):
        super().__init__("MALFORMED_LOCATION", "KEY_TABLE", explanation)


class ConfigError(TreeDiffError):
    def __init__(self, explanation: str):
        super().__init__("CONFIG", "CONFIG", explanation)
