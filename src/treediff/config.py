from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigError

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("events", "patch", "human")


@dataclass(frozen=True)
class Config:
    output_format: str = "events"
    indent: int = 2
    factor_moves: bool = True
    key_fields: Dict[str, Optional[str]] = field(default_factory=dict)


_ENV_PREFIX = "TREEDIFF_"


def _find_pyproject(start_dir: Path) -> Path | None:
    for directory in (start_dir, *start_dir.parents):
        candidate = directory / "pyproject.toml"
        if candidate.exists():
            return candidate
    return None


def _load_toml(path: Path) -> Dict[str, Any]:
    try:
        import tomllib  # py311+
    except ModuleNotFoundError:
        import tomli as tomllib

    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Cannot parse {path}: {exc}") from exc


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default


def parse_key_field_pairs(value: str) -> Dict[str, Optional[str]]:
    """Parse ``"/items=id,/tags="`` into a key-field mapping.

    An empty field name marks the path as "match by whole value".
    """
    pairs: Dict[str, Optional[str]] = {}
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        if "=" not in item:
            raise ConfigError(f"Expected <pointer>=<field> in key-field entry, got {item!r}")
        pointer, field_name = item.split("=", 1)
        pairs[pointer.strip()] = field_name.strip() or None
    return pairs


def _to_key_fields(value: Any) -> Dict[str, Optional[str]]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"key_fields must be a table of pointer = field, got {type(value).__name__}")
    key_fields: Dict[str, Optional[str]] = {}
    for pointer, field_name in value.items():
        if field_name is False or field_name == "":
            key_fields[str(pointer)] = None
        elif isinstance(field_name, str):
            key_fields[str(pointer)] = field_name
        else:
            logger.warning("Ignoring key_fields entry %r: field must be a string", pointer)
    return key_fields


def _from_sources(raw: Dict[str, Any]) -> Config:
    output_format = str(os.getenv(f"{_ENV_PREFIX}OUTPUT_FORMAT", raw.get("output_format", "events"))).lower()
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"Unsupported output_format {output_format!r}; expected one of {', '.join(OUTPUT_FORMATS)}")
    indent = _to_int(os.getenv(f"{_ENV_PREFIX}INDENT", raw.get("indent", 2)), 2)
    factor_moves = _to_bool(os.getenv(f"{_ENV_PREFIX}FACTOR_MOVES", raw.get("factor_moves", True)), True)

    key_fields = _to_key_fields(raw.get("key_fields"))
    env_key_fields = os.getenv(f"{_ENV_PREFIX}KEY_FIELDS")
    if env_key_fields is not None:
        key_fields = parse_key_field_pairs(env_key_fields)

    return Config(
        output_format=output_format,
        indent=max(0, indent),
        factor_moves=factor_moves,
        key_fields=key_fields,
    )


@lru_cache(maxsize=32)
def load_config(start_dir: str | os.PathLike[str] | None = None) -> Config:
    root = Path(start_dir or os.getcwd()).resolve()
    pyproject = _find_pyproject(root)
    if pyproject is None:
        return _from_sources({})

    parsed = _load_toml(pyproject)
    tool = parsed.get("tool", {}) if isinstance(parsed, dict) else {}
    section = tool.get("treediff", {}) if isinstance(tool, dict) else {}
    return _from_sources(section if isinstance(section, dict) else {})


def get_config() -> Config:
    return load_config(os.getcwd())


def refresh_config(start_dir: str | os.PathLike[str] | None = None) -> Config:
    load_config.cache_clear()
    return load_config(start_dir)
