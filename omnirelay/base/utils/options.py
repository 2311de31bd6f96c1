"""Helpers for the open ``options`` / ``extra`` maps.

These maps are the only channel for vendor-specific fields, so every adaptor
reads them through the same tolerant accessors: a wrong-typed value is
treated as absent rather than raising.
"""
from __future__ import annotations

import contextlib
import json
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from ..constants import OPTION_PAYLOAD


def copy_options(options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Return a shallow copy of ``options`` (an empty dict for ``None``)."""
    return dict(options) if options else {}


def filter_options(options: Mapping[str, Any], *keys: str) -> Dict[str, Any]:
    """Return a copy of ``options`` without ``keys``."""
    skip = set(keys)
    return {k: v for k, v in options.items() if k not in skip}


def merge_options(payload: Dict[str, Any], options: Optional[Mapping[str, Any]], skip: Iterable[str]) -> None:
    """Copy every option not in ``skip`` into ``payload`` (option values win)."""
    if not options:
        return
    skipped = set(skip)
    for key, value in options.items():
        if key in skipped:
            continue
        payload[key] = value


def get_string_extra(extra: Optional[Mapping[str, Any]], key: str) -> str:
    """Return ``extra[key]`` when it is a string, else ``""``."""
    if not extra:
        return ""
    value = extra.get(key)
    return value if isinstance(value, str) else ""


def get_bool_extra(extra: Optional[Mapping[str, Any]], key: str) -> Tuple[bool, bool]:
    """Return ``(value, present)`` for a boolean ``extra[key]``."""
    if not extra or key not in extra:
        return False, False
    value = extra[key]
    if isinstance(value, bool):
        return value, True
    return False, False


def get_int_extra(extra: Optional[Mapping[str, Any]], key: str) -> Optional[int]:
    """Return ``extra[key]`` as an int when it is numeric (bools excluded)."""
    if not extra:
        return None
    value = extra.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return None


def get_string_list_extra(extra: Optional[Mapping[str, Any]], key: str) -> list[str]:
    """Return the string items of a list-valued ``extra[key]``."""
    if not extra:
        return []
    value = extra.get(key)
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, str)]


def extract_payload_map(extra: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Return the raw override stored under the reserved ``payload`` key, if any."""
    if not extra:
        return None
    raw = extra.get(OPTION_PAYLOAD)
    if isinstance(raw, Mapping):
        return dict(raw)
    return None


def dumps(payload: Any) -> bytes:
    """Serialize ``payload`` as compact UTF-8 JSON."""
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def marshal_with_override(override: Optional[Mapping[str, Any]], fallback: Any) -> bytes:
    """Serialize ``override`` when given and serializable, else ``fallback``."""
    if override is not None:
        with contextlib.suppress(TypeError, ValueError):
            return dumps(override)
    return dumps(fallback)


def numeric_option(options: Optional[Mapping[str, Any]], key: str, fallback: int) -> int:
    """Return ``options[key]`` coerced to int when numeric, else ``fallback``."""
    if not options:
        return fallback
    value = options.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return fallback
    return int(value)


__all__ = [
    "copy_options",
    "filter_options",
    "merge_options",
    "get_string_extra",
    "get_bool_extra",
    "get_int_extra",
    "get_string_list_extra",
    "extract_payload_map",
    "dumps",
    "marshal_with_override",
    "numeric_option",
]
