"""JSON parsing helpers raising the relay's ``DecodeError``."""
from __future__ import annotations

import json
from typing import Any, Dict, Mapping

from ..errors import DecodeError, StreamDecodeError


def load_json(body: bytes | str, what: str = "response") -> Any:
    """Parse ``body`` as JSON; failures raise ``DecodeError`` with the cause attached."""
    try:
        return json.loads(body)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"malformed {what}: {exc}") from exc


def load_json_object(body: bytes | str, what: str = "response") -> Dict[str, Any]:
    """Parse ``body`` and require a JSON object."""
    data = load_json(body, what)
    if not isinstance(data, dict):
        raise DecodeError(f"unexpected {what} shape: expected a JSON object")
    return data


def load_stream_chunk(chunk: bytes) -> Dict[str, Any]:
    """Parse one stream event payload as a JSON object.

    Malformed payloads raise ``StreamDecodeError`` so the token stream can
    apply its retry strategy; non-object JSON yields an empty dict.
    """
    try:
        data = json.loads(chunk)
    except (TypeError, ValueError) as exc:
        raise StreamDecodeError(f"malformed stream chunk: {exc}") from exc
    return data if isinstance(data, dict) else {}


def as_mapping(value: Any) -> Mapping[str, Any]:
    """Return ``value`` when it is a mapping, else an empty dict."""
    return value if isinstance(value, Mapping) else {}


def as_list(value: Any) -> list:
    """Return ``value`` when it is a list, else an empty list."""
    return value if isinstance(value, list) else []


def normalize_schema(schema: Any) -> Any:
    """Return ``schema`` as plain JSON data.

    Strings and bytes are parsed; objects exposing ``model_json_schema``
    (pydantic models) are expanded; other values round-trip through JSON.
    """
    if isinstance(schema, (str, bytes, bytearray)):
        return load_json(bytes(schema) if not isinstance(schema, str) else schema, "schema")
    if hasattr(schema, "model_json_schema"):
        return schema.model_json_schema()
    try:
        return json.loads(json.dumps(schema))
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"schema is not JSON serializable: {exc}") from exc


__all__ = ["load_json", "load_json_object", "load_stream_chunk", "as_mapping", "as_list", "normalize_schema"]
