"""OpenAI dialect helpers.

Purpose:
- Side-effect-free utilities shared by the OpenAI adaptor and the
  OpenAI-dialect chat wrapper: message normalization, structured-output
  schema shaping and image result extraction.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from ..base.constants import OPTION_SYSTEM_PROMPT
from ..base.models import ChatRequest, Message

CHAT_SUFFIX = "/chat/completions"
IMAGE_SUFFIX = "/images/generations"
VIDEO_SUFFIX = "/videos/generations"
KNOWN_SUFFIXES = (CHAT_SUFFIX, IMAGE_SUFFIX, VIDEO_SUFFIX)

STRUCTURED_RESPONSE_NAME = "structured_response"

_SCHEMA_KEYS = ("type", "properties", "required", "items")


def normalize_messages(request: ChatRequest) -> List[Dict[str, Any]]:
    """Return wire messages: prompt fallback, then optional leading system prompt."""
    messages: List[Message] = list(request.messages)
    if not messages and request.prompt:
        messages = [Message(role="user", content=request.prompt)]
    system_prompt = (request.options or {}).get(OPTION_SYSTEM_PROMPT)
    if isinstance(system_prompt, str) and system_prompt:
        messages.insert(0, Message(role="system", content=system_prompt))
    return [m.to_dict() for m in messages]


def clean_schema(schema: Any) -> Any:
    """Reduce a JSON schema to the subset strict structured outputs accept.

    Keeps ``type``, ``properties``, ``required`` and ``items`` (recursively)
    and sets ``additionalProperties: false`` on objects.
    """
    if not isinstance(schema, Mapping):
        return schema
    result: Dict[str, Any] = {}
    for key in _SCHEMA_KEYS:
        if key not in schema:
            continue
        value = schema[key]
        if key == "properties":
            props = value if isinstance(value, Mapping) else {}
            result[key] = {name: clean_schema(sub) for name, sub in props.items()}
        elif key == "items":
            result[key] = clean_schema(value)
        else:
            result[key] = value
    if schema.get("type") == "object":
        result["additionalProperties"] = False
    return result


def json_schema_response_format(schema: Any) -> Dict[str, Any]:
    return {
        "type": "json_schema",
        "json_schema": {
            "name": STRUCTURED_RESPONSE_NAME,
            "schema": clean_schema(schema),
            "strict": True,
        },
    }


def image_result_url(item: Mapping[str, Any]) -> str:
    """Return the URL of an image result, or a data URI for base64 results."""
    url = item.get("url")
    if isinstance(url, str) and url:
        return url
    b64 = item.get("b64_json")
    if isinstance(b64, str) and b64:
        return f"data:image/png;base64,{b64}"
    return ""


__all__ = [
    "CHAT_SUFFIX",
    "IMAGE_SUFFIX",
    "VIDEO_SUFFIX",
    "KNOWN_SUFFIXES",
    "STRUCTURED_RESPONSE_NAME",
    "normalize_messages",
    "clean_schema",
    "json_schema_response_format",
    "image_result_url",
]
