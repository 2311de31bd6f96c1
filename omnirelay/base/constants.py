"""Base shared constants for the relay layer.

Central location for mode names, reserved option keys and default header
values, so adaptors and the relay never scatter magic strings.
"""
from __future__ import annotations

# Relay modes
MODE_CHAT = "chat"
MODE_IMAGE = "image"
MODE_VIDEO = "video"
MODE_TASK = "task"

# Reserved option / extra keys
OPTION_SYSTEM_PROMPT = "system_prompt"
OPTION_STRUCTURED_MESSAGES = "structured_messages"
OPTION_PAYLOAD = "payload"

# Chat protocol tag forcing the OpenAI dialect for chat
PROTOCOL_OPENAI = "openai"

# Stream framings
STREAM_FORMAT_SSE = "sse"
STREAM_FORMAT_NDJSON = "ndjson"

CONTENT_TYPE_JSON = "application/json"

__all__ = [
    "MODE_CHAT",
    "MODE_IMAGE",
    "MODE_VIDEO",
    "MODE_TASK",
    "OPTION_SYSTEM_PROMPT",
    "OPTION_STRUCTURED_MESSAGES",
    "OPTION_PAYLOAD",
    "PROTOCOL_OPENAI",
    "STREAM_FORMAT_SSE",
    "STREAM_FORMAT_NDJSON",
    "CONTENT_TYPE_JSON",
]
