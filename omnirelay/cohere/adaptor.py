"""Cohere v2 chat adaptor.

Purpose:
- Encode unified chat requests for ``/v2/chat`` and decode the v2 response
  (content items plus tool calls) into the unified ``ChatResponse``.

Notes:
- A schema is sent as ``response_format`` of type ``json_object``.
- Tool calls are rendered as ``{"name", "arguments"}`` JSON lines after the text.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, List

from ..base.constants import MODE_CHAT, OPTION_PAYLOAD, OPTION_STRUCTURED_MESSAGES, OPTION_SYSTEM_PROMPT
from ..base.errors import DecodeError, UnsupportedError
from ..base.interfaces import ChunkResult
from ..base.models import (
    ChatChoice,
    ChatRequest,
    ChatResponse,
    MediaRequest,
    MediaResponse,
    Message,
    Usage,
)
from ..base.provider_config import ProviderConfig
from ..base.utils import (
    as_list,
    as_mapping,
    extract_payload_map,
    first_base,
    format_function_call,
    load_json_object,
    load_stream_chunk,
    marshal_with_override,
    merge_options,
    normalize_schema,
    raise_for_error_object,
    set_auth_header,
    set_json_content,
    with_default_path,
)

CHAT_PATH = "/v2/chat"
DEFAULT_BASE_URL = "https://api.cohere.ai" + CHAT_PATH

_SKIP_OPTIONS = (OPTION_SYSTEM_PROMPT, OPTION_STRUCTURED_MESSAGES, OPTION_PAYLOAD)


def _tool_arguments(raw: Any) -> Any:
    if isinstance(raw, str):
        try:
            return json.loads(raw) if raw else {}
        except ValueError:
            return raw
    return raw


class CohereAdaptor:
    """Adaptor for the Cohere v2 chat endpoint."""

    def __init__(self, base_url: str = "") -> None:
        self.base_url = base_url

    def resolve_url(self, mode: str, config: ProviderConfig) -> str:
        if mode != MODE_CHAT:
            raise UnsupportedError(f"unsupported mode for cohere adaptor: {mode}")
        return with_default_path(first_base(config.base_url, self.base_url, DEFAULT_BASE_URL), CHAT_PATH)

    def apply_auth(self, headers: Dict[str, str], config: ProviderConfig, mode: str) -> None:
        set_auth_header(headers, config)
        set_json_content(headers)
        headers["Accept"] = "application/json"

    def encode_chat(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        options = request.options or {}
        messages: List[Dict[str, Any]] = []
        system_prompt = options.get(OPTION_SYSTEM_PROMPT)
        if isinstance(system_prompt, str) and system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        if request.messages:
            messages.extend({"role": m.role, "content": m.text()} for m in request.messages)
        elif request.prompt:
            messages.append({"role": "user", "content": request.prompt})

        payload: Dict[str, Any] = {"model": request.model or config.model, "messages": messages}
        if request.stream:
            payload["stream"] = True
        if request.temperature:
            payload["temperature"] = request.temperature
        if request.max_tokens:
            payload["max_tokens"] = request.max_tokens
        if request.schema is not None:
            payload["response_format"] = {"type": "json_object", "json_schema": normalize_schema(request.schema)}
        merge_options(payload, options, _SKIP_OPTIONS)
        return marshal_with_override(extract_payload_map(options), payload)

    def decode_chat(self, config: ProviderConfig, body: bytes) -> ChatResponse:
        data = load_json_object(body, "cohere response")
        raise_for_error_object(config, data)
        message = as_mapping(data.get("message"))
        parts: List[str] = []
        text = "".join(
            str(as_mapping(item).get("text") or "")
            for item in as_list(message.get("content"))
            if as_mapping(item).get("type", "text") == "text"
        )
        if text:
            parts.append(text)
        for call in as_list(message.get("tool_calls")):
            function = as_mapping(as_mapping(call).get("function"))
            parts.append(format_function_call(str(function.get("name") or ""), _tool_arguments(function.get("arguments"))))
        if not parts:
            raise DecodeError("empty response from cohere")

        usage = as_mapping(data.get("usage"))
        tokens = as_mapping(usage.get("tokens")) or as_mapping(usage.get("billed_units"))
        prompt_tokens = int(tokens.get("input_tokens") or 0)
        completion_tokens = int(tokens.get("output_tokens") or 0)
        return ChatResponse(
            id=str(data.get("id") or ""),
            object="chat.completion",
            model=config.model,
            choices=[
                ChatChoice(
                    index=0,
                    message=Message(role="assistant", content="\n".join(parts)),
                    finish_reason=str(data.get("finish_reason") or "").lower(),
                )
            ],
            usage=Usage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )

    def encode_media(self, config: ProviderConfig, mode: str, request: MediaRequest) -> bytes:
        raise UnsupportedError(f"{mode} mode not supported for cohere adaptor")

    def decode_media(self, config: ProviderConfig, mode: str, body: bytes) -> MediaResponse:
        raise UnsupportedError(f"{mode} mode not supported for cohere adaptor")

    def prepare_stream_request(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        return self.encode_chat(config, dataclasses.replace(request, stream=True))

    def parse_chunk(self, chunk: bytes) -> ChunkResult:
        text = chunk.strip()
        if not text:
            return ChunkResult.skip()
        if text == b"[DONE]":
            return ChunkResult.end()
        event = load_stream_chunk(text)
        event_type = event.get("type")
        if event_type == "content-delta":
            delta = as_mapping(as_mapping(event.get("delta")).get("message"))
            content = as_mapping(delta.get("content")).get("text")
            return ChunkResult.ok(str(content)) if content else ChunkResult.skip()
        if event_type == "message-end":
            return ChunkResult.end()
        if event.get("error"):
            return ChunkResult.error(str(event["error"]))
        return ChunkResult.skip()


__all__ = ["CohereAdaptor", "DEFAULT_BASE_URL", "CHAT_PATH"]
