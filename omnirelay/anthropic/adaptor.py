"""Anthropic Messages API adaptor.

Purpose:
- Translate unified chat requests to ``/v1/messages`` payloads and decode the
  content-block responses (text and ``tool_use`` blocks) back into the unified
  ``ChatResponse``. Chat only; media modes are unsupported.

Notes:
- ``system`` role messages and the ``system_prompt`` option both land in the
  top-level ``system`` block list; the option is split into word groups with
  cache points after the first group.
- ``tool_use`` blocks are rendered as ``{"name", "arguments"}`` JSON lines
  after the text.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, List

from ..base.constants import (
    MODE_CHAT,
    OPTION_PAYLOAD,
    OPTION_STRUCTURED_MESSAGES,
    OPTION_SYSTEM_PROMPT,
)
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
    copy_options,
    extract_payload_map,
    first_base,
    format_function_call,
    get_bool_extra,
    load_json_object,
    load_stream_chunk,
    marshal_with_override,
    merge_options,
    numeric_option,
    raise_for_error_object,
    set_auth_header,
    set_json_content,
    with_default_path,
)
from .helpers import (
    TOOL_USAGE_PROMPT,
    convert_tools,
    message_payloads,
    system_prompt_blocks,
    text_block,
    tool_choice_payload,
)

MESSAGES_PATH = "/v1/messages"
DEFAULT_BASE_URL = "https://api.anthropic.com" + MESSAGES_PATH
ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_MAX_TOKENS = 1024

_SKIP_OPTIONS = (
    OPTION_SYSTEM_PROMPT,
    "max_tokens",
    "tools",
    "tool_choice",
    "enable_caching",
    OPTION_STRUCTURED_MESSAGES,
    OPTION_PAYLOAD,
)


class AnthropicAdaptor:
    """Adaptor for Anthropic's Messages API (chat and streaming chat)."""

    def __init__(self, base_url: str = "") -> None:
        self.base_url = base_url

    def resolve_url(self, mode: str, config: ProviderConfig) -> str:
        if mode != MODE_CHAT:
            raise UnsupportedError(f"unsupported mode for anthropic adaptor: {mode}")
        return with_default_path(first_base(config.base_url, self.base_url, DEFAULT_BASE_URL), MESSAGES_PATH)

    def apply_auth(self, headers: Dict[str, str], config: ProviderConfig, mode: str) -> None:
        set_auth_header(headers, config, default_header="x-api-key", default_prefix="")
        set_json_content(headers)
        if not any(key.lower() == "anthropic-version" for key in headers):
            headers["anthropic-version"] = ANTHROPIC_VERSION

    # ----------------------------------------------------------------- chat
    def encode_chat(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        options = request.options or {}
        max_tokens = numeric_option(options, "max_tokens", request.max_tokens) or DEFAULT_MAX_TOKENS
        payload: Dict[str, Any] = {"model": request.model or config.model, "max_tokens": max_tokens}
        system: List[Dict[str, Any]] = []

        tools = convert_tools(options.get("tools"))
        if tools:
            payload["tools"] = tools
            if len(tools) > 1:
                system.append(text_block(TOOL_USAGE_PROMPT))
            payload["tool_choice"] = tool_choice_payload(options.get("tool_choice"))

        system_prompt = options.get(OPTION_SYSTEM_PROMPT)
        if isinstance(system_prompt, str) and system_prompt:
            system.extend(system_prompt_blocks(system_prompt))

        messages = list(request.messages)
        if not messages and request.prompt:
            messages = [Message(role="user", content=request.prompt)]
        system.extend(text_block(m.text()) for m in messages if m.role == "system" and m.text())
        chat_messages = [m for m in messages if m.role != "system"]

        if system:
            payload["system"] = system
        if request.temperature:
            payload["temperature"] = request.temperature
        caching, _ = get_bool_extra(options, "enable_caching")
        payload["messages"] = message_payloads(chat_messages, enable_caching=caching)
        if request.stream:
            payload["stream"] = True
        merge_options(payload, options, _SKIP_OPTIONS)
        return marshal_with_override(extract_payload_map(options), payload)

    def decode_chat(self, config: ProviderConfig, body: bytes) -> ChatResponse:
        data = load_json_object(body, "anthropic response")
        raise_for_error_object(config, data)
        blocks = [as_mapping(block) for block in as_list(data.get("content"))]
        if not blocks:
            raise DecodeError("empty response from anthropic")

        final: List[str] = []
        calls: List[str] = []
        pending = ""
        last_type = ""
        for block in blocks:
            block_type = block.get("type")
            if block_type == "text":
                if last_type == "text" and pending:
                    pending += " "
                pending += str(block.get("text") or "")
            elif block_type in ("tool_use", "tool_calls"):
                if pending:
                    final.append(pending)
                    pending = ""
                calls.append(format_function_call(str(block.get("name") or ""), block.get("input")))
            last_type = str(block_type or "")
        if pending:
            final.append(pending)
        final.extend(calls)

        usage = as_mapping(data.get("usage"))
        prompt_tokens = int(usage.get("input_tokens") or 0)
        completion_tokens = int(usage.get("output_tokens") or 0)
        return ChatResponse(
            id=str(data.get("id") or ""),
            object="chat.completion",
            model=str(data.get("model") or ""),
            choices=[
                ChatChoice(
                    index=0,
                    message=Message(role="assistant", content="\n".join(final)),
                    finish_reason=str(data.get("stop_reason") or ""),
                )
            ],
            usage=Usage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )

    # ---------------------------------------------------------------- media
    def encode_media(self, config: ProviderConfig, mode: str, request: MediaRequest) -> bytes:
        raise UnsupportedError(f"{mode} mode not supported for anthropic adaptor")

    def decode_media(self, config: ProviderConfig, mode: str, body: bytes) -> MediaResponse:
        raise UnsupportedError(f"{mode} mode not supported for anthropic adaptor")

    # --------------------------------------------------------------- stream
    def prepare_stream_request(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        options = copy_options(request.options)
        options["stream"] = True
        return self.encode_chat(config, dataclasses.replace(request, options=options))

    def parse_chunk(self, chunk: bytes) -> ChunkResult:
        text = chunk.strip()
        if not text:
            return ChunkResult.skip()
        if text == b"[DONE]":
            return ChunkResult.end()
        event = load_stream_chunk(text)
        event_type = event.get("type")
        if event_type == "content_block_delta":
            delta = as_mapping(event.get("delta"))
            if delta.get("type") == "text_delta" and delta.get("text"):
                return ChunkResult.ok(str(delta["text"]))
            return ChunkResult.skip()
        if event_type == "message_stop":
            return ChunkResult.end()
        if event_type == "error":
            error = as_mapping(event.get("error"))
            return ChunkResult.error(str(error.get("message") or "anthropic stream error"))
        return ChunkResult.skip()


__all__ = ["AnthropicAdaptor", "DEFAULT_BASE_URL", "MESSAGES_PATH", "ANTHROPIC_VERSION", "DEFAULT_MAX_TOKENS"]
