"""OpenAI adaptor.

Purpose:
- Translate unified chat and media requests to the OpenAI REST dialect
  (``/chat/completions``, ``/images/generations``, ``/videos/generations``)
  and back. Every OpenAI-compatible vendor in the registry (groq, deepseek,
  mistral, openrouter, azure-openai, google-openai) uses this adaptor.

Notes:
- URL resolution is idempotent: a base already ending in the mode suffix is
  kept, a base ending in another known suffix has it swapped, a bare host
  gets the suffix appended.
- ``max_completion_tokens`` in options replaces ``max_tokens``.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Dict

from ..base.constants import (
    MODE_CHAT,
    MODE_IMAGE,
    MODE_VIDEO,
    OPTION_PAYLOAD,
    OPTION_STRUCTURED_MESSAGES,
    OPTION_SYSTEM_PROMPT,
    PROTOCOL_OPENAI,
)
from ..base.errors import UnsupportedError
from ..base.interfaces import ChunkResult
from ..base.models import ChatRequest, ChatResponse, MediaRequest, MediaResponse
from ..base.provider_config import ProviderConfig
from ..base.utils import (
    as_list,
    as_mapping,
    copy_options,
    extract_payload_map,
    first_base,
    load_json_object,
    load_stream_chunk,
    marshal_with_override,
    merge_options,
    normalize_schema,
    raise_for_error_object,
    set_auth_header,
    set_json_content,
    with_path_suffix,
)
from .helpers import (
    CHAT_SUFFIX,
    IMAGE_SUFFIX,
    KNOWN_SUFFIXES,
    VIDEO_SUFFIX,
    image_result_url,
    json_schema_response_format,
    normalize_messages,
)

DEFAULT_BASE_URL = "https://api.openai.com/v1"

_SUFFIXES = {MODE_CHAT: CHAT_SUFFIX, MODE_IMAGE: IMAGE_SUFFIX, MODE_VIDEO: VIDEO_SUFFIX}
_SKIP_OPTIONS = (OPTION_SYSTEM_PROMPT, OPTION_STRUCTURED_MESSAGES, OPTION_PAYLOAD)


class OpenAIAdaptor:
    """Adaptor for the OpenAI REST API and compatible gateways."""

    def __init__(self, base_url: str = "") -> None:
        self.base_url = base_url

    def chat_protocol(self) -> str:
        return PROTOCOL_OPENAI

    def resolve_url(self, mode: str, config: ProviderConfig) -> str:
        suffix = _SUFFIXES.get(mode)
        if suffix is None:
            raise UnsupportedError(f"unsupported mode for openai adaptor: {mode}")
        base = first_base(config.base_url, self.base_url, DEFAULT_BASE_URL)
        return with_path_suffix(base, suffix, KNOWN_SUFFIXES)

    def apply_auth(self, headers: Dict[str, str], config: ProviderConfig, mode: str) -> None:
        set_auth_header(headers, config)
        if config.organization:
            headers["OpenAI-Organization"] = config.organization
        set_json_content(headers)

    # ----------------------------------------------------------------- chat
    def build_chat_payload(self, request: ChatRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": request.model,
            "messages": normalize_messages(request),
        }
        if request.stream:
            payload["stream"] = True
        if request.temperature:
            payload["temperature"] = request.temperature
        if request.max_tokens:
            payload["max_tokens"] = request.max_tokens
        merge_options(payload, request.options, _SKIP_OPTIONS)
        if request.schema is not None and "response_format" not in payload:
            payload["response_format"] = json_schema_response_format(normalize_schema(request.schema))
        if "max_completion_tokens" in payload:
            payload.pop("max_tokens", None)
        return payload

    def encode_chat(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        payload = self.build_chat_payload(request)
        return marshal_with_override(extract_payload_map(request.options), payload)

    def decode_chat(self, config: ProviderConfig, body: bytes) -> ChatResponse:
        data = load_json_object(body, "openai chat response")
        raise_for_error_object(config, data)
        return ChatResponse.from_dict(data)

    # ---------------------------------------------------------------- media
    def encode_media(self, config: ProviderConfig, mode: str, request: MediaRequest) -> bytes:
        if mode not in (MODE_IMAGE, MODE_VIDEO):
            raise UnsupportedError(f"unsupported media mode for openai adaptor: {mode}")
        payload: Dict[str, Any] = {
            "model": request.model or config.model,
            "prompt": request.prompt,
        }
        fields = ("n", "size", "response_format") if mode == MODE_IMAGE else (
            "size",
            "duration",
            "fps",
            "seed",
            "response_format",
        )
        for key in fields:
            value = getattr(request, key)
            if value:
                payload[key] = value
        merge_options(payload, request.extra, (OPTION_PAYLOAD,))
        return marshal_with_override(extract_payload_map(request.extra), payload)

    def decode_media(self, config: ProviderConfig, mode: str, body: bytes) -> MediaResponse:
        data = load_json_object(body, "openai media response")
        raise_for_error_object(config, data)
        if mode == MODE_IMAGE:
            items = [as_mapping(item) for item in as_list(data.get("data"))]
            url = next((u for u in (image_result_url(item) for item in items) if u), "")
            return MediaResponse(status="completed" if url else "", url=url)
        video = as_mapping(data.get("video"))
        return MediaResponse(
            task_id=str(data.get("id") or ""),
            status=str(data.get("status") or ""),
            url=str(video.get("url") or data.get("url") or ""),
        )

    # --------------------------------------------------------------- stream
    def prepare_stream_request(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        options = copy_options(request.options)
        options["stream"] = True
        return self.encode_chat(config, dataclasses.replace(request, stream=True, options=options))

    def parse_chunk(self, chunk: bytes) -> ChunkResult:
        text = chunk.strip()
        if not text:
            return ChunkResult.skip()
        if text == b"[DONE]":
            return ChunkResult.end()
        event = load_stream_chunk(text)
        error = event.get("error")
        if error:
            message = as_mapping(error).get("message") if isinstance(error, dict) else error
            return ChunkResult.error(str(message or error))
        choices = as_list(event.get("choices"))
        if not choices:
            return ChunkResult.skip()
        choice = as_mapping(choices[0])
        delta = as_mapping(choice.get("delta"))
        content = delta.get("content")
        content = content if isinstance(content, str) else ""
        if choice.get("finish_reason"):
            return ChunkResult.ok(content) if content else ChunkResult.end()
        if not content:
            return ChunkResult.skip()
        return ChunkResult.ok(content)


__all__ = ["OpenAIAdaptor", "DEFAULT_BASE_URL"]
