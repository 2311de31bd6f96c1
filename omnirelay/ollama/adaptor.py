"""Ollama adaptor.

Purpose:
- Drive the local ``/api/generate`` endpoint. Requests are flattened to a
  single prompt; responses (and streams) are newline-delimited JSON objects
  each carrying a ``response`` fragment until ``done`` is true.

Notes:
- No credential is sent; only ``Content-Type`` is set.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, List

from ..base.constants import (
    MODE_CHAT,
    OPTION_PAYLOAD,
    OPTION_STRUCTURED_MESSAGES,
    OPTION_SYSTEM_PROMPT,
    STREAM_FORMAT_NDJSON,
)
from ..base.errors import DecodeError, RelayError, UnsupportedError
from ..base.interfaces import ChunkResult
from ..base.models import ChatChoice, ChatRequest, ChatResponse, MediaRequest, MediaResponse, Message, Usage
from ..base.provider_config import ProviderConfig
from ..base.utils import (
    IN_BODY_ERROR_STATUS,
    as_mapping,
    extract_payload_map,
    first_base,
    load_stream_chunk,
    marshal_with_override,
    merge_options,
    set_json_content,
    with_default_path,
)

GENERATE_PATH = "/api/generate"
DEFAULT_BASE_URL = "http://localhost:11434" + GENERATE_PATH

_SKIP_OPTIONS = (OPTION_SYSTEM_PROMPT, OPTION_STRUCTURED_MESSAGES, OPTION_PAYLOAD)


def flatten_prompt(request: ChatRequest) -> str:
    """Return the request prompt, or the messages as ``role: content`` lines."""
    if request.prompt:
        return request.prompt
    return "\n".join(f"{m.role}: {m.text()}" for m in request.messages).strip()


class OllamaAdaptor:
    """Adaptor for a local Ollama server."""

    def __init__(self, base_url: str = "") -> None:
        self.base_url = base_url

    def resolve_url(self, mode: str, config: ProviderConfig) -> str:
        if mode != MODE_CHAT:
            raise UnsupportedError(f"unsupported mode for ollama adaptor: {mode}")
        return with_default_path(first_base(config.base_url, self.base_url, DEFAULT_BASE_URL), GENERATE_PATH)

    def apply_auth(self, headers: Dict[str, str], config: ProviderConfig, mode: str) -> None:
        set_json_content(headers)

    def stream_format(self) -> str:
        return STREAM_FORMAT_NDJSON

    def encode_chat(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        options = request.options or {}
        payload: Dict[str, Any] = {
            "model": request.model or config.model,
            "prompt": flatten_prompt(request),
            "stream": bool(request.stream),
        }
        system_prompt = options.get(OPTION_SYSTEM_PROMPT)
        if isinstance(system_prompt, str) and system_prompt:
            payload["system"] = system_prompt
        if request.schema is not None:
            payload["format"] = "json"
        model_options: Dict[str, Any] = {}
        if request.temperature:
            model_options["temperature"] = request.temperature
        if request.max_tokens:
            model_options["num_predict"] = request.max_tokens
        if model_options:
            payload["options"] = model_options
        merge_options(payload, options, _SKIP_OPTIONS)
        return marshal_with_override(extract_payload_map(options), payload)

    def decode_chat(self, config: ProviderConfig, body: bytes) -> ChatResponse:
        parts: List[str] = []
        last: Dict[str, Any] = {}
        for line in body.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                data = json.loads(line)
            except ValueError as exc:
                raise DecodeError(f"invalid ollama response line: {exc}") from exc
            data = as_mapping(data)
            if data.get("error"):
                raise RelayError(code=IN_BODY_ERROR_STATUS, message=str(data["error"]), provider=config.name)
            parts.append(str(data.get("response") or ""))
            last = dict(data)
            if data.get("done"):
                break
        if not last:
            raise DecodeError("empty response from ollama")

        prompt_tokens = int(last.get("prompt_eval_count") or 0)
        completion_tokens = int(last.get("eval_count") or 0)
        return ChatResponse(
            object="chat.completion",
            model=str(last.get("model") or config.model),
            choices=[
                ChatChoice(
                    index=0,
                    message=Message(role="assistant", content="".join(parts)),
                    finish_reason=str(last.get("done_reason") or ""),
                )
            ],
            usage=Usage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )

    def encode_media(self, config: ProviderConfig, mode: str, request: MediaRequest) -> bytes:
        raise UnsupportedError(f"{mode} mode not supported for ollama adaptor")

    def decode_media(self, config: ProviderConfig, mode: str, body: bytes) -> MediaResponse:
        raise UnsupportedError(f"{mode} mode not supported for ollama adaptor")

    def prepare_stream_request(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        return self.encode_chat(config, dataclasses.replace(request, stream=True))

    def parse_chunk(self, chunk: bytes) -> ChunkResult:
        text = chunk.strip()
        if not text:
            return ChunkResult.skip()
        event = load_stream_chunk(text)
        if event.get("error"):
            return ChunkResult.error(str(event["error"]))
        content = event.get("response")
        content = content if isinstance(content, str) else ""
        if event.get("done"):
            return ChunkResult.ok(content) if content else ChunkResult.end()
        return ChunkResult.ok(content) if content else ChunkResult.skip()


__all__ = ["OllamaAdaptor", "DEFAULT_BASE_URL", "GENERATE_PATH", "flatten_prompt"]
