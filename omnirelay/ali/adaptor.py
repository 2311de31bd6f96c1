"""Alibaba DashScope adaptor.

Purpose:
- Chat through the text-generation service, asynchronous video generation and
  task polling through ``/api/v1/tasks/{task_id}``.

Notes:
- DashScope reports failures in the body as ``{"code", "message"}``; a
  non-empty ``code`` becomes a ``RelayError``.
- Video submissions need ``X-DashScope-Async: enable``; streamed chat needs
  ``X-DashScope-SSE: enable`` (contributed through ``stream_headers``).
"""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Mapping

from ..base.constants import (
    MODE_CHAT,
    MODE_VIDEO,
    OPTION_PAYLOAD,
    OPTION_STRUCTURED_MESSAGES,
    OPTION_SYSTEM_PROMPT,
)
from ..base.errors import DecodeError, RelayError, UnsupportedError
from ..base.interfaces import ChunkResult
from ..base.models import (
    ChatChoice,
    ChatRequest,
    ChatResponse,
    MediaRequest,
    MediaResponse,
    Message,
    TaskStatusOutput,
    TaskStatusResponse,
    Usage,
)
from ..base.provider_config import ProviderConfig
from ..base.utils import (
    IN_BODY_ERROR_STATUS,
    as_list,
    as_mapping,
    copy_options,
    extract_payload_map,
    first_base,
    load_json_object,
    load_stream_chunk,
    marshal_with_override,
    set_auth_header,
    set_json_content,
    with_path_suffix,
)

DEFAULT_BASE_URL = "https://dashscope.aliyuncs.com"
CHAT_PATH = "/api/v1/services/aigc/text-generation/generation"
VIDEO_PATH = "/api/v1/services/aigc/video-generation/generation"
TASK_PATH = "/api/v1/tasks/"

_PATHS = {MODE_CHAT: CHAT_PATH, MODE_VIDEO: VIDEO_PATH}
_KNOWN_PATHS = (CHAT_PATH, VIDEO_PATH)
_SKIP_OPTIONS = (OPTION_SYSTEM_PROMPT, OPTION_STRUCTURED_MESSAGES, OPTION_PAYLOAD)


def _raise_for_code(config: ProviderConfig, data: Mapping[str, Any]) -> None:
    code = data.get("code")
    if code:
        message = data.get("message") or code
        raise RelayError(code=IN_BODY_ERROR_STATUS, message=str(message), provider=config.name)


def _message_text(output: Mapping[str, Any]) -> tuple[str, str]:
    """Return ``(text, finish_reason)`` from a DashScope ``output`` object."""
    choices = as_list(output.get("choices"))
    if choices:
        choice = as_mapping(choices[0])
        message = as_mapping(choice.get("message"))
        content = message.get("content")
        return (content if isinstance(content, str) else ""), str(choice.get("finish_reason") or "")
    text = output.get("text")
    return (text if isinstance(text, str) else ""), str(output.get("finish_reason") or "")


class AliAdaptor:
    """Adaptor for DashScope text generation and video generation."""

    def __init__(self, base_url: str = "") -> None:
        self.base_url = base_url

    def _base(self, config: ProviderConfig) -> str:
        return first_base(config.base_url, self.base_url, DEFAULT_BASE_URL)

    def resolve_url(self, mode: str, config: ProviderConfig) -> str:
        path = _PATHS.get(mode)
        if path is None:
            raise UnsupportedError(f"unsupported mode for ali adaptor: {mode}")
        return with_path_suffix(self._base(config), path, _KNOWN_PATHS)

    def apply_auth(self, headers: Dict[str, str], config: ProviderConfig, mode: str) -> None:
        set_auth_header(headers, config)
        set_json_content(headers)
        if mode == MODE_VIDEO:
            headers["X-DashScope-Async"] = "enable"

    def stream_headers(self, config: ProviderConfig) -> Dict[str, str]:
        return {"X-DashScope-SSE": "enable"}

    # ----------------------------------------------------------------- chat
    def encode_chat(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        options = copy_options(request.options)
        messages = [{"role": m.role, "content": m.text()} for m in request.messages]
        if not messages and request.prompt:
            messages = [{"role": "user", "content": request.prompt}]
        system_prompt = options.get(OPTION_SYSTEM_PROMPT)
        if isinstance(system_prompt, str) and system_prompt:
            messages.insert(0, {"role": "system", "content": system_prompt})

        parameters: Dict[str, Any] = {}
        if request.stream:
            parameters["incremental_output"] = True
        if request.temperature:
            parameters["temperature"] = request.temperature
        if request.max_tokens:
            parameters["max_tokens"] = request.max_tokens
        for key, value in options.items():
            if key not in _SKIP_OPTIONS and key != "stream":
                parameters[key] = value

        payload: Dict[str, Any] = {"model": request.model or config.model, "input": {"messages": messages}}
        if parameters:
            payload["parameters"] = parameters
        return marshal_with_override(extract_payload_map(options), payload)

    def decode_chat(self, config: ProviderConfig, body: bytes) -> ChatResponse:
        data = load_json_object(body, "dashscope response")
        _raise_for_code(config, data)
        output = as_mapping(data.get("output"))
        if not output:
            raise DecodeError("missing output in dashscope response")
        text, finish_reason = _message_text(output)
        usage = as_mapping(data.get("usage"))
        prompt_tokens = int(usage.get("input_tokens") or 0)
        completion_tokens = int(usage.get("output_tokens") or 0)
        return ChatResponse(
            id=str(data.get("request_id") or ""),
            object="chat.completion",
            model=config.model,
            choices=[
                ChatChoice(
                    index=0,
                    message=Message(role="assistant", content=text),
                    finish_reason=finish_reason,
                )
            ],
            usage=Usage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=int(usage.get("total_tokens") or prompt_tokens + completion_tokens),
            ),
        )

    # ---------------------------------------------------------------- media
    def encode_media(self, config: ProviderConfig, mode: str, request: MediaRequest) -> bytes:
        if mode != MODE_VIDEO:
            raise UnsupportedError(f"{mode} mode not supported for ali adaptor")
        model_input: Dict[str, Any] = {"prompt": request.prompt}
        for key in ("img_url", "negative_prompt"):
            value = request.extra.get(key) if request.extra else None
            if isinstance(value, str) and value:
                model_input[key] = value
        parameters: Dict[str, Any] = {}
        for key in ("size", "duration", "fps", "seed"):
            value = getattr(request, key)
            if value:
                parameters[key] = value
        payload: Dict[str, Any] = {"model": request.model or config.model, "input": model_input}
        if parameters:
            payload["parameters"] = parameters
        return marshal_with_override(extract_payload_map(request.extra), payload)

    def decode_media(self, config: ProviderConfig, mode: str, body: bytes) -> MediaResponse:
        data = load_json_object(body, "dashscope media response")
        _raise_for_code(config, data)
        output = as_mapping(data.get("output"))
        return MediaResponse(
            task_id=str(output.get("task_id") or ""),
            status=str(output.get("task_status") or "").lower(),
            url=str(output.get("video_url") or ""),
            request_id=str(data.get("request_id") or ""),
        )

    # ----------------------------------------------------------------- task
    def resolve_task_status_url(self, task_id: str, config: ProviderConfig) -> str:
        return with_path_suffix(self._base(config), TASK_PATH + task_id, _KNOWN_PATHS)

    def decode_task_status(self, config: ProviderConfig, body: bytes) -> TaskStatusResponse:
        data = load_json_object(body, "dashscope task status")
        _raise_for_code(config, data)
        output = as_mapping(data.get("output"))
        return TaskStatusResponse(
            request_id=str(data.get("request_id") or ""),
            output=TaskStatusOutput(
                task_id=str(output.get("task_id") or ""),
                task_status=str(output.get("task_status") or ""),
                video_url=str(output.get("video_url") or ""),
                message=str(output.get("message") or ""),
            ),
        )

    # --------------------------------------------------------------- stream
    def prepare_stream_request(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        return self.encode_chat(config, dataclasses.replace(request, stream=True))

    def parse_chunk(self, chunk: bytes) -> ChunkResult:
        text = chunk.strip()
        if not text:
            return ChunkResult.skip()
        event = load_stream_chunk(text)
        if event.get("code"):
            return ChunkResult.error(str(event.get("message") or event["code"]))
        content, finish_reason = _message_text(as_mapping(event.get("output")))
        if content:
            return ChunkResult.ok(content)
        if finish_reason == "stop":
            return ChunkResult.end()
        return ChunkResult.skip()


__all__ = ["AliAdaptor", "DEFAULT_BASE_URL", "CHAT_PATH", "VIDEO_PATH", "TASK_PATH"]
