"""Google Gemini adaptor.

Purpose:
- Chat through ``models/{model}:generateContent`` (and
  ``:streamGenerateContent?alt=sse`` for streaming), images through
  ``:predict``, video through ``:predictLongRunning`` and task polling via the
  long-running operation resource ``{base}/{operation name}``.

Notes:
- The API key is sent in the ``x-goog-api-key`` header, never in the URL.
- A streaming call is signalled to ``resolve_url`` by the ``X-Stream`` header
  on a derived config (see :meth:`GoogleAdaptor.stream_headers`).
- ``assistant`` messages map to the ``model`` role; ``system`` messages and
  the ``system_prompt`` option are combined into ``system_instruction``.
"""

from __future__ import annotations

import dataclasses
import re
from typing import Any, Dict, List, Mapping
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ..base.constants import (
    MODE_CHAT,
    MODE_IMAGE,
    MODE_TASK,
    MODE_VIDEO,
    OPTION_PAYLOAD,
    OPTION_STRUCTURED_MESSAGES,
    OPTION_SYSTEM_PROMPT,
)
from ..base.errors import DecodeError, RequestError, UnsupportedError
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
    as_list,
    as_mapping,
    extract_payload_map,
    first_base,
    get_string_extra,
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

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
STREAM_HEADER = "X-Stream"

_MODEL_ACTION = re.compile(r"/models/[^/:]+:\w+$")
_ACTIONS = {
    MODE_IMAGE: "predict",
    MODE_VIDEO: "predictLongRunning",
}
_GENERATION_OPTIONS = {"top_p": "topP", "top_k": "topK", "stop": "stopSequences", "candidate_count": "candidateCount"}
_SKIP_OPTIONS = (
    OPTION_SYSTEM_PROMPT,
    OPTION_STRUCTURED_MESSAGES,
    OPTION_PAYLOAD,
    "stream",
    *_GENERATION_OPTIONS,
)


def _model_action_url(base: str, model: str, action: str, *, stream: bool) -> str:
    """Point ``base`` at ``/models/{model}:{action}``, replacing any model action already there."""
    parts = urlsplit(base)
    path = _MODEL_ACTION.sub("", parts.path.rstrip("/"))
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "alt"]
    if stream:
        query.append(("alt", "sse"))
    return urlunsplit(parts._replace(path=f"{path}/models/{model}:{action}", query=urlencode(query)))


def _is_streaming(config: ProviderConfig) -> bool:
    return any(key.lower() == STREAM_HEADER.lower() and value == "true" for key, value in config.headers.items())


def _candidate_text(candidate: Mapping[str, Any]) -> str:
    content = as_mapping(candidate.get("content"))
    return "".join(str(as_mapping(part).get("text") or "") for part in as_list(content.get("parts")))


class GoogleAdaptor:
    """Adaptor for the Gemini / Imagen / Veo REST API."""

    def __init__(self, base_url: str = "") -> None:
        self.base_url = base_url

    def _base(self, config: ProviderConfig) -> str:
        return first_base(config.base_url, self.base_url, DEFAULT_BASE_URL)

    def resolve_url(self, mode: str, config: ProviderConfig) -> str:
        if mode == MODE_TASK:
            raise UnsupportedError("google task status URLs need a task id")
        if mode == MODE_CHAT:
            action = "streamGenerateContent" if _is_streaming(config) else "generateContent"
        else:
            action = _ACTIONS.get(mode, "")
            if not action:
                raise UnsupportedError(f"unsupported mode for google adaptor: {mode}")
        if not config.model:
            raise RequestError("google adaptor requires a model")
        return _model_action_url(self._base(config), config.model, action, stream=action == "streamGenerateContent")

    def apply_auth(self, headers: Dict[str, str], config: ProviderConfig, mode: str) -> None:
        set_auth_header(headers, config, default_header="x-goog-api-key", default_prefix="")
        set_json_content(headers)

    def stream_headers(self, config: ProviderConfig) -> Dict[str, str]:
        return {STREAM_HEADER: "true"}

    # ----------------------------------------------------------------- chat
    def encode_chat(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        options = request.options or {}
        system_parts: List[Dict[str, str]] = []
        system_prompt = options.get(OPTION_SYSTEM_PROMPT)
        if isinstance(system_prompt, str) and system_prompt:
            system_parts.append({"text": system_prompt})

        messages = list(request.messages)
        if not messages and request.prompt:
            messages = [Message(role="user", content=request.prompt)]
        contents: List[Dict[str, Any]] = []
        for message in messages:
            if message.role == "system":
                if message.text():
                    system_parts.append({"text": message.text()})
                continue
            role = "model" if message.role == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": message.text()}]})

        payload: Dict[str, Any] = {"contents": contents}
        if system_parts:
            payload["system_instruction"] = {"parts": system_parts}

        generation: Dict[str, Any] = {}
        if request.temperature:
            generation["temperature"] = request.temperature
        if request.max_tokens:
            generation["maxOutputTokens"] = request.max_tokens
        for option, field in _GENERATION_OPTIONS.items():
            if option in options:
                generation[field] = options[option]
        if request.schema is not None:
            generation["responseMimeType"] = "application/json"
            generation["responseSchema"] = normalize_schema(request.schema)
        if generation:
            payload["generationConfig"] = generation

        merge_options(payload, options, _SKIP_OPTIONS)
        return marshal_with_override(extract_payload_map(options), payload)

    def decode_chat(self, config: ProviderConfig, body: bytes) -> ChatResponse:
        data = load_json_object(body, "google response")
        raise_for_error_object(config, data)
        candidates = [as_mapping(c) for c in as_list(data.get("candidates"))]
        if not candidates:
            raise DecodeError("no candidates in google response")
        candidate = candidates[0]
        usage = as_mapping(data.get("usageMetadata"))
        return ChatResponse(
            id=str(data.get("responseId") or ""),
            object="chat.completion",
            model=str(data.get("modelVersion") or config.model),
            choices=[
                ChatChoice(
                    index=0,
                    message=Message(role="assistant", content=_candidate_text(candidate)),
                    finish_reason=str(candidate.get("finishReason") or "").lower(),
                )
            ],
            usage=Usage(
                prompt_tokens=int(usage.get("promptTokenCount") or 0),
                completion_tokens=int(usage.get("candidatesTokenCount") or 0),
                total_tokens=int(usage.get("totalTokenCount") or 0),
            ),
        )

    # ---------------------------------------------------------------- media
    def encode_media(self, config: ProviderConfig, mode: str, request: MediaRequest) -> bytes:
        if mode not in _ACTIONS:
            raise UnsupportedError(f"unsupported media mode for google adaptor: {mode}")
        parameters: Dict[str, Any] = {"sampleCount": request.n or 1}
        if request.size:
            parameters["aspectRatio"] = request.size
        if mode == MODE_VIDEO:
            if request.duration:
                parameters["durationSeconds"] = request.duration
            if request.seed:
                parameters["seed"] = request.seed
        negative = get_string_extra(request.extra, "negative_prompt")
        if negative:
            parameters["negativePrompt"] = negative
        person = get_string_extra(request.extra, "person_generation")
        if person:
            parameters["personGeneration"] = person
        payload = {"instances": [{"prompt": request.prompt}], "parameters": parameters}
        return marshal_with_override(extract_payload_map(request.extra), payload)

    def decode_media(self, config: ProviderConfig, mode: str, body: bytes) -> MediaResponse:
        data = load_json_object(body, "google media response")
        raise_for_error_object(config, data)
        name = data.get("name")
        if isinstance(name, str) and name:
            return MediaResponse(task_id=name, status="processing")
        for prediction in as_list(data.get("predictions")):
            url = _prediction_url(as_mapping(prediction))
            if url:
                return MediaResponse(status="completed", url=url)
        raise DecodeError("empty google media response")

    # ----------------------------------------------------------------- task
    def resolve_task_status_url(self, task_id: str, config: ProviderConfig) -> str:
        parts = urlsplit(self._base(config))
        root = urlunsplit(parts._replace(path=_MODEL_ACTION.sub("", parts.path.rstrip("/")), query=""))
        return with_path_suffix(root, "/" + task_id.strip("/"), ())

    def decode_task_status(self, config: ProviderConfig, body: bytes) -> TaskStatusResponse:
        data = load_json_object(body, "google operation")
        output = TaskStatusOutput(task_id=str(data.get("name") or ""), task_status="processing")
        error = as_mapping(data.get("error"))
        if error.get("message"):
            output.task_status = "failed"
            output.message = str(error["message"])
        elif data.get("done"):
            output.task_status = "completed"
            output.video_url = _operation_video_url(as_mapping(data.get("response")))
        return TaskStatusResponse(output=output)

    # --------------------------------------------------------------- stream
    def prepare_stream_request(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        return self.encode_chat(config, dataclasses.replace(request, stream=True))

    def parse_chunk(self, chunk: bytes) -> ChunkResult:
        text = chunk.strip()
        if not text:
            return ChunkResult.skip()
        event = load_stream_chunk(text)
        error = as_mapping(event.get("error"))
        if error:
            return ChunkResult.error(str(error.get("message") or "google stream error"))
        for candidate in as_list(event.get("candidates")):
            content = _candidate_text(as_mapping(candidate))
            if content:
                return ChunkResult.ok(content)
        return ChunkResult.skip()


def _prediction_url(prediction: Mapping[str, Any]) -> str:
    for key in ("url", "uri", "gcsUri"):
        value = prediction.get(key)
        if isinstance(value, str) and value:
            return value
    encoded = prediction.get("bytesBase64Encoded")
    if isinstance(encoded, str) and encoded:
        mime = prediction.get("mimeType") or "image/png"
        return f"data:{mime};base64,{encoded}"
    video = as_mapping(prediction.get("video"))
    return str(video.get("uri") or "")


def _operation_video_url(response: Mapping[str, Any]) -> str:
    for prediction in as_list(response.get("predictions")):
        url = _prediction_url(as_mapping(prediction))
        if url:
            return url
    generated = as_mapping(response.get("generateVideoResponse"))
    for sample in as_list(generated.get("generatedSamples")):
        url = _prediction_url(as_mapping(sample))
        if url:
            return url
    return ""


__all__ = ["GoogleAdaptor", "DEFAULT_BASE_URL", "STREAM_HEADER"]
