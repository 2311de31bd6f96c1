"""Jimeng (Volcengine visual) video adaptor.

Purpose:
- Submit asynchronous video jobs (``CVSync2AsyncSubmitTask``) and poll them
  (``CVSync2AsyncGetResult``). Polling is a POST carrying ``req_key`` and
  ``task_id``, so the adaptor implements the custom task request capability.

Notes:
- Success responses carry ``code == 10000``; a missing code counts as success.
- Chat and image modes are unsupported.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Tuple

from ..base.constants import MODE_VIDEO
from ..base.errors import RelayError, UnsupportedError
from ..base.models import (
    ChatRequest,
    ChatResponse,
    MediaRequest,
    MediaResponse,
    TaskStatusOutput,
    TaskStatusResponse,
)
from ..base.provider_config import ProviderConfig
from ..base.utils import (
    IN_BODY_ERROR_STATUS,
    as_mapping,
    dumps,
    extract_payload_map,
    first_base,
    get_int_extra,
    get_string_extra,
    get_string_list_extra,
    load_json_object,
    marshal_with_override,
    set_auth_header,
    set_json_content,
    with_query,
)

DEFAULT_BASE_URL = "https://visual.volcengineapi.com"
DEFAULT_REQ_KEY = "jimeng_ti2v_v30_pro"
API_VERSION = "2022-08-31"
SUBMIT_ACTION = "CVSync2AsyncSubmitTask"
RESULT_ACTION = "CVSync2AsyncGetResult"
SUCCESS_CODE = 10000


def _action_url(base: str, action: str) -> str:
    return with_query(base, Action=action, Version=API_VERSION)


def _raise_for_code(config: ProviderConfig, data: Mapping[str, Any]) -> None:
    code = data.get("code")
    if code is None or code == SUCCESS_CODE:
        return
    message = data.get("message") or f"jimeng error code {code}"
    raise RelayError(code=IN_BODY_ERROR_STATUS, message=str(message), provider=config.name)


class JimengAdaptor:
    """Adaptor for Jimeng asynchronous video generation."""

    def __init__(self, base_url: str = "") -> None:
        self.base_url = base_url

    def _base(self, config: ProviderConfig) -> str:
        return first_base(config.base_url, self.base_url, DEFAULT_BASE_URL)

    def resolve_url(self, mode: str, config: ProviderConfig) -> str:
        if mode != MODE_VIDEO:
            raise UnsupportedError(f"unsupported mode for jimeng adaptor: {mode}")
        return _action_url(self._base(config), SUBMIT_ACTION)

    def apply_auth(self, headers: Dict[str, str], config: ProviderConfig, mode: str) -> None:
        set_auth_header(headers, config)
        set_json_content(headers)

    def encode_chat(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        raise UnsupportedError("chat mode not supported for jimeng adaptor")

    def decode_chat(self, config: ProviderConfig, body: bytes) -> ChatResponse:
        raise UnsupportedError("chat mode not supported for jimeng adaptor")

    # ---------------------------------------------------------------- media
    def encode_media(self, config: ProviderConfig, mode: str, request: MediaRequest) -> bytes:
        if mode != MODE_VIDEO:
            raise UnsupportedError(f"{mode} mode not supported for jimeng adaptor")
        extra = request.extra or {}
        payload: Dict[str, Any] = {
            "req_key": get_string_extra(extra, "req_key") or request.model or config.model or DEFAULT_REQ_KEY,
            "prompt": request.prompt,
            "seed": request.seed if request.seed else -1,
        }
        if request.size:
            payload["aspect_ratio"] = request.size
        frames = get_int_extra(extra, "frames")
        if frames:
            payload["frames"] = frames
        image_urls = get_string_list_extra(extra, "image_urls")
        single = get_string_extra(extra, "image_url")
        if single:
            image_urls = [single, *image_urls]
        if image_urls:
            payload["image_urls"] = image_urls
        return marshal_with_override(extract_payload_map(extra), payload)

    def decode_media(self, config: ProviderConfig, mode: str, body: bytes) -> MediaResponse:
        data = load_json_object(body, "jimeng submit response")
        _raise_for_code(config, data)
        result = as_mapping(data.get("data"))
        return MediaResponse(
            task_id=str(result.get("task_id") or ""),
            status="submitted",
            request_id=str(data.get("request_id") or ""),
        )

    # ----------------------------------------------------------------- task
    def resolve_task_status_url(self, task_id: str, config: ProviderConfig) -> str:
        return _action_url(self._base(config), RESULT_ACTION)

    def prepare_task_status_request(self, config: ProviderConfig, task_id: str) -> Tuple[str, bytes]:
        return "POST", dumps({"req_key": config.model or DEFAULT_REQ_KEY, "task_id": task_id})

    def decode_task_status(self, config: ProviderConfig, body: bytes) -> TaskStatusResponse:
        data = load_json_object(body, "jimeng task status")
        _raise_for_code(config, data)
        result = as_mapping(data.get("data"))
        return TaskStatusResponse(
            request_id=str(data.get("request_id") or ""),
            output=TaskStatusOutput(
                task_id=str(result.get("task_id") or ""),
                task_status=str(result.get("status") or ""),
                video_url=str(result.get("video_url") or ""),
                message=str(data.get("message") or "") if result.get("status") == "failed" else "",
            ),
        )


__all__ = ["JimengAdaptor", "DEFAULT_BASE_URL", "DEFAULT_REQ_KEY", "SUBMIT_ACTION", "RESULT_ACTION"]
