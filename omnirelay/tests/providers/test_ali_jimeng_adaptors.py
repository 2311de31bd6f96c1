"""DashScope (ali) and Jimeng adaptor tests."""

from __future__ import annotations

import json

import pytest

from omnirelay.ali.adaptor import CHAT_PATH, DEFAULT_BASE_URL, VIDEO_PATH, AliAdaptor
from omnirelay.base.errors import RelayError, UnsupportedError
from omnirelay.base.interfaces import ChunkSignal, CustomTaskRequest, StreamCapable, TaskCapable
from omnirelay.base.models import ChatRequest, MediaRequest
from omnirelay.base.provider_config import ProviderConfig
from omnirelay.jimeng.adaptor import DEFAULT_REQ_KEY, JimengAdaptor

ALI = ProviderConfig(name="ali", model="qwen-plus", api_key="k")


def test_ali_urls_and_headers() -> None:
    adaptor = AliAdaptor()
    assert adaptor.resolve_url("chat", ALI).endswith("/api/v1/services/aigc/text-generation/generation")  # nosec B101
    assert adaptor.resolve_task_status_url("t-1", ALI) == "https://dashscope.aliyuncs.com/api/v1/tasks/t-1"  # nosec B101
    with pytest.raises(UnsupportedError):
        adaptor.resolve_url("image", ALI)
    headers: dict = {}
    adaptor.apply_auth(headers, ALI, "video")
    assert headers["X-DashScope-Async"] == "enable"  # nosec B101
    assert headers["Authorization"] == "Bearer k"  # nosec B101
    assert adaptor.stream_headers(ALI) == {"X-DashScope-SSE": "enable"}  # nosec B101


def test_ali_encode_chat_parameters() -> None:
    req = ChatRequest(prompt="hi", temperature=0.2, options={"system_prompt": "sys", "top_p": 0.9}, stream=True)
    payload = json.loads(AliAdaptor().encode_chat(ALI, req))
    assert payload["model"] == "qwen-plus"  # nosec B101
    assert payload["input"]["messages"][0] == {"role": "system", "content": "sys"}  # nosec B101
    assert payload["parameters"] == {"incremental_output": True, "temperature": 0.2, "top_p": 0.9}  # nosec B101


def test_ali_decode_chat_and_in_body_error() -> None:
    body = json.dumps(
        {
            "request_id": "r1",
            "output": {"choices": [{"message": {"content": "hello"}, "finish_reason": "stop"}]},
            "usage": {"input_tokens": 1, "output_tokens": 2, "total_tokens": 3},
        }
    ).encode()
    resp = AliAdaptor().decode_chat(ALI, body)
    assert (resp.id, resp.first_content(), resp.usage.total_tokens) == ("r1", "hello", 3)  # nosec B101
    with pytest.raises(RelayError) as ei:
        AliAdaptor().decode_chat(ALI, b'{"code": "InvalidApiKey", "message": "bad key"}')
    assert ei.value.message == "bad key" and ei.value.provider == "ali"  # nosec B101


def test_ali_video_and_task() -> None:
    req = MediaRequest(type="video", prompt="sea", size="1280*720", extra={"img_url": "http://i/1.png"})
    payload = json.loads(AliAdaptor().encode_media(ALI, "video", req))
    assert payload["input"] == {"prompt": "sea", "img_url": "http://i/1.png"}  # nosec B101
    assert payload["parameters"] == {"size": "1280*720"}  # nosec B101
    submitted = AliAdaptor().decode_media(ALI, "video", b'{"output": {"task_id": "t1", "task_status": "PENDING"}}')
    assert (submitted.task_id, submitted.status) == ("t1", "pending")  # nosec B101
    status = AliAdaptor().decode_task_status(
        ALI, b'{"request_id": "r", "output": {"task_id": "t1", "task_status": "SUCCEEDED", "video_url": "http://v"}}'
    )
    assert status.output.video_url == "http://v"  # nosec B101


def test_ali_parse_chunk() -> None:
    adaptor = AliAdaptor()
    ok = adaptor.parse_chunk(b'{"output": {"choices": [{"message": {"content": "x"}}]}}')
    assert (ok.signal, ok.text) == (ChunkSignal.OK, "x")  # nosec B101
    end = adaptor.parse_chunk(b'{"output": {"choices": [{"message": {"content": ""}, "finish_reason": "stop"}]}}')
    assert end.signal is ChunkSignal.END  # nosec B101
    assert adaptor.parse_chunk(b'{"code": "Throttling", "message": "slow"}').signal is ChunkSignal.ERROR  # nosec B101


@pytest.mark.parametrize(
    ("base", "mode", "expected"),
    [
        (DEFAULT_BASE_URL, "chat", DEFAULT_BASE_URL + CHAT_PATH),
        (DEFAULT_BASE_URL + CHAT_PATH, "chat", DEFAULT_BASE_URL + CHAT_PATH),
        (DEFAULT_BASE_URL + VIDEO_PATH, "video", DEFAULT_BASE_URL + VIDEO_PATH),
        (DEFAULT_BASE_URL + CHAT_PATH, "video", DEFAULT_BASE_URL + VIDEO_PATH),
    ],
)
def test_ali_resolve_url_is_idempotent(base: str, mode: str, expected: str) -> None:
    assert AliAdaptor().resolve_url(mode, ProviderConfig(base_url=base)) == expected  # nosec B101


def test_ali_task_url_is_idempotent() -> None:
    task_url = DEFAULT_BASE_URL + "/api/v1/tasks/t-1"
    adaptor = AliAdaptor()
    assert adaptor.resolve_task_status_url("t-1", ProviderConfig(base_url=task_url)) == task_url  # nosec B101
    from_chat = ProviderConfig(base_url=DEFAULT_BASE_URL + CHAT_PATH)
    assert adaptor.resolve_task_status_url("t-1", from_chat) == task_url  # nosec B101


@pytest.mark.parametrize("mode", ["video", "task"])
def test_jimeng_action_url_is_idempotent(mode: str) -> None:
    adaptor = JimengAdaptor()
    if mode == "video":
        url = adaptor.resolve_url("video", ProviderConfig())
        again = adaptor.resolve_url("video", ProviderConfig(base_url=url))
    else:
        url = adaptor.resolve_task_status_url("j1", ProviderConfig())
        again = adaptor.resolve_task_status_url("j1", ProviderConfig(base_url=url))
    assert again == url  # nosec B101
    assert url.count("Action=") == 1  # nosec B101


def test_jimeng_capabilities_and_url() -> None:
    adaptor = JimengAdaptor()
    assert isinstance(adaptor, TaskCapable) and isinstance(adaptor, CustomTaskRequest)  # nosec B101
    assert not isinstance(adaptor, StreamCapable)  # nosec B101
    assert adaptor.resolve_url("video", ProviderConfig()) == (  # nosec B101
        "https://visual.volcengineapi.com?Action=CVSync2AsyncSubmitTask&Version=2022-08-31"
    )
    with pytest.raises(UnsupportedError):
        adaptor.encode_chat(ProviderConfig(), ChatRequest(prompt="x"))


def test_jimeng_encode_media() -> None:
    req = MediaRequest(
        type="video",
        prompt="city",
        size="16:9",
        extra={"frames": 121, "image_url": "http://a", "image_urls": ["http://b"]},
    )
    payload = json.loads(JimengAdaptor().encode_media(ProviderConfig(), "video", req))
    assert payload == {  # nosec B101
        "req_key": DEFAULT_REQ_KEY,
        "prompt": "city",
        "seed": -1,
        "aspect_ratio": "16:9",
        "frames": 121,
        "image_urls": ["http://a", "http://b"],
    }


def test_jimeng_submit_and_poll() -> None:
    adaptor = JimengAdaptor()
    submitted = adaptor.decode_media(
        ProviderConfig(), "video", b'{"code": 10000, "data": {"task_id": "j1"}, "request_id": "r"}'
    )
    assert (submitted.task_id, submitted.status) == ("j1", "submitted")  # nosec B101
    method, body = adaptor.prepare_task_status_request(ProviderConfig(model="jimeng_x"), "j1")
    assert method == "POST"  # nosec B101
    assert json.loads(body) == {"req_key": "jimeng_x", "task_id": "j1"}  # nosec B101
    failed = adaptor.decode_task_status(
        ProviderConfig(), b'{"code": 10000, "message": "bad prompt", "data": {"status": "failed"}}'
    )
    assert (failed.output.task_status, failed.output.message) == ("failed", "bad prompt")  # nosec B101
    with pytest.raises(RelayError):
        adaptor.decode_media(ProviderConfig(name="jimeng"), "video", b'{"code": 50400, "message": "denied"}')
