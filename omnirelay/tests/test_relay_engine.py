"""Relay engine tests against ``httpx.MockTransport``."""

from __future__ import annotations

import httpx
import pytest

from omnirelay.ali.adaptor import AliAdaptor
from omnirelay.anthropic.adaptor import AnthropicAdaptor
from omnirelay.base.cancellation import CancellationToken, CancelledError
from omnirelay.base.errors import ErrorCode, RelayError, RequestError, UnsupportedError
from omnirelay.base.models import ChatRequest, MediaRequest, Message
from omnirelay.base.provider_config import ProviderConfig
from omnirelay.base.streaming import TokenStream
from omnirelay.google.adaptor import GoogleAdaptor
from omnirelay.jimeng.adaptor import JimengAdaptor
from omnirelay.openai.adaptor import OpenAIAdaptor
from omnirelay.relay import Relay, stream_format_for

CHAT_OK = {
    "id": "c1",
    "choices": [{"message": {"role": "assistant", "content": "pong"}, "finish_reason": "stop"}],
    "usage": {"prompt_tokens": 1, "completion_tokens": 1, "total_tokens": 2},
}


def _config(recorder, **kwargs) -> ProviderConfig:
    kwargs.setdefault("name", "openai")
    kwargs.setdefault("api_key", "sk-test")
    kwargs.setdefault("base_url", "http://relay.test/v1")
    return ProviderConfig(http_client=recorder.client(), **kwargs)


def _ping(model: str = "gpt") -> ChatRequest:
    return ChatRequest(model=model, messages=[Message(role="user", content="ping")])


def test_chat_round_trip(recorder) -> None:
    recorder.queue(json_body=CHAT_OK)
    resp = Relay().chat(OpenAIAdaptor(), _config(recorder), _ping())
    assert resp.first_content() == "pong"  # nosec B101 - asserts are appropriate in unit tests
    sent = recorder.last
    assert sent.method == "POST"  # nosec B101
    assert str(sent.url) == "http://relay.test/v1/chat/completions"  # nosec B101
    assert sent.headers["Authorization"] == "Bearer sk-test"  # nosec B101
    assert recorder.last_json()["messages"] == [{"role": "user", "content": "ping"}]  # nosec B101


def test_config_headers_override_adaptor_headers(recorder) -> None:
    recorder.queue(json_body=CHAT_OK)
    cfg = _config(recorder, headers={"Content-Type": "application/vnd.test+json", "X-Extra": "1"})
    Relay().chat(OpenAIAdaptor(), cfg, _ping())
    assert recorder.last.headers["Content-Type"] == "application/vnd.test+json"  # nosec B101
    assert recorder.last.headers["X-Extra"] == "1"  # nosec B101


def test_accepted_status_counts_as_success(recorder) -> None:
    recorder.queue(202, json_body=CHAT_OK)
    assert Relay().chat(OpenAIAdaptor(), _config(recorder), _ping()).first_content() == "pong"  # nosec B101


@pytest.mark.parametrize(("status", "code"), [(201, ErrorCode.UNKNOWN), (429, ErrorCode.RATE_LIMIT), (503, ErrorCode.UNAVAILABLE)])
def test_non_success_status_raises_relay_error(recorder, relay_events, status: int, code: ErrorCode) -> None:
    recorder.queue(status, content=b"vendor says no")
    with pytest.raises(RelayError) as ei:
        Relay().chat(OpenAIAdaptor(), _config(recorder, name="groq"), _ping())
    err = ei.value
    assert (err.code, err.message, err.provider) == (status, "vendor says no", "groq")  # nosec B101
    assert err.error_code is code  # nosec B101
    failures = [e for e in relay_events if e["event"] == "relay.error"]
    assert failures and failures[-1]["status"] == status  # nosec B101
    assert failures[-1]["error_code"] == code.value  # nosec B101


def test_client_selection_prefers_config_client(recorder) -> None:
    relay_side = type(recorder)().queue(json_body=CHAT_OK)
    recorder.queue(json_body=CHAT_OK)
    relay = Relay(client=relay_side.client())
    relay.chat(OpenAIAdaptor(), _config(recorder), _ping())
    assert len(recorder.requests) == 1 and not relay_side.requests  # nosec B101
    relay.chat(OpenAIAdaptor(), ProviderConfig(name="openai", base_url="http://relay.test/v1"), _ping())
    assert len(relay_side.requests) == 1  # nosec B101


def test_missing_config_and_requests_are_rejected(recorder) -> None:
    relay = Relay()
    with pytest.raises(RequestError):
        relay.chat(OpenAIAdaptor(), None, _ping())
    with pytest.raises(RequestError):
        relay.media(OpenAIAdaptor(), _config(recorder), None)
    with pytest.raises(UnsupportedError):
        relay.media(OpenAIAdaptor(), _config(recorder), MediaRequest(type="audio", prompt="x"))
    assert not recorder.requests  # nosec B101


def test_transport_errors_propagate_unchanged() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    cfg = ProviderConfig(name="openai", base_url="http://relay.test/v1")
    cfg.http_client = httpx.Client(transport=httpx.MockTransport(refuse))
    with pytest.raises(httpx.ConnectError):
        Relay().chat(OpenAIAdaptor(), cfg, _ping())


def test_cancelled_token_prevents_the_request(recorder) -> None:
    token = CancellationToken()
    token.cancel("caller gave up")
    with pytest.raises(CancelledError):
        Relay().chat(OpenAIAdaptor(), _config(recorder), _ping(), cancellation_token=token)
    assert not recorder.requests  # nosec B101


def test_openai_protocol_forces_openai_dialect_on_vendor_url(recorder) -> None:
    recorder.queue(json_body=CHAT_OK)
    cfg = _config(
        recorder,
        name="anthropic",
        base_url="http://claude.test/v1/messages",
        auth_header="x-api-key",
        chat_protocol="openai",
    )
    resp = Relay().chat(AnthropicAdaptor(), cfg, _ping("claude"))
    assert resp.first_content() == "pong"  # nosec B101
    assert str(recorder.last.url) == "http://claude.test/v1/messages"  # nosec B101
    assert recorder.last.headers["x-api-key"] == "sk-test"  # nosec B101
    body = recorder.last_json()
    assert body["messages"] == [{"role": "user", "content": "ping"}] and "max_tokens" not in body  # nosec B101


def test_model_from_request_fills_empty_config_model(recorder) -> None:
    recorder.queue(json_body={"candidates": [{"content": {"parts": [{"text": "hi"}]}}]})
    cfg = _config(recorder, name="google", base_url="http://gemini.test/v1beta")
    Relay().chat(GoogleAdaptor(), cfg, _ping("gemini-x"))
    assert str(recorder.last.url) == "http://gemini.test/v1beta/models/gemini-x:generateContent"  # nosec B101
    assert cfg.model == ""  # nosec B101


def test_media_submission(recorder) -> None:
    recorder.queue(json_body={"code": 10000, "data": {"task_id": "j-1"}})
    cfg = _config(recorder, name="jimeng", base_url="http://jimeng.test")
    resp = Relay().media(JimengAdaptor(), cfg, MediaRequest(type="video", prompt="a city"))
    assert resp.task_id == "j-1"  # nosec B101
    assert recorder.last.url.params["Action"] == "CVSync2AsyncSubmitTask"  # nosec B101


def test_task_status_get_fills_task_id(recorder) -> None:
    recorder.queue(201, json_body={"request_id": "r", "output": {"task_status": "RUNNING"}})
    cfg = _config(recorder, name="ali", base_url="http://ali.test")
    status = Relay().task_status(AliAdaptor(), cfg, "t-9")
    assert recorder.last.method == "GET" and recorder.last.content == b""  # nosec B101
    assert str(recorder.last.url) == "http://ali.test/api/v1/tasks/t-9"  # nosec B101
    assert (status.output.task_id, status.output.task_status) == ("t-9", "RUNNING")  # nosec B101


def test_task_status_custom_post(recorder) -> None:
    recorder.queue(json_body={"code": 10000, "data": {"task_id": "j-1", "status": "done", "video_url": "http://v"}})
    cfg = _config(recorder, name="jimeng", base_url="http://jimeng.test", model="jimeng_key")
    status = Relay().task_status(JimengAdaptor(), cfg, "j-1")
    assert recorder.last.method == "POST"  # nosec B101
    assert recorder.last_json() == {"req_key": "jimeng_key", "task_id": "j-1"}  # nosec B101
    assert status.output.video_url == "http://v"  # nosec B101


def test_task_status_requires_capability_and_id(recorder) -> None:
    with pytest.raises(UnsupportedError, match="task status"):
        Relay().task_status(OpenAIAdaptor(), _config(recorder), "t")
    with pytest.raises(RequestError):
        Relay().task_status(AliAdaptor(), _config(recorder), "")


def test_stream_returns_live_body(recorder, relay_events) -> None:
    recorder.queue(
        content=b'data: {"output": {"choices": [{"message": {"content": "he"}}]}}\n\n'
        b'data: {"output": {"choices": [{"message": {"content": "y"}, "finish_reason": "stop"}]}}\n\n',
        headers={"Content-Type": "text/event-stream"},
    )
    cfg = _config(recorder, name="ali", base_url="http://ali.test", model="qwen")
    adaptor = AliAdaptor()
    body = Relay().stream(adaptor, cfg, ChatRequest(prompt="hi"))
    assert recorder.last.headers["X-DashScope-SSE"] == "enable"  # nosec B101
    assert "X-DashScope-SSE" not in cfg.headers  # nosec B101
    assert recorder.last_json()["parameters"]["incremental_output"] is True  # nosec B101
    tokens = [t.text for t in TokenStream(body, adaptor, stream_format=stream_format_for(adaptor))]
    assert tokens == ["he", "y"]  # nosec B101
    assert body.closed  # nosec B101
    assert any(e["event"] == "stream.open" for e in relay_events)  # nosec B101


def test_stream_error_status_raises(recorder) -> None:
    recorder.queue(401, content=b'{"error": "bad key"}')
    with pytest.raises(RelayError) as ei:
        Relay().stream(OpenAIAdaptor(), _config(recorder), _ping())
    assert ei.value.code == 401 and "bad key" in ei.value.message  # nosec B101


def test_stream_accepts_only_200(recorder) -> None:
    recorder.queue(202, content=b"data: [DONE]\n\n")
    with pytest.raises(RelayError):
        Relay().stream(OpenAIAdaptor(), _config(recorder), _ping())


def test_stream_requires_capability(recorder) -> None:
    with pytest.raises(UnsupportedError, match="streaming"):
        Relay().stream(JimengAdaptor(), _config(recorder), _ping())


def test_stream_uses_sse_unless_declared() -> None:
    from omnirelay.ollama.adaptor import OllamaAdaptor

    assert stream_format_for(OpenAIAdaptor()) == "sse"  # nosec B101
    assert stream_format_for(OllamaAdaptor()) == "ndjson"  # nosec B101
