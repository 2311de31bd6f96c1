"""Tests for wrapping a vendor adaptor with OpenAI-dialect chat."""

from __future__ import annotations

import json

from omnirelay.ali.adaptor import AliAdaptor
from omnirelay.base.interfaces import StreamCapable, TaskCapable
from omnirelay.base.models import ChatRequest, Message
from omnirelay.base.openai_style_parts import (
    OpenAIChatStreamWrapper,
    OpenAIChatWrapper,
    is_openai_tagged,
    wrap_chat_with_openai,
)
from omnirelay.base.provider_config import ProviderConfig
from omnirelay.jimeng.adaptor import JimengAdaptor
from omnirelay.openai.adaptor import OpenAIAdaptor


def test_openai_adaptor_is_not_wrapped() -> None:
    adaptor = OpenAIAdaptor()
    assert is_openai_tagged(adaptor)  # nosec B101
    assert wrap_chat_with_openai(adaptor) is adaptor  # nosec B101


def test_stream_capable_base_gets_stream_wrapper() -> None:
    wrapped = wrap_chat_with_openai(AliAdaptor())
    assert isinstance(wrapped, OpenAIChatStreamWrapper)  # nosec B101
    assert is_openai_tagged(wrapped)  # nosec B101
    assert wrap_chat_with_openai(wrapped) is wrapped  # nosec B101
    assert isinstance(wrapped, TaskCapable)  # nosec B101


def test_chat_uses_openai_dialect_while_url_stays_vendor() -> None:
    wrapped = wrap_chat_with_openai(AliAdaptor())
    cfg = ProviderConfig(model="qwen")
    payload = json.loads(wrapped.encode_chat(cfg, ChatRequest(model="qwen", messages=[Message(role="user", content="hi")])))
    assert payload == {"model": "qwen", "messages": [{"role": "user", "content": "hi"}]}  # nosec B101
    assert wrapped.resolve_url("chat", cfg).endswith("/text-generation/generation")  # nosec B101


def test_non_streaming_base_gets_plain_wrapper() -> None:
    wrapped = wrap_chat_with_openai(JimengAdaptor())
    assert type(wrapped) is OpenAIChatWrapper  # nosec B101
    assert not isinstance(wrapped, StreamCapable)  # nosec B101
    method, _ = wrapped.prepare_task_status_request(ProviderConfig(), "t")
    assert method == "POST"  # nosec B101
