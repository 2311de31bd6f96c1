"""OpenAI-dialect chat wrapper.

Purpose:
- Let a vendor that exposes an OpenAI-compatible chat endpoint keep its own
  adaptor for everything else. Chat encode/decode (and chat streaming, when
  the base adaptor streams) go through ``OpenAIAdaptor``; URL resolution,
  authentication, media and task capabilities are forwarded to the base.

Notes:
- Composition only: the wrapper never inherits from the base adaptor. The
  base's task and stream-header methods are bound on the instance, so
  capability checks (``isinstance(x, TaskCapable)``) see exactly what the
  base provides.
"""

from __future__ import annotations

from typing import Any, Dict

from ...openai.adaptor import OpenAIAdaptor
from ..constants import PROTOCOL_OPENAI, STREAM_FORMAT_SSE
from ..interfaces import Adaptor, ChunkResult, ProtocolTagged, StreamCapable
from ..models import ChatRequest, ChatResponse, MediaRequest, MediaResponse
from ..provider_config import ProviderConfig

# Capability methods taken over from the base adaptor when it has them.
_FORWARDED = (
    "resolve_task_status_url",
    "decode_task_status",
    "prepare_task_status_request",
    "stream_headers",
)


def is_openai_tagged(adaptor: Any) -> bool:
    """True when ``adaptor`` declares the OpenAI chat protocol."""
    return isinstance(adaptor, ProtocolTagged) and str(adaptor.chat_protocol()).lower() == PROTOCOL_OPENAI


class OpenAIChatWrapper:
    """Chat in OpenAI dialect; every other call forwarded to ``base``."""

    def __init__(self, base: Adaptor) -> None:
        self.base = base
        self._chat = OpenAIAdaptor()
        for name in _FORWARDED:
            method = getattr(base, name, None)
            if callable(method):
                setattr(self, name, method)

    def __getattr__(self, name: str) -> Any:
        # Only reached for attributes not defined here.
        if name == "base":
            raise AttributeError(name)
        return getattr(self.base, name)

    def chat_protocol(self) -> str:
        return PROTOCOL_OPENAI

    def resolve_url(self, mode: str, config: ProviderConfig) -> str:
        return self.base.resolve_url(mode, config)

    def apply_auth(self, headers: Dict[str, str], config: ProviderConfig, mode: str) -> None:
        self.base.apply_auth(headers, config, mode)

    def encode_chat(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        return self._chat.encode_chat(config, request)

    def decode_chat(self, config: ProviderConfig, body: bytes) -> ChatResponse:
        return self._chat.decode_chat(config, body)

    def encode_media(self, config: ProviderConfig, mode: str, request: MediaRequest) -> bytes:
        return self.base.encode_media(config, mode, request)

    def decode_media(self, config: ProviderConfig, mode: str, body: bytes) -> MediaResponse:
        return self.base.decode_media(config, mode, body)


class OpenAIChatStreamWrapper(OpenAIChatWrapper):
    """Variant used when the base adaptor streams: streaming also uses the OpenAI dialect."""

    def prepare_stream_request(self, config: ProviderConfig, request: ChatRequest) -> bytes:
        return self._chat.prepare_stream_request(config, request)

    def parse_chunk(self, chunk: bytes) -> ChunkResult:
        return self._chat.parse_chunk(chunk)

    def stream_format(self) -> str:
        return STREAM_FORMAT_SSE


def wrap_chat_with_openai(base: Adaptor) -> Adaptor:
    """Return ``base`` wrapped for OpenAI-dialect chat.

    ``base`` is returned unchanged when it is already OpenAI-tagged or wrapped.
    """
    if isinstance(base, OpenAIChatWrapper) or is_openai_tagged(base):
        return base
    if isinstance(base, StreamCapable):
        return OpenAIChatStreamWrapper(base)
    return OpenAIChatWrapper(base)


__all__ = ["OpenAIChatWrapper", "OpenAIChatStreamWrapper", "wrap_chat_with_openai", "is_openai_tagged"]
