"""omnirelay package

Unified relay for chat, image and video generation across AI providers.

Purpose:
    One request / response vocabulary (``ChatRequest``, ``MediaRequest``...)
    translated per vendor by adaptors, executed by a single ``Relay`` and
    wrapped for everyday use by the ``LLM`` facade.

Public API (re-exported):
    - Version: ``__version__``
    - Facade: :func:`create_llm`, :class:`LLM`
    - Engine: :class:`Relay`
    - Registry: :class:`Registry`, :class:`ProviderSpec`, ``register_provider``,
      ``register_adaptor``
    - DTOs and errors from :mod:`omnirelay.base`
"""

from .base import (
    CancellationToken,
    CancelledError,
    ChatRequest,
    ChatResponse,
    DecodeError,
    ErrorCode,
    MediaRequest,
    MediaResponse,
    MediaType,
    Message,
    OmniRelayError,
    ProviderConfig,
    ProviderSpec,
    ProviderType,
    Registry,
    RelayError,
    RequestError,
    StreamDecodeError,
    TaskStatusResponse,
    TokenStream,
    UnknownProviderError,
    UnsupportedError,
    get_default_registry,
    register_adaptor,
    register_provider,
)
from .relay import Relay
from .service import LLM, create_llm

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "LLM",
    "create_llm",
    "Relay",
    "Registry",
    "ProviderSpec",
    "ProviderType",
    "ProviderConfig",
    "get_default_registry",
    "register_provider",
    "register_adaptor",
    "Message",
    "ChatRequest",
    "ChatResponse",
    "MediaType",
    "MediaRequest",
    "MediaResponse",
    "TaskStatusResponse",
    "TokenStream",
    "CancellationToken",
    "CancelledError",
    "ErrorCode",
    "OmniRelayError",
    "RelayError",
    "RequestError",
    "UnsupportedError",
    "DecodeError",
    "StreamDecodeError",
    "UnknownProviderError",
]
