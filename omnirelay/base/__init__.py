"""
Relay Base Package

Exports the provider-agnostic contracts, DTOs, registry and streaming
primitives shared by every vendor adaptor.

- Interfaces: adaptor protocol plus optional capability protocols
- Models (DTOs): unified chat / media / task status records
- Registry: provider specs and lazy adaptor construction
- Streaming: frame decoders, live body handle and token stream
"""

from .cancellation import CancellationToken, CancelledError
from .errors import (
    DecodeError,
    ErrorCode,
    OmniRelayError,
    RelayError,
    RequestError,
    StreamDecodeError,
    UnknownProviderError,
    UnsupportedError,
)
from .interfaces import (
    Adaptor,
    ChunkResult,
    ChunkSignal,
    CustomTaskRequest,
    ProtocolTagged,
    StreamCapable,
    StreamFraming,
    StreamHeaders,
    TaskCapable,
)
from .models import (
    ChatChoice,
    ChatRequest,
    ChatResponse,
    MediaRequest,
    MediaResponse,
    MediaType,
    Message,
    TaskStatusOutput,
    TaskStatusResponse,
    Usage,
)
from .provider_config import ProviderConfig
from .registry import ProviderSpec, ProviderType, Registry, get_default_registry, register_adaptor, register_provider
from .streaming import StreamBody, StreamToken, TokenStream
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    # Models
    "Message",
    "ChatRequest",
    "ChatChoice",
    "ChatResponse",
    "Usage",
    "MediaType",
    "MediaRequest",
    "MediaResponse",
    "TaskStatusOutput",
    "TaskStatusResponse",
    "ProviderConfig",
    # Interfaces
    "Adaptor",
    "ChunkResult",
    "ChunkSignal",
    "StreamCapable",
    "StreamFraming",
    "StreamHeaders",
    "TaskCapable",
    "CustomTaskRequest",
    "ProtocolTagged",
    # Registry
    "ProviderType",
    "ProviderSpec",
    "Registry",
    "get_default_registry",
    "register_provider",
    "register_adaptor",
    # Errors
    "ErrorCode",
    "OmniRelayError",
    "RelayError",
    "RequestError",
    "UnsupportedError",
    "DecodeError",
    "StreamDecodeError",
    "UnknownProviderError",
    # Runtime
    "CancellationToken",
    "CancelledError",
    "TimeoutConfig",
    "get_timeout_config",
    "StreamBody",
    "StreamToken",
    "TokenStream",
]
