"""StreamCapable Protocol (single-class module).

Capability for adaptors that can stream chat completions.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..models import ChatRequest
from ..provider_config import ProviderConfig
from .chunk import ChunkResult


@runtime_checkable
class StreamCapable(Protocol):
    """Streaming chat capability.

    ``parse_chunk`` receives the data payload of one decoded stream event and
    must not keep state between calls.
    """

    def prepare_stream_request(self, config: ProviderConfig, request: ChatRequest) -> bytes:  # pragma: no cover - interface
        """Serialize a streaming chat request (the vendor stream flag set)."""
        ...

    def parse_chunk(self, chunk: bytes) -> ChunkResult:  # pragma: no cover - interface
        """Classify one event payload into text / end / skip / error."""
        ...


__all__ = ["StreamCapable"]
