"""Adaptor Protocol (single-class module).

Every vendor adaptor implements this contract: URL resolution per mode,
authentication headers, and chat / media payload conversion. Optional
behaviour is expressed with the capability protocols beside this module.
"""

from __future__ import annotations

from typing import Dict, Protocol, runtime_checkable

from ..models import ChatRequest, ChatResponse, MediaRequest, MediaResponse
from ..provider_config import ProviderConfig


@runtime_checkable
class Adaptor(Protocol):
    """Vendor-specific conversions and routing.

    Implementations must be stateless so one instance can serve concurrent
    relay calls.
    """

    def resolve_url(self, mode: str, config: ProviderConfig) -> str:  # pragma: no cover - interface
        """Return the endpoint for ``mode``.

        Raises ``UnsupportedError`` when the vendor does not serve the mode.
        """
        ...

    def apply_auth(self, headers: Dict[str, str], config: ProviderConfig, mode: str) -> None:  # pragma: no cover - interface
        """Set authentication and content headers in ``headers`` (mutated in place)."""
        ...

    def encode_chat(self, config: ProviderConfig, request: ChatRequest) -> bytes:  # pragma: no cover - interface
        """Serialize a unified chat request into the vendor payload."""
        ...

    def decode_chat(self, config: ProviderConfig, body: bytes) -> ChatResponse:  # pragma: no cover - interface
        """Parse a vendor chat response body."""
        ...

    def encode_media(self, config: ProviderConfig, mode: str, request: MediaRequest) -> bytes:  # pragma: no cover - interface
        """Serialize a unified media request for ``mode`` (image or video)."""
        ...

    def decode_media(self, config: ProviderConfig, mode: str, body: bytes) -> MediaResponse:  # pragma: no cover - interface
        """Parse a vendor media response body."""
        ...


__all__ = ["Adaptor"]
