"""StreamHeaders Protocol (single-class module)."""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable

from ..provider_config import ProviderConfig


@runtime_checkable
class StreamHeaders(Protocol):
    """Adaptors that need extra headers on streaming requests.

    The relay merges these into a per-call copy of the config, never into
    the caller's instance.
    """

    def stream_headers(self, config: ProviderConfig) -> Mapping[str, str]:  # pragma: no cover - interface
        ...


__all__ = ["StreamHeaders"]
