"""Per-provider connection settings consumed by adaptors and the relay.

``ProviderConfig`` is a plain mutable dataclass: callers may adjust it between
relay calls. The relay never mutates a caller's instance. Per-call variations
(such as streaming headers) are applied to a copy produced by
:meth:`ProviderConfig.derive`.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

import httpx


@dataclass
class ProviderConfig:
    """Connection settings for one provider.

    Attributes:
        name: Registry name of the provider (also reported in ``RelayError``).
        api_key: Credential attached to outgoing requests.
        model: Default model identifier.
        base_url: Vendor base URL or full endpoint.
        organization: Optional organization / tenant id.
        auth_header: Header name carrying the credential (default ``Authorization``).
        auth_prefix: Prefix placed before the credential (e.g. ``"Bearer "``).
        headers: Extra headers; applied after adaptor headers, last write wins.
        http_client: Optional ``httpx.Client`` used for every call with this config.
        timeout: Optional per-request timeout in seconds.
        chat_protocol: ``"openai"`` forces the OpenAI dialect for chat.
    """

    name: str = ""
    api_key: str = ""
    model: str = ""
    base_url: str = ""
    organization: str = ""
    auth_header: str = ""
    auth_prefix: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    http_client: Optional[httpx.Client] = None
    timeout: Optional[float] = None
    chat_protocol: str = ""

    def derive(self, **changes: Any) -> "ProviderConfig":
        """Return a copy with ``changes`` applied and an independent header dict."""
        headers = changes.pop("headers", None)
        clone = replace(self, **changes)
        clone.headers = dict(self.headers if headers is None else headers)
        return clone

    def with_headers(self, extra: Dict[str, str]) -> "ProviderConfig":
        """Return a copy whose headers are these headers overlaid with ``extra``."""
        merged = dict(self.headers)
        merged.update(extra)
        return self.derive(headers=merged)

    def __repr__(self) -> str:
        return (
            f"ProviderConfig(name={self.name!r}, model={self.model!r}, "
            f"base_url={self.base_url!r}, api_key={'***' if self.api_key else ''!r})"
        )


__all__ = ["ProviderConfig"]
