"""HTTP client selection for relay calls.

Purpose:
    Decide which ``httpx.Client`` carries a relay call and which timeout
    applies, so the relay's execution paths share one policy.

External dependencies:
    - ``httpx`` for the synchronous HTTP client.

Selection order:
    1. The client attached to the call's ``ProviderConfig``.
    2. The client the ``Relay`` was constructed with.
    3. A new client built for this call only (the caller of
       :func:`select_client` owns it and must close it).

Timeout strategy:
    - ``ProviderConfig.timeout`` set: applied per request on any client.
    - Otherwise a caller-supplied client keeps its own configured timeout.
    - New clients default to ``get_timeout_config().http_timeout_seconds``.
    - Streaming requests without a config timeout use
      ``get_timeout_config().stream_timeout_seconds`` when it is set.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config


def new_client(timeout: Optional[float] = None) -> httpx.Client:
    """Build a client with ``timeout`` or the configured HTTP default."""
    if timeout is None:
        timeout = get_timeout_config().http_timeout_seconds
    return httpx.Client(timeout=timeout)


def select_client(
    config_client: Optional[httpx.Client],
    relay_client: Optional[httpx.Client],
    *,
    timeout: Optional[float] = None,
) -> Tuple[httpx.Client, bool]:
    """Return ``(client, owned)`` following the selection order above."""
    if config_client is not None:
        return config_client, False
    if relay_client is not None:
        return relay_client, False
    return new_client(timeout), True


def request_timeout(timeout: Optional[float], *, stream: bool = False) -> Any:
    """Per-request timeout argument for ``httpx.Client.build_request``.

    Streaming requests without an explicit timeout use
    ``get_timeout_config().stream_timeout_seconds`` when it is set.
    """
    if timeout is not None and timeout > 0:
        return timeout
    if stream:
        stream_timeout = get_timeout_config().stream_timeout_seconds
        if stream_timeout is not None:
            return stream_timeout
    return httpx.USE_CLIENT_DEFAULT


__all__ = ["new_client", "select_client", "request_timeout"]
