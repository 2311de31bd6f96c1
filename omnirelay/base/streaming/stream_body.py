"""Live streaming response handle returned by ``Relay.stream``.

``StreamBody`` owns the open ``httpx.Response`` and, when the relay had to
build a client for the call, that client as well. ``close`` releases both
exactly once and may be called from any thread (including a cancellation
callback) before, during or after reading.
"""

from __future__ import annotations

import threading
from typing import Iterator, Optional

import httpx


class StreamBody:
    def __init__(self, response: httpx.Response, *, owned_client: Optional[httpx.Client] = None) -> None:
        self._response = response
        self._owned_client = owned_client
        self._lock = threading.Lock()
        self._closed = False

    @property
    def response(self) -> httpx.Response:
        return self._response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def closed(self) -> bool:
        return self._closed

    def iter_bytes(self) -> Iterator[bytes]:
        """Yield raw body chunks as they arrive (content decoding applied)."""
        return self._response.iter_bytes()

    def close(self) -> None:
        """Release the response and any owned client. Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        try:
            self._response.close()
        finally:
            if self._owned_client is not None:
                self._owned_client.close()

    def __enter__(self) -> "StreamBody":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"StreamBody(status={self.status_code}, closed={self._closed})"


__all__ = ["StreamBody"]
