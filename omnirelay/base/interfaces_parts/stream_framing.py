"""StreamFraming Protocol (single-class module).

Optional capability for stream-capable adaptors whose vendor does not frame
its stream as server-sent events. Without it, ``"sse"`` is assumed.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class StreamFraming(Protocol):
    @property
    def stream_format(self) -> str:  # pragma: no cover - interface
        """``"sse"`` or ``"ndjson"``."""
        ...


__all__ = ["StreamFraming"]
