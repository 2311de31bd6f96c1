"""Streaming value types.

``StreamEvent`` is one decoded frame of a vendor stream (an SSE event or an
NDJSON line). ``StreamToken`` is one unit of text handed to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StreamEvent:
    """One decoded stream frame.

    Fields:
      type: SSE event type (``"message"`` when the frame names none)
      data: payload bytes, multi-line ``data:`` fields joined with ``\\n``
      id: last event id seen on the stream (empty when none)
    """

    type: str = "message"
    data: bytes = b""
    id: str = ""


@dataclass(frozen=True)
class StreamToken:
    """A text token emitted by ``TokenStream``.

    ``index`` starts at 0 for each stream and grows by one per token.
    """

    text: str
    type: str = "message"
    index: int = 0


__all__ = ["StreamEvent", "StreamToken"]
