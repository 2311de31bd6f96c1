"""Streaming primitives: frame decoders, live body handle and token stream."""

from .events import StreamEvent, StreamToken
from .sse import NDJSONDecoder, SSEDecoder
from .stream_body import StreamBody
from .token_stream import TokenStream

__all__ = [
    "StreamEvent",
    "StreamToken",
    "SSEDecoder",
    "NDJSONDecoder",
    "StreamBody",
    "TokenStream",
]
