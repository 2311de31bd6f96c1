"""Stream frame decoders (server-sent events and newline-delimited JSON).

Both decoders consume an iterable of raw byte chunks (typically
``StreamBody.iter_bytes()``) and yield :class:`StreamEvent` objects.

Failure semantics
-----------------
- A frame whose bytes are not valid UTF-8 raises ``StreamDecodeError`` for
  that frame only; iteration may continue with the next frame.
- An error raised by the chunk source (a transport failure) is sticky: it is
  re-raised on every later ``next()`` call.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Iterable, Iterator, List, Optional, Union

import httpx

from ..errors import StreamDecodeError
from .events import StreamEvent

_LINE_BREAK = re.compile(rb"\r\n|\r|\n")

_TRANSPORT_ERRORS = (httpx.HTTPError, httpx.StreamError, OSError)

_Item = Union[StreamEvent, StreamDecodeError]


class _LineDecoder(ABC):
    """Shared chunk buffering and line splitting (LF, CRLF and CR endings)."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks: Iterator[bytes] = iter(chunks)
        self._buffer = bytearray()
        self._pending: Deque[_Item] = deque()
        self._error: Optional[BaseException] = None
        self._eof = False

    def __iter__(self) -> "_LineDecoder":
        return self

    def __next__(self) -> StreamEvent:
        if self._error is not None:
            raise self._error
        while not self._pending:
            if self._eof:
                raise StopIteration
            self._read_more()
        item = self._pending.popleft()
        if isinstance(item, StreamDecodeError):
            raise item
        return item

    def _read_more(self) -> None:
        try:
            chunk = next(self._chunks)
        except StopIteration:
            self._eof = True
            for line in self._split_lines(final=True):
                self._feed_line(line)
            self._flush()
            return
        except _TRANSPORT_ERRORS as exc:
            self._error = exc
            raise
        if chunk:
            self._buffer += chunk
            for line in self._split_lines(final=False):
                self._feed_line(line)

    def _split_lines(self, *, final: bool) -> List[bytes]:
        buf = bytes(self._buffer)
        lines: List[bytes] = []
        pos = 0
        for match in _LINE_BREAK.finditer(buf):
            # A trailing CR may be the first half of a CRLF split across chunks.
            if match.group() == b"\r" and match.end() == len(buf) and not final:
                break
            lines.append(buf[pos:match.start()])
            pos = match.end()
        rest = buf[pos:]
        if final and rest:
            lines.append(rest)
            rest = b""
        self._buffer = bytearray(rest)
        return lines

    @abstractmethod
    def _feed_line(self, line: bytes) -> None:
        raise NotImplementedError

    def _flush(self) -> None:
        """Emit whatever frame is still open at end of input."""


class SSEDecoder(_LineDecoder):
    """Server-sent events decoder.

    Supports ``event:``, multi-line ``data:``, ``id:`` and comment lines. An
    event is dispatched on a blank line, or at end of input when it is still
    open. Events without any ``data:`` field are not dispatched.
    """

    def __init__(self, chunks: Iterable[bytes]) -> None:
        super().__init__(chunks)
        self._event_type: bytes = b""
        self._data: Optional[List[bytes]] = None
        self._last_id: bytes = b""

    def _feed_line(self, line: bytes) -> None:
        if not line:
            self._dispatch()
            return
        if line.startswith(b":"):
            return
        name, sep, value = line.partition(b":")
        if sep and value.startswith(b" "):
            value = value[1:]
        if name == b"data":
            if self._data is None:
                self._data = []
            self._data.append(value)
        elif name == b"event":
            self._event_type = value
        elif name == b"id" and b"\x00" not in value:
            self._last_id = value

    def _flush(self) -> None:
        self._dispatch()

    def _dispatch(self) -> None:
        data_lines, event_type = self._data, self._event_type
        self._data, self._event_type = None, b""
        if data_lines is None:
            return
        data = b"\n".join(data_lines)
        try:
            data.decode("utf-8")
            event = StreamEvent(
                type=event_type.decode("utf-8") or "message",
                data=data,
                id=self._last_id.decode("utf-8"),
            )
        except UnicodeDecodeError as exc:
            err = StreamDecodeError(f"undecodable stream event: {exc}")
            err.__cause__ = exc
            self._pending.append(err)
            return
        self._pending.append(event)


class NDJSONDecoder(_LineDecoder):
    """Newline-delimited JSON decoder: one event per non-blank line."""

    def _feed_line(self, line: bytes) -> None:
        line = line.strip()
        if not line:
            return
        try:
            line.decode("utf-8")
        except UnicodeDecodeError as exc:
            err = StreamDecodeError(f"undecodable stream line: {exc}")
            err.__cause__ = exc
            self._pending.append(err)
            return
        self._pending.append(StreamEvent(type="message", data=line))


__all__ = ["SSEDecoder", "NDJSONDecoder"]
