"""Pull-based token iterator over a live vendor stream.

``TokenStream`` couples a :class:`StreamBody`, a frame decoder (SSE or NDJSON)
and a stream-capable adaptor's ``parse_chunk``. Each ``next()`` reads frames
until one yields text, the vendor signals the end, or an error surfaces.

Error semantics
---------------
- Per-frame decode failures (``StreamDecodeError``, from the decoder or the
  parser) consult the retry strategy. When it allows a retry the stream
  waits ``next_delay()`` seconds (interruptible by the cancellation token) and
  moves on to the next frame; otherwise the error is raised.
- ``ChunkSignal.ERROR`` raises a ``RelayError`` and is never retried.
- Cancellation raises ``CancelledError`` promptly: the token's callback
  closes the live response, which unblocks a pending read.
- The body is released exactly once on close, exhaustion or terminal error.
"""

from __future__ import annotations

import logging
import time
from typing import Iterator, Optional

from ..cancellation import CancellationToken, CancelledError
from ..constants import STREAM_FORMAT_NDJSON
from ..errors import RelayError, StreamDecodeError
from ..interfaces import ChunkSignal, StreamCapable
from ..log_support import LogContext
from ..logging import get_logger, log_event
from ..resilience.retry import DefaultRetryStrategy, RetryStrategy
from .events import StreamEvent, StreamToken
from .sse import NDJSONDecoder, SSEDecoder
from .stream_body import StreamBody

# Status reported for errors the vendor signals inside an otherwise healthy stream.
IN_STREAM_ERROR_STATUS = 500

_logger = get_logger("omnirelay.stream")


class TokenStream:
    """Lazy, forward-only iterator of :class:`StreamToken`.

    Usable as a context manager; leaving the block closes the stream.
    """

    def __init__(
        self,
        body: StreamBody,
        parser: StreamCapable,
        *,
        retry_strategy: Optional[RetryStrategy] = None,
        cancellation_token: Optional[CancellationToken] = None,
        stream_format: str = "sse",
        log_context: Optional[LogContext] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._body = body
        self._parser = parser
        decoder_cls = NDJSONDecoder if stream_format == STREAM_FORMAT_NDJSON else SSEDecoder
        self._decoder = decoder_cls(body.iter_bytes())
        self._retry = retry_strategy if retry_strategy is not None else DefaultRetryStrategy()
        self._token = cancellation_token
        self._ctx = log_context
        self._logger = logger or _logger
        self._index = 0
        self._finished = False
        self._remove_callback = None
        if cancellation_token is not None:
            self._remove_callback = cancellation_token.add_callback(self._body.close)

    @property
    def closed(self) -> bool:
        return self._finished

    @property
    def tokens_emitted(self) -> int:
        return self._index

    def __iter__(self) -> Iterator[StreamToken]:
        return self

    def __next__(self) -> StreamToken:
        if self._finished:
            raise StopIteration
        try:
            token = self._read_token()
        except StopIteration:
            self.close()
            if self._token is not None and self._token.cancelled:
                # Closing the body on cancel can end the read cleanly.
                raise CancelledError(self._token.reason or "stream cancelled") from None
            log_event(self._logger, "stream.end", self._ctx, tokens=self._index)
            raise
        except BaseException as exc:
            self.close()
            if self._token is not None and self._token.cancelled and not isinstance(exc, CancelledError):
                raise CancelledError(self._token.reason or "stream cancelled") from exc
            log_event(
                self._logger,
                "stream.error",
                self._ctx,
                level=logging.WARNING,
                error=str(exc),
                error_type=type(exc).__name__,
                tokens=self._index,
            )
            raise
        return token

    def _read_token(self) -> StreamToken:
        while True:
            self._check_cancelled()
            try:
                event = next(self._decoder)
                token = self._parse(event)
            except StreamDecodeError as exc:
                self._after_decode_error(exc)
                continue
            if token is not None:
                return token

    def _parse(self, event: StreamEvent) -> Optional[StreamToken]:
        if not event.data.strip():
            return None
        result = self._parser.parse_chunk(event.data)
        if result.signal is ChunkSignal.END:
            raise StopIteration
        if result.signal is ChunkSignal.ERROR:
            provider = self._ctx.provider if self._ctx and self._ctx.provider else ""
            raise RelayError(
                code=IN_STREAM_ERROR_STATUS,
                message=result.text or "stream error",
                provider=provider,
            )
        if result.signal is ChunkSignal.SKIP or not result.text:
            return None
        token = StreamToken(text=result.text, type=event.type, index=self._index)
        self._index += 1
        return token

    def _after_decode_error(self, exc: StreamDecodeError) -> None:
        if not self._retry.should_retry(exc):
            raise exc
        delay = self._retry.next_delay()
        log_event(
            self._logger,
            "stream.retry",
            self._ctx,
            level=logging.DEBUG,
            delay=delay,
            error=str(exc),
        )
        if self._token is not None:
            self._token.wait(delay)
        elif delay > 0:
            time.sleep(delay)

    def _check_cancelled(self) -> None:
        if self._token is not None:
            self._token.raise_if_cancelled()

    def close(self) -> None:
        """Stop the stream and release the body. Idempotent."""
        self._finished = True
        if self._remove_callback is not None:
            self._remove_callback()
            self._remove_callback = None
        self._body.close()

    def __enter__(self) -> "TokenStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["TokenStream", "IN_STREAM_ERROR_STATUS"]
