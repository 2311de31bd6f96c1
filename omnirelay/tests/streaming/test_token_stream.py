"""TokenStream behaviour over in-memory stream bodies."""

from __future__ import annotations

from typing import Iterable, Iterator

import httpx
import pytest

from omnirelay.anthropic.adaptor import AnthropicAdaptor
from omnirelay.base.cancellation import CancellationToken, CancelledError
from omnirelay.base.errors import RelayError, StreamDecodeError
from omnirelay.base.log_support import LogContext
from omnirelay.base.resilience.retry import DefaultRetryStrategy
from omnirelay.base.streaming import StreamBody, TokenStream
from omnirelay.ollama.adaptor import OllamaAdaptor
from omnirelay.openai.adaptor import OpenAIAdaptor


def _body(chunks: Iterable[bytes]) -> StreamBody:
    return StreamBody(httpx.Response(200, content=iter(list(chunks))))


def _openai_delta(text: str) -> bytes:
    return b'data: {"choices": [{"delta": {"content": "' + text.encode() + b'"}}]}\n\n'


def test_tokens_until_done_marker(relay_events) -> None:
    body = _body([_openai_delta("Hel"), b": ping\n\n", _openai_delta("lo"), b"data: [DONE]\n\n", _openai_delta("x")])
    stream = TokenStream(body, OpenAIAdaptor(), log_context=LogContext(provider="openai"))
    tokens = list(stream)
    assert [t.text for t in tokens] == ["Hel", "lo"]  # nosec B101 - asserts are appropriate in unit tests
    assert [t.index for t in tokens] == [0, 1]  # nosec B101
    assert stream.closed and body.closed  # nosec B101
    assert stream.tokens_emitted == 2  # nosec B101
    assert any(e["event"] == "stream.end" and e["tokens"] == 2 for e in relay_events)  # nosec B101


def test_end_of_body_without_marker_ends_cleanly() -> None:
    stream = TokenStream(_body([_openai_delta("a")]), OpenAIAdaptor())
    assert [t.text for t in stream] == ["a"]  # nosec B101
    with pytest.raises(StopIteration):
        next(stream)


def test_ndjson_framing() -> None:
    body = _body([b'{"response": "a", "done": false}\n{"response": "b", "done": false}\n', b'{"done": true}\n'])
    assert [t.text for t in TokenStream(body, OllamaAdaptor(), stream_format="ndjson")] == ["a", "b"]  # nosec B101


def test_in_stream_error_raises_relay_error() -> None:
    body = _body(
        [
            b'event: content_block_delta\ndata: {"type": "content_block_delta", "delta": {"type": "text_delta", "text": "x"}}\n\n',
            b'event: error\ndata: {"type": "error", "error": {"message": "overloaded"}}\n\n',
        ]
    )
    stream = TokenStream(body, AnthropicAdaptor(), log_context=LogContext(provider="anthropic"))
    first = next(stream)
    assert (first.text, first.type) == ("x", "content_block_delta")  # nosec B101
    with pytest.raises(RelayError) as ei:
        next(stream)
    assert (ei.value.code, ei.value.message, ei.value.provider) == (500, "overloaded", "anthropic")  # nosec B101
    assert body.closed  # nosec B101


def test_decode_error_retried_then_skipped() -> None:
    body = _body([b"data: {broken\n\n", _openai_delta("ok")])
    strategy = DefaultRetryStrategy(max_retries=1, initial_wait=0.0)
    stream = TokenStream(body, OpenAIAdaptor(), retry_strategy=strategy)
    assert [t.text for t in stream] == ["ok"]  # nosec B101
    assert strategy.attempts == 1  # nosec B101


def test_decode_error_raised_when_retries_exhausted() -> None:
    body = _body([b"data: {broken\n\n", b"data: {again\n\n", _openai_delta("late")])
    stream = TokenStream(body, OpenAIAdaptor(), retry_strategy=DefaultRetryStrategy(max_retries=1, initial_wait=0.0))
    with pytest.raises(StreamDecodeError):
        list(stream)
    assert body.closed  # nosec B101


def test_transport_error_propagates() -> None:
    def chunks() -> Iterator[bytes]:
        yield _openai_delta("a")
        raise httpx.ReadError("reset")

    stream = TokenStream(StreamBody(httpx.Response(200, content=chunks())), OpenAIAdaptor())
    assert next(stream).text == "a"  # nosec B101
    with pytest.raises(httpx.ReadError):
        next(stream)


def test_cancel_stops_stream_and_releases_body() -> None:
    token = CancellationToken()
    body = _body([_openai_delta("a"), _openai_delta("b")])
    stream = TokenStream(body, OpenAIAdaptor(), cancellation_token=token)
    assert next(stream).text == "a"  # nosec B101
    token.cancel("user stop")
    assert body.closed  # nosec B101
    with pytest.raises(CancelledError):
        next(stream)
    with pytest.raises(StopIteration):
        next(stream)


def test_context_manager_closes_once() -> None:
    body = _body([_openai_delta("a")])
    with TokenStream(body, OpenAIAdaptor()) as stream:
        next(stream)
    assert stream.closed and body.closed  # nosec B101
    stream.close()


def test_role_only_delta_mid_stream_keeps_indices_contiguous() -> None:
    body = _body(
        [
            _openai_delta("a"),
            b'data: {"choices":[{"delta":{"role":"assistant","content":""}}]}\n\n',
            _openai_delta("b"),
            b'data: {"choices":[]}\n\n',
            _openai_delta("c"),
            b"data: [DONE]\n\n",
        ]
    )
    stream = TokenStream(body, OpenAIAdaptor())
    tokens = list(stream)
    assert [t.text for t in tokens] == ["a", "b", "c"]  # nosec B101
    assert [t.index for t in tokens] == [0, 1, 2]  # nosec B101
    assert stream.tokens_emitted == 3  # nosec B101
