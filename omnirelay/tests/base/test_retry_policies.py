"""Unit tests for request-level retry and the stream retry strategy."""

from __future__ import annotations

import time

import pytest

from omnirelay.base.cancellation import CancellationToken, CancelledError
from omnirelay.base.errors import DecodeError, RelayError, StreamDecodeError
from omnirelay.base.resilience.retry import DefaultRetryStrategy, RetryConfig, call_with_retry, retry


class _Flaky:
    def __init__(self, fail_times: int, status: int):
        self.calls = 0
        self.fail_times = fail_times
        self.status = status

    def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.fail_times:
            raise RelayError(code=self.status, message="boom", provider="x")
        return "ok"


def test_retry_succeeds_after_transient(monkeypatch) -> None:
    monkeypatch.setattr(time, "sleep", lambda *_: None)
    attempt_log = []

    cfg = RetryConfig(max_attempts=3, initial_delay=0.0, attempt_logger=lambda **kw: attempt_log.append(kw))
    flaky = _Flaky(fail_times=2, status=503)

    @retry(cfg)
    def run() -> str:
        return flaky()

    assert run() == "ok"  # nosec B101
    assert flaky.calls == 3  # nosec B101
    assert attempt_log[-1]["error"] is None  # nosec B101
    assert [e["attempt"] for e in attempt_log] == [0, 1, 2]  # nosec B101


def test_retry_stops_on_non_retryable() -> None:
    flaky = _Flaky(fail_times=99, status=400)
    with pytest.raises(RelayError) as ei:
        call_with_retry(flaky, RetryConfig(max_attempts=4, initial_delay=0.0))
    assert ei.value.code == 400  # nosec B101
    assert flaky.calls == 1  # nosec B101


def test_retry_reraises_last_error_when_exhausted() -> None:
    flaky = _Flaky(fail_times=99, status=500)
    with pytest.raises(RelayError):
        call_with_retry(flaky, RetryConfig(max_attempts=2, initial_delay=0.0))
    assert flaky.calls == 2  # nosec B101


def test_retry_wait_honours_cancellation() -> None:
    token = CancellationToken()
    flaky = _Flaky(fail_times=99, status=503)

    def run() -> str:
        try:
            return flaky()
        finally:
            token.cancel("stop")

    with pytest.raises(CancelledError):
        call_with_retry(run, RetryConfig(max_attempts=5, initial_delay=10.0), cancellation_token=token)
    assert flaky.calls == 1  # nosec B101


def test_retry_delays_grow_exponentially() -> None:
    cfg = RetryConfig(max_attempts=4, initial_delay=0.5, delay_base=2.0)
    assert list(cfg.delays()) == [0.5, 1.0, 2.0]  # nosec B101


def test_default_strategy_only_retries_stream_decode_errors() -> None:
    strategy = DefaultRetryStrategy(max_retries=2, initial_wait=1.0, max_wait=3.0)
    assert not strategy.should_retry(DecodeError("x"))  # nosec B101
    assert strategy.should_retry(StreamDecodeError("x"))  # nosec B101
    assert strategy.should_retry(StreamDecodeError("x"))  # nosec B101
    assert not strategy.should_retry(StreamDecodeError("x"))  # nosec B101
    assert strategy.attempts == 2  # nosec B101


def test_default_strategy_backoff_is_capped() -> None:
    strategy = DefaultRetryStrategy(max_retries=5, initial_wait=1.0, max_wait=3.0)
    assert [strategy.next_delay() for _ in range(4)] == [1.0, 2.0, 3.0, 3.0]  # nosec B101
