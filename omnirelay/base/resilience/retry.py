"""Retry policies for request-level attempts and stream decoding.

Two policies live here:

- :class:`RetryConfig` + :func:`retry` / :func:`call_with_retry` drive the
  request-level attempt loop of the ``LLM`` facade. Only errors classified into
  ``retryable_codes`` are retried; the delay grows as
  ``initial_delay * delay_base ** attempt`` and waits go through the
  cancellation token when one is supplied.
- :class:`DefaultRetryStrategy` implements the :class:`RetryStrategy` protocol
  consulted by ``TokenStream`` when a single stream event fails to decode.
"""
from __future__ import annotations

import functools
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Protocol, TypeVar, runtime_checkable

from ..cancellation import CancellationToken, CancelledError
from ..errors import ErrorCode, StreamDecodeError, classify_exception

T = TypeVar("T")


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: BaseException | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    initial_delay: float = 1.0
    delay_base: float = 2.0  # exponential growth factor per attempt
    retryable_codes: tuple[ErrorCode, ...] = (
        ErrorCode.TRANSIENT,
        ErrorCode.RATE_LIMIT,
        ErrorCode.TIMEOUT,
        ErrorCode.SERVER_ERROR,
        ErrorCode.UNAVAILABLE,
    )
    attempt_logger: AttemptLogger | None = None

    def delays(self) -> Iterable[float]:
        for attempt in range(self.max_attempts - 1):
            yield self.initial_delay * self.delay_base**attempt

    def is_retryable(self, error: BaseException) -> bool:
        if isinstance(error, CancelledError) or not isinstance(error, Exception):
            return False
        return classify_exception(error) in self.retryable_codes


DEFAULT_RETRY_CONFIG = RetryConfig()


def _sleep(delay: float, token: Optional[CancellationToken]) -> None:
    if token is not None:
        token.wait(delay)
    elif delay > 0:
        time.sleep(delay)


def call_with_retry(
    func: Callable[[], T],
    config: RetryConfig = DEFAULT_RETRY_CONFIG,
    *,
    cancellation_token: Optional[CancellationToken] = None,
) -> T:
    """Invoke ``func`` under ``config``; re-raise the last error when attempts run out.

    Raises:
        CancelledError: when the token is cancelled before an attempt or during a wait.
    """
    for attempt, delay in enumerate(list(config.delays()) + [None]):  # final attempt has delay None
        if cancellation_token is not None:
            cancellation_token.raise_if_cancelled()
        try:
            result = func()
        except Exception as e:
            retryable = delay is not None and config.is_retryable(e)
            if config.attempt_logger:
                config.attempt_logger(
                    attempt=attempt,
                    max_attempts=config.max_attempts,
                    delay=delay if retryable else None,
                    error=e,
                )
            if not retryable:
                raise
            _sleep(delay, cancellation_token)
            continue
        if config.attempt_logger:
            config.attempt_logger(
                attempt=attempt,
                max_attempts=config.max_attempts,
                delay=None,
                error=None,
            )
        return result
    raise RuntimeError("retry: reached terminal state without result")  # pragma: no cover


def retry(config: RetryConfig = DEFAULT_RETRY_CONFIG):
    """Return a decorator applying ``config`` to the wrapped callable.

    The wrapped function may receive ``cancellation_token=`` which is used for
    the waits between attempts and passed through to the function.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            token = kwargs.get("cancellation_token")
            return call_with_retry(lambda: func(*args, **kwargs), config, cancellation_token=token)

        return wrapper

    return decorator


@runtime_checkable
class RetryStrategy(Protocol):
    """Decides whether a failed stream event read is retried and how long to wait."""

    def should_retry(self, error: BaseException) -> bool:  # pragma: no cover - interface
        ...

    def next_delay(self) -> float:  # pragma: no cover - interface
        ...


@dataclass
class DefaultRetryStrategy:
    """Bounded exponential backoff for per-event stream decode failures.

    State is scoped to one stream: create a fresh instance per ``TokenStream``.

    Attributes:
        max_retries: Number of failed events tolerated.
        initial_wait: First delay in seconds.
        max_wait: Upper bound for any single delay.
    """

    max_retries: int = 3
    initial_wait: float = 1.0
    max_wait: float = 10.0
    _attempts: int = field(default=0, init=False, repr=False)
    _current: float = field(default=0.0, init=False, repr=False)

    def should_retry(self, error: BaseException) -> bool:
        if not isinstance(error, StreamDecodeError):
            return False
        if self._attempts >= self.max_retries:
            return False
        self._attempts += 1
        return True

    def next_delay(self) -> float:
        delay = self._current or self.initial_wait
        self._current = min(delay * 2, self.max_wait)
        return min(delay, self.max_wait)

    @property
    def attempts(self) -> int:
        return self._attempts


__all__ = [
    "AttemptLogger",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "call_with_retry",
    "retry",
    "RetryStrategy",
    "DefaultRetryStrategy",
]
