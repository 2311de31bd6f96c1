"""Resilience helpers (request retry and stream retry strategy)."""

from .retry import (
    DEFAULT_RETRY_CONFIG,
    DefaultRetryStrategy,
    RetryConfig,
    RetryStrategy,
    call_with_retry,
    retry,
)

__all__ = [
    "DEFAULT_RETRY_CONFIG",
    "DefaultRetryStrategy",
    "RetryConfig",
    "RetryStrategy",
    "call_with_retry",
    "retry",
]
