"""Cancellation error type.

Defines the public ``CancelledError`` used to signal cooperative cancellation
in relay calls, retry waits and token streams.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively.

    This specialized error distinguishes cooperative cancellation from other
    runtime failures so retry loops never treat it as retryable.
    """

__all__ = ["CancelledError"]
