"""
Map exceptions onto normalized :class:`ErrorCode` values.

The classification feeds retry decisions only. The exception that reaches the
caller is never replaced or wrapped.
"""
from __future__ import annotations

from typing import Mapping, Optional

import httpx

from ..cancellation_parts.cancelled_error import CancelledError
from .error_code import ErrorCode
from .request_errors import DecodeError, RequestError, UnsupportedError

STATUS_CODES: Mapping[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}

# Checked in order; the first matching type wins.
_TYPE_CODES = (
    (CancelledError, ErrorCode.CANCELLED),
    (UnsupportedError, ErrorCode.UNSUPPORTED),
    (RequestError, ErrorCode.VALIDATION),
    (DecodeError, ErrorCode.DECODE),
    ((httpx.TimeoutException, TimeoutError), ErrorCode.TIMEOUT),
    (httpx.TransportError, ErrorCode.TRANSIENT),
)


def _as_status(value: object) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool) and 100 <= value < 600:
        return value
    return None


def http_status_of(exc: BaseException) -> Optional[int]:
    """HTTP status carried by ``exc``.

    Looks at ``exc.code`` (``RelayError``), ``exc.status_code`` and then
    ``exc.response.status_code`` (``httpx.HTTPStatusError``).
    """
    for candidate in (
        getattr(exc, "code", None),
        getattr(exc, "status_code", None),
        getattr(getattr(exc, "response", None), "status_code", None),
    ):
        status = _as_status(candidate)
        if status is not None:
            return status
    return None


def status_to_error_code(status: int) -> ErrorCode:
    """Map an HTTP status; other 5xx are ``SERVER_ERROR``, the rest ``UNKNOWN``."""
    code = STATUS_CODES.get(status)
    if code is not None:
        return code
    return ErrorCode.SERVER_ERROR if 500 <= status < 600 else ErrorCode.UNKNOWN


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify ``exc``: known exception types first, then its HTTP status."""
    for types, code in _TYPE_CODES:
        if isinstance(exc, types):
            return code
    status = http_status_of(exc)
    return ErrorCode.UNKNOWN if status is None else status_to_error_code(status)


__all__ = [
    "STATUS_CODES",
    "classify_exception",
    "http_status_of",
    "status_to_error_code",
]
