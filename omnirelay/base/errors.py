"""Unified error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``omnirelay.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.relay_error import OmniRelayError, RelayError
from .errors_parts.request_errors import (
    DecodeError,
    RequestError,
    StreamDecodeError,
    UnsupportedError,
)
from .errors_parts.unknown_provider_error import UnknownProviderError
from .errors_parts.classification import classify_exception, status_to_error_code

__all__ = [
    "ErrorCode",
    "OmniRelayError",
    "RelayError",
    "RequestError",
    "UnsupportedError",
    "DecodeError",
    "StreamDecodeError",
    "UnknownProviderError",
    "classify_exception",
    "status_to_error_code",
]
