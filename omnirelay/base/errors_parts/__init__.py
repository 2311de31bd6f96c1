"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `omnirelay.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .relay_error import OmniRelayError, RelayError
from .request_errors import DecodeError, RequestError, StreamDecodeError, UnsupportedError
from .unknown_provider_error import UnknownProviderError
from .classification import classify_exception, status_to_error_code

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
