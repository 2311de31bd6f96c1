"""Unit tests for the error taxonomy and exception classification."""

from __future__ import annotations

import httpx
import pytest

from omnirelay.base.cancellation import CancelledError
from omnirelay.base.errors import (
    DecodeError,
    ErrorCode,
    OmniRelayError,
    RelayError,
    RequestError,
    StreamDecodeError,
    UnknownProviderError,
    UnsupportedError,
    classify_exception,
    status_to_error_code,
)


def test_relay_error_str_includes_provider_when_known() -> None:
    err = RelayError(code=429, message="slow down", provider="openai")
    assert str(err) == "slow down (code=429, provider=openai)"  # nosec B101
    assert err.to_dict() == {"code": 429, "message": "slow down", "provider": "openai"}  # nosec B101


def test_relay_error_str_omits_empty_provider() -> None:
    assert str(RelayError(code=500, message="boom")) == "boom (code=500)"  # nosec B101


def test_relay_error_normalized_code() -> None:
    assert RelayError(code=429, message="x").error_code is ErrorCode.RATE_LIMIT  # nosec B101
    assert RelayError(code=599, message="x").error_code is ErrorCode.SERVER_ERROR  # nosec B101
    assert RelayError(code=418, message="x").error_code is ErrorCode.UNKNOWN  # nosec B101


def test_all_library_errors_share_a_base() -> None:
    for cls in (RelayError, RequestError, UnsupportedError, DecodeError, StreamDecodeError, UnknownProviderError):
        assert issubclass(cls, OmniRelayError)  # nosec B101
    assert issubclass(StreamDecodeError, DecodeError)  # nosec B101
    assert issubclass(UnknownProviderError, LookupError)  # nosec B101


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (CancelledError("stop"), ErrorCode.CANCELLED),
        (UnsupportedError("nope"), ErrorCode.UNSUPPORTED),
        (RequestError("bad"), ErrorCode.VALIDATION),
        (DecodeError("bad json"), ErrorCode.DECODE),
        (httpx.ReadTimeout("slow"), ErrorCode.TIMEOUT),
        (httpx.ConnectError("refused"), ErrorCode.TRANSIENT),
        (RelayError(code=503, message="down"), ErrorCode.UNAVAILABLE),
        (RelayError(code=401, message="who"), ErrorCode.AUTH),
        (ValueError("other"), ErrorCode.UNKNOWN),
    ],
)
def test_classify_exception(exc: Exception, expected: ErrorCode) -> None:
    assert classify_exception(exc) is expected  # nosec B101


def test_status_to_error_code_maps_gateway_errors() -> None:
    assert status_to_error_code(502) is ErrorCode.TRANSIENT  # nosec B101
    assert status_to_error_code(504) is ErrorCode.TIMEOUT  # nosec B101
