"""
Request-side error types.

These cover failures that happen before or after the network round trip and
are not vendor API errors: request preparation, unsupported capabilities,
response decoding and per-event stream decoding.
"""
from __future__ import annotations

from .relay_error import OmniRelayError


class RequestError(OmniRelayError, ValueError):
    """Raised when a request cannot be prepared.

    Failure modes include a missing ``ProviderConfig``, a missing task id or an
    adaptor that resolved an empty URL.
    """


class UnsupportedError(OmniRelayError):
    """Raised when an adaptor lacks a capability or does not serve a mode.

    Examples: streaming on an adaptor without ``StreamCapable``, task status on
    an adaptor without ``TaskCapable``, or an image request sent to a vendor
    that only serves chat.
    """


class DecodeError(OmniRelayError):
    """Raised when a vendor response is malformed or has an unexpected shape.

    The underlying parse failure, when there is one, is attached as
    ``__cause__``.
    """


class StreamDecodeError(DecodeError):
    """Raised by stream decoders for a single undecodable event.

    The decoder state stays valid, so the token stream may resume with the
    next event when its retry strategy allows it.
    """


__all__ = ["RequestError", "UnsupportedError", "DecodeError", "StreamDecodeError"]
