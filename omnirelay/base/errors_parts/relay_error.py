"""
Uniform vendor error exception type.

Every non-success HTTP status and every in-body vendor error sentinel is
normalized into :class:`RelayError` so callers can diagnose a failure from the
status code, the raw vendor message and the provider name alone.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .error_code import ErrorCode


class OmniRelayError(Exception):
    """Base class for all errors raised by omnirelay itself.

    Transport failures raised by ``httpx`` are not wrapped and therefore do not
    derive from this class.
    """


@dataclass(eq=False)
class RelayError(OmniRelayError):
    """Uniform vendor API error.

    Attributes:
        code: HTTP status code (or the status the adaptor assigned to an
            in-body vendor error).
        message: Raw vendor message, typically the response body.
        provider: Provider name taken from the active ``ProviderConfig``.
    """

    code: int
    message: str
    provider: str = ""

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.provider:
            return f"{self.message} (code={self.code})"
        return f"{self.message} (code={self.code}, provider={self.provider})"

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON payload surfaced to callers."""
        return {"code": self.code, "message": self.message, "provider": self.provider}

    @property
    def error_code(self) -> ErrorCode:
        """Normalized classification of ``code`` (see ``classification``)."""
        from .classification import status_to_error_code

        return status_to_error_code(self.code)


__all__ = ["OmniRelayError", "RelayError"]
