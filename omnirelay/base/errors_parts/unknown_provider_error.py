"""UnknownProviderError (single-class module)."""
from __future__ import annotations

from .relay_error import OmniRelayError


class UnknownProviderError(OmniRelayError, LookupError):
    """Raised when a provider cannot be resolved to an adaptor.

    Failure modes include:
    - The provider name is not registered.
    - The spec has no adaptor factory and its type has no built-in adaptor.
    - The built-in adaptor module cannot be imported.
    """


__all__ = ["UnknownProviderError"]
