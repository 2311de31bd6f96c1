"""Capability probing helper."""

from __future__ import annotations

from typing import Any, Type, TypeVar

from ..errors import UnsupportedError

T = TypeVar("T")


def require_capability(adaptor: Any, capability: Type[T], what: str = "") -> T:
    """Return ``adaptor`` typed as ``capability`` or raise ``UnsupportedError``.

    Args:
        adaptor: Object to inspect.
        capability: A runtime-checkable capability protocol.
        what: Human readable name used in the error message.
    """
    if isinstance(adaptor, capability):
        return adaptor
    label = what or capability.__name__
    raise UnsupportedError(f"adaptor {type(adaptor).__name__} does not support {label}")


__all__ = ["require_capability"]
