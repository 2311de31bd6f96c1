"""ProtocolTagged Protocol (single-class module).

Adaptors that speak a well-known chat dialect report it here, so the relay
does not wrap them again when ``chat_protocol`` asks for that dialect.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ProtocolTagged(Protocol):
    def chat_protocol(self) -> str:  # pragma: no cover - interface
        ...


__all__ = ["ProtocolTagged"]
