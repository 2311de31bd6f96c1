"""
Adaptor interfaces (Protocols) for the relay layer.

Re-exports the protocols split into single-class modules under
``omnirelay.base.interfaces_parts`` so imports stay stable.
"""

from __future__ import annotations

from .interfaces_parts import (
    Adaptor,
    ChunkResult,
    ChunkSignal,
    CustomTaskRequest,
    ProtocolTagged,
    StreamCapable,
    StreamFraming,
    StreamHeaders,
    TaskCapable,
    require_capability,
)

__all__ = [
    "Adaptor",
    "ChunkResult",
    "ChunkSignal",
    "CustomTaskRequest",
    "ProtocolTagged",
    "StreamCapable",
    "StreamFraming",
    "StreamHeaders",
    "TaskCapable",
    "require_capability",
]
