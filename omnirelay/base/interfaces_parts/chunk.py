"""Stream chunk parse result shared by stream-capable adaptors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ChunkSignal(str, Enum):
    """Outcome of parsing one stream event payload.

    OK    the event carried text (an empty text is treated like SKIP)
    END   the vendor signalled completion; the stream ends cleanly
    SKIP  keep-alive or metadata event with nothing to emit
    ERROR the vendor reported an in-stream error; the stream fails
    """

    OK = "ok"
    END = "end"
    SKIP = "skip"
    ERROR = "error"


@dataclass(frozen=True)
class ChunkResult:
    text: str = ""
    signal: ChunkSignal = ChunkSignal.OK

    @classmethod
    def ok(cls, text: str) -> "ChunkResult":
        return cls(text=text, signal=ChunkSignal.OK)

    @classmethod
    def end(cls) -> "ChunkResult":
        return cls(signal=ChunkSignal.END)

    @classmethod
    def skip(cls) -> "ChunkResult":
        return cls(signal=ChunkSignal.SKIP)

    @classmethod
    def error(cls, message: str) -> "ChunkResult":
        return cls(text=message, signal=ChunkSignal.ERROR)


__all__ = ["ChunkSignal", "ChunkResult"]
