"""
ChatRequest DTO for unified chat invocations.

Adaptors translate this normalized shape into vendor payloads. ``prompt``,
``options`` and ``schema`` are adaptor inputs only and never appear in the
wire form produced by :meth:`ChatRequest.to_dict`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .message import Message


@dataclass
class ChatRequest:
    """Normalized chat request sent to adaptors.

    Attributes:
        model: Target model identifier.
        messages: Ordered list of chat `Message` instances.
        stream: Whether a streamed response is requested.
        temperature: Sampling temperature (``0`` means unset on the wire).
        max_tokens: Completion token budget (``0`` means unset on the wire).
        prompt: Free-text fallback used when ``messages`` is empty.
        options: Vendor-specific generation options merged into payloads.
        schema: Optional JSON Schema requesting structured output.
    """

    model: str = ""
    messages: List[Message] = field(default_factory=list)
    stream: bool = False
    temperature: float = 0.0
    max_tokens: int = 0
    prompt: str = ""
    options: Dict[str, Any] = field(default_factory=dict)
    schema: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire form, omitting zero-valued optional fields."""
        data: Dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_dict() for m in self.messages],
        }
        if self.stream:
            data["stream"] = True
        if self.temperature:
            data["temperature"] = self.temperature
        if self.max_tokens:
            data["max_tokens"] = self.max_tokens
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChatRequest":
        return cls(
            model=str(data.get("model") or ""),
            messages=[Message.from_dict(m) for m in data.get("messages") or []],
            stream=bool(data.get("stream", False)),
            temperature=float(data.get("temperature") or 0.0),
            max_tokens=int(data.get("max_tokens") or 0),
        )


__all__ = ["ChatRequest"]
