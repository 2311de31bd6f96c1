"""
ChatResponse DTO and its nested choice / usage records.

Field names follow the OpenAI chat completion schema, which is the common
response shape every adaptor decodes into.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .message import Message


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


@dataclass
class Usage:
    """Token usage statistics."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            k: v
            for k, v in (
                ("prompt_tokens", self.prompt_tokens),
                ("completion_tokens", self.completion_tokens),
                ("total_tokens", self.total_tokens),
            )
            if v
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Usage":
        data = data or {}
        return cls(
            prompt_tokens=_as_int(data.get("prompt_tokens")),
            completion_tokens=_as_int(data.get("completion_tokens")),
            total_tokens=_as_int(data.get("total_tokens")),
        )


@dataclass
class ChatChoice:
    """A single response choice."""

    index: int = 0
    message: Message = field(default_factory=lambda: Message(role="assistant"))
    finish_reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"message": self.message.to_dict()}
        if self.index:
            data["index"] = self.index
        if self.finish_reason:
            data["finish_reason"] = self.finish_reason
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChatChoice":
        return cls(
            index=_as_int(data.get("index")),
            message=Message.from_dict(data.get("message") or {}),
            finish_reason=str(data.get("finish_reason") or ""),
        )


@dataclass
class ChatResponse:
    """Unified chat completion response.

    Attributes:
        id: Vendor response identifier.
        object: Object type tag (``"chat.completion"`` for synthesized responses).
        created: Unix timestamp of creation.
        model: Model that produced the response.
        choices: Ordered list of `ChatChoice` items.
        usage: Token usage counters.
    """

    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: List[ChatChoice] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)

    def first_content(self) -> str:
        """Return the text of the first choice or an empty string."""
        if not self.choices:
            return ""
        return self.choices[0].message.text()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for key in ("id", "object", "created", "model"):
            value = getattr(self, key)
            if value:
                data[key] = value
        if self.choices:
            data["choices"] = [c.to_dict() for c in self.choices]
        data["usage"] = self.usage.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChatResponse":
        return cls(
            id=str(data.get("id") or ""),
            object=str(data.get("object") or ""),
            created=_as_int(data.get("created")),
            model=str(data.get("model") or ""),
            choices=[ChatChoice.from_dict(c) for c in data.get("choices") or [] if isinstance(c, Mapping)],
            usage=Usage.from_dict(data.get("usage") if isinstance(data.get("usage"), Mapping) else None),
        )


__all__ = ["Usage", "ChatChoice", "ChatResponse"]
