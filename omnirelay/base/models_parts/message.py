"""
Message DTO used across adaptors.

``content`` is usually a plain string but may be any JSON value (for example
a list of content parts) since several vendors accept structured content.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Literal, Mapping

# Message roles understood by the unified request shape.
Role = Literal["system", "user", "assistant", "tool"]


@dataclass
class Message:
    """A single chat message.

    Attributes:
        role: Author role (``"system"``, ``"user"``, ``"assistant"``, ``"tool"``).
        content: Plain text or a JSON-compatible structured value.
    """

    role: str
    content: Any = ""

    def text(self) -> str:
        """Return the content as text (non-string content is JSON encoded)."""
        if isinstance(self.content, str):
            return self.content
        if self.content is None:
            return ""
        return json.dumps(self.content, ensure_ascii=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Message":
        return cls(role=str(data.get("role") or ""), content=data.get("content", ""))


__all__ = ["Message", "Role"]
