"""
Media generation DTOs (image / video).

``MediaRequest.extra`` carries every vendor-specific field (for example a
``req_key`` or reference frames); adaptors read it with the helpers in
``omnirelay.base.utils``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping


class MediaType(str, Enum):
    """Kind of media requested."""

    IMAGE = "image"
    VIDEO = "video"


@dataclass
class MediaRequest:
    """Unified media generation request.

    Attributes:
        type: Media kind; decides the relay mode (``image`` or ``video``).
        model: Target model identifier.
        prompt: Text prompt.
        n: Number of outputs requested (``0`` means vendor default).
        size: Output size hint such as ``"1024x1024"``.
        duration: Video duration in seconds.
        fps: Video frame rate.
        seed: Sampling seed (``0`` means unset).
        response_format: ``"url"`` or ``"b64_json"`` where supported.
        extra: Vendor-specific fields.
    """

    type: str = MediaType.IMAGE.value
    model: str = ""
    prompt: str = ""
    n: int = 0
    size: str = ""
    duration: int = 0
    fps: int = 0
    seed: int = 0
    response_format: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.type, MediaType):
            self.type = self.type.value

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "model": self.model, "prompt": self.prompt}
        for key in ("n", "size", "duration", "fps", "seed", "response_format"):
            value = getattr(self, key)
            if value:
                data[key] = value
        if self.extra:
            data["extra"] = dict(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MediaRequest":
        return cls(
            type=str(data.get("type") or MediaType.IMAGE.value),
            model=str(data.get("model") or ""),
            prompt=str(data.get("prompt") or ""),
            n=int(data.get("n") or 0),
            size=str(data.get("size") or ""),
            duration=int(data.get("duration") or 0),
            fps=int(data.get("fps") or 0),
            seed=int(data.get("seed") or 0),
            response_format=str(data.get("response_format") or ""),
            extra=dict(data.get("extra") or {}),
        )


@dataclass
class MediaResponse:
    """Unified media generation result: a URL, an async task id, or both."""

    task_id: str = ""
    status: str = ""
    url: str = ""
    request_id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            k: v
            for k, v in (
                ("task_id", self.task_id),
                ("status", self.status),
                ("url", self.url),
                ("request_id", self.request_id),
            )
            if v
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MediaResponse":
        return cls(
            task_id=str(data.get("task_id") or ""),
            status=str(data.get("status") or ""),
            url=str(data.get("url") or ""),
            request_id=str(data.get("request_id") or ""),
        )


__all__ = ["MediaType", "MediaRequest", "MediaResponse"]
