"""
Task status DTOs returned when polling asynchronous media jobs.

Vendor fields are flattened into the fixed :class:`TaskStatusOutput` record.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping


@dataclass
class TaskStatusOutput:
    task_id: str = ""
    task_status: str = ""
    video_url: str = ""
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            k: v
            for k, v in (
                ("task_id", self.task_id),
                ("task_status", self.task_status),
                ("video_url", self.video_url),
                ("message", self.message),
            )
            if v
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "TaskStatusOutput":
        data = data or {}
        return cls(
            task_id=str(data.get("task_id") or ""),
            task_status=str(data.get("task_status") or ""),
            video_url=str(data.get("video_url") or ""),
            message=str(data.get("message") or ""),
        )


@dataclass
class TaskStatusResponse:
    """Unified task status poll result."""

    request_id: str = ""
    output: TaskStatusOutput = field(default_factory=TaskStatusOutput)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"output": self.output.to_dict()}
        if self.request_id:
            data["request_id"] = self.request_id
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TaskStatusResponse":
        output = data.get("output")
        return cls(
            request_id=str(data.get("request_id") or ""),
            output=TaskStatusOutput.from_dict(output if isinstance(output, Mapping) else None),
        )


__all__ = ["TaskStatusOutput", "TaskStatusResponse"]
