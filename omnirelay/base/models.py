"""
Unified request/response models (DTOs) public surface.

This module re-exports the implementations under
``omnirelay.base.models_parts`` so call sites import from one stable path.
"""

from .models_parts.message import Message, Role
from .models_parts.chat_request import ChatRequest
from .models_parts.chat_response import ChatChoice, ChatResponse, Usage
from .models_parts.media import MediaRequest, MediaResponse, MediaType
from .models_parts.task_status import TaskStatusOutput, TaskStatusResponse

__all__ = [
    "Message",
    "Role",
    "ChatRequest",
    "ChatChoice",
    "ChatResponse",
    "Usage",
    "MediaType",
    "MediaRequest",
    "MediaResponse",
    "TaskStatusOutput",
    "TaskStatusResponse",
]
