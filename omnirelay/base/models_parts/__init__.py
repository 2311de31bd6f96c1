"""Model DTO parts (one concern per module, re-exported by ``base.models``)."""

from .message import Message, Role
from .chat_request import ChatRequest
from .chat_response import ChatChoice, ChatResponse, Usage
from .media import MediaRequest, MediaResponse, MediaType
from .task_status import TaskStatusOutput, TaskStatusResponse

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
