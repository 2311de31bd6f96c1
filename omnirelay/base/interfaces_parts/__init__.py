"""Adaptor protocol and capability protocols (one class per module)."""

from .adaptor import Adaptor
from .capability import require_capability
from .chunk import ChunkResult, ChunkSignal
from .custom_task_request import CustomTaskRequest
from .protocol_tagged import ProtocolTagged
from .stream_capable import StreamCapable
from .stream_framing import StreamFraming
from .stream_headers import StreamHeaders
from .task_capable import TaskCapable

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
