"""TaskCapable Protocol (single-class module).

Capability for adaptors that can poll asynchronous media jobs.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..models import TaskStatusResponse
from ..provider_config import ProviderConfig


@runtime_checkable
class TaskCapable(Protocol):
    def resolve_task_status_url(self, task_id: str, config: ProviderConfig) -> str:  # pragma: no cover - interface
        """Return the status endpoint for ``task_id``."""
        ...

    def decode_task_status(self, config: ProviderConfig, body: bytes) -> TaskStatusResponse:  # pragma: no cover - interface
        """Parse a vendor task status body."""
        ...


__all__ = ["TaskCapable"]
