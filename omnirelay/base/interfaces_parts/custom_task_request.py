"""CustomTaskRequest Protocol (single-class module)."""

from __future__ import annotations

from typing import Protocol, Tuple, runtime_checkable

from ..provider_config import ProviderConfig


@runtime_checkable
class CustomTaskRequest(Protocol):
    """Task-capable adaptors whose status poll is not a bodiless GET.

    Returns the HTTP method and request body for the poll.
    """

    def prepare_task_status_request(self, config: ProviderConfig, task_id: str) -> Tuple[str, bytes]:  # pragma: no cover - interface
        ...


__all__ = ["CustomTaskRequest"]
