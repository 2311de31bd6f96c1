"""HTTP client helpers for the relay."""

from .client import new_client, request_timeout, select_client

__all__ = ["new_client", "request_timeout", "select_client"]
