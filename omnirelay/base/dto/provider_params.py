"""Typed parameter object for ``create_llm``.

Purpose
-------
Capture the construction parameters of the ``LLM`` facade in one validated
DTO instead of a long keyword list. Values usually come from
``omnirelay.config.get_provider_config`` merged with explicit arguments.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``.model_dump()`` convenience.

Failure modes & side effects
----------------------------
- Pure data container: no I/O. ``pydantic.ValidationError`` is raised for
  wrong types or out-of-range numbers (negative retries, non-positive timeout).
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ProviderParams(BaseModel):
    """Construction parameters for one provider binding.

    Attributes
    ----------
    provider:
        Registry name (e.g. ``"openai"``, ``"anthropic"``).
    model:
        Default model identifier used by chat and media calls.
    api_key:
        Credential attached to outgoing requests.
    base_url:
        Optional endpoint override (proxies, self-hosted gateways).
    organization:
        Optional organization / tenant hint.
    timeout_seconds:
        Optional per-request timeout; when unset the relay default applies.
    headers:
        Extra HTTP headers. The reserved keys ``endpoint`` and
        ``azure_endpoint`` are treated as base URL overrides, not headers.
    options:
        Default generation options merged into every chat call.
    chat_protocol:
        ``"openai"`` forces the OpenAI chat dialect.
    max_retries:
        Attempts after the first one for request-level retry.
    retry_delay:
        Base delay in seconds between attempts (doubles each attempt).
    """

    provider: str
    model: str = ""
    api_key: str = ""
    base_url: str = ""
    organization: str = ""
    timeout_seconds: Optional[float] = Field(default=None, gt=0)
    headers: Dict[str, str] = Field(default_factory=dict)
    options: Dict[str, Any] = Field(default_factory=dict)
    chat_protocol: str = ""
    max_retries: int = Field(default=3, ge=0)
    retry_delay: float = Field(default=1.0, ge=0)


__all__ = ["ProviderParams"]
