"""Timeout defaults for relay HTTP calls and streams.

TimeoutConfig
    Frozen dataclass with the normalized timeout values (seconds).

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use and again only when the overrides change. Supported variables
    (all optional):
        OMNIRELAY_HTTP_TIMEOUT_SECONDS
        OMNIRELAY_STREAM_TIMEOUT_SECONDS

Values that are unset, unparsable or not positive fall back to defaults.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

HTTP_TIMEOUT_ENV = "OMNIRELAY_HTTP_TIMEOUT_SECONDS"
STREAM_TIMEOUT_ENV = "OMNIRELAY_STREAM_TIMEOUT_SECONDS"


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        http_timeout_seconds: Timeout applied to clients the relay builds
            itself when the provider config carries no timeout.
        stream_timeout_seconds: Timeout for streaming requests whose provider
            config carries no timeout. ``None`` keeps the client default.
    """

    http_timeout_seconds: float = 60.0
    stream_timeout_seconds: float | None = None


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float | None) -> float | None:
    """Read ``name`` from the environment as a positive float or return ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached ``TimeoutConfig`` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join([os.getenv(HTTP_TIMEOUT_ENV, ""), os.getenv(STREAM_TIMEOUT_ENV, "")])
    if _CACHED is not None and guard == _ENV_GUARD:
        return _CACHED
    http = _parse_env_float(HTTP_TIMEOUT_ENV, 60.0)
    stream = _parse_env_float(STREAM_TIMEOUT_ENV, None)
    _CACHED = TimeoutConfig(
        http_timeout_seconds=float(http),
        stream_timeout_seconds=float(stream) if stream is not None else None,
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
