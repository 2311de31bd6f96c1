"""Shared fixtures for the omnirelay test suite.

HTTP is exercised through ``httpx.MockTransport``; no test touches the
network. ``relay_events`` captures the structured JSON events emitted on the
``omnirelay`` logger (which does not propagate to the root logger).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Optional

import httpx
import pytest

from omnirelay.base.logging import BASE_LOGGER_NAME, LOG_LEVEL_ENV, get_logger
from omnirelay.base.registry import builtin_specs
from omnirelay.base.timeouts import HTTP_TIMEOUT_ENV, STREAM_TIMEOUT_ENV
from omnirelay.config import ENV_FIELD_MAP, env_prefix, reset_config_cache


class Recorder:
    """Record outgoing requests and answer them from a response queue.

    The last queued response is reused once the queue is down to one entry,
    so retry tests can queue a failure followed by a success.
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._responses: List[httpx.Response] = []

    def queue(
        self,
        status: int = 200,
        *,
        json_body: Any = None,
        content: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
    ) -> "Recorder":
        if json_body is not None:
            response = httpx.Response(status, json=json_body, headers=headers)
        else:
            response = httpx.Response(status, content=content, headers=headers)
        self._responses.append(response)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            return httpx.Response(500, content=b"no response queued")
        if len(self._responses) > 1:
            template = self._responses.pop(0)
        else:
            template = self._responses[0]
        return httpx.Response(
            template.status_code,
            content=template.content,
            headers=template.headers,
        )

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture()
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture()
def relay_events() -> Iterator[List[Dict[str, Any]]]:
    """Collect structured events logged under the ``omnirelay`` logger."""
    events: List[Dict[str, Any]] = []
    logger = get_logger(BASE_LOGGER_NAME)

    class _Collector(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            try:
                payload = json.loads(record.getMessage())
            except ValueError:
                return
            if isinstance(payload, dict):
                events.append(payload)

    handler = _Collector(level=logging.DEBUG)
    logger.addHandler(handler)
    try:
        yield events
    finally:
        logger.removeHandler(handler)


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep the layered config independent of the developer environment."""
    for name in ("OMNIRELAY_CONFIG_FILE", LOG_LEVEL_ENV, HTTP_TIMEOUT_ENV, STREAM_TIMEOUT_ENV):
        monkeypatch.delenv(name, raising=False)
    for provider in builtin_specs():
        for suffix in ENV_FIELD_MAP.values():
            monkeypatch.delenv(f"{env_prefix(provider)}_{suffix}", raising=False)
    reset_config_cache()
    yield
    reset_config_cache()
