"""Relay execution engine.

Purpose
-------
Run one unified request against a vendor through its adaptor: encode the
payload, resolve the URL, build headers, pick the HTTP client, classify the
status and decode the body. ``stream`` stops after the status check and
hands back the open body.

External dependencies
---------------------
- ``httpx`` for the synchronous transport.

Status classification
---------------------
- chat / media: 200 and 202 succeed.
- task status: any 2xx succeeds.
- stream: only 200 succeeds.
Every other status raises ``RelayError(code=status, message=<body text>,
provider=config.name)``. Transport errors propagate unchanged.

Headers
-------
Adaptor headers are applied first, then ``config.headers`` overrides (last
write wins).
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Tuple

import httpx

from ..base.cancellation import CancellationToken, CancelledError
from ..base.constants import MODE_CHAT, MODE_IMAGE, MODE_TASK, MODE_VIDEO, PROTOCOL_OPENAI, STREAM_FORMAT_SSE
from ..base.errors import RelayError, RequestError, UnsupportedError
from ..base.http import request_timeout, select_client
from ..base.interfaces import (
    Adaptor,
    CustomTaskRequest,
    StreamCapable,
    StreamFraming,
    StreamHeaders,
    TaskCapable,
    require_capability,
)
from ..base.log_support import LogContext
from ..base.logging import get_logger, log_event
from ..base.models import ChatRequest, ChatResponse, MediaRequest, MediaResponse, TaskStatusResponse
from ..base.openai_style_parts import is_openai_tagged
from ..base.provider_config import ProviderConfig
from ..base.streaming import StreamBody
from ..openai.adaptor import OpenAIAdaptor

_MEDIA_MODES = {"image": MODE_IMAGE, "video": MODE_VIDEO}
_OK_STATUSES = (200, 202)

_logger = get_logger("omnirelay.relay")


def stream_format_for(adaptor: Any) -> str:
    """Framing of ``adaptor``'s stream (``"sse"`` unless it declares otherwise)."""
    if isinstance(adaptor, StreamFraming):
        return adaptor.stream_format()
    return STREAM_FORMAT_SSE


def _require_config(config: Optional[ProviderConfig]) -> ProviderConfig:
    if config is None:
        raise RequestError("provider config is required")
    return config


def _status_error(config: ProviderConfig, response: httpx.Response) -> RelayError:
    return RelayError(code=response.status_code, message=response.text, provider=config.name)


class Relay:
    """Executes adaptor-driven requests.

    Args:
        client: Optional shared ``httpx.Client`` used when a config carries
            none. Without one, each call builds and closes its own client.
        logger: Logger receiving ``relay.*`` events.
    """

    def __init__(self, client: Optional[httpx.Client] = None, *, logger: Optional[logging.Logger] = None) -> None:
        self.client = client
        self._logger = logger or _logger

    # ------------------------------------------------------------------ chat
    def chat(
        self,
        adaptor: Adaptor,
        config: Optional[ProviderConfig],
        request: ChatRequest,
        *,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> ChatResponse:
        """Execute a chat completion and return the decoded response."""
        config = _require_config(config)
        if request.model and not config.model:
            config = config.derive(model=request.model)
        converter: Adaptor = adaptor
        if config.chat_protocol.lower() == PROTOCOL_OPENAI and not is_openai_tagged(adaptor):
            converter = OpenAIAdaptor()
        body = converter.encode_chat(config, request)
        raw = self._do_request(adaptor, config, MODE_CHAT, body, cancellation_token)
        return converter.decode_chat(config, raw)

    # ----------------------------------------------------------------- media
    def media(
        self,
        adaptor: Adaptor,
        config: Optional[ProviderConfig],
        request: Optional[MediaRequest],
        *,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> MediaResponse:
        """Execute an image or video generation request."""
        config = _require_config(config)
        if request is None:
            raise RequestError("media request is required")
        mode = _MEDIA_MODES.get(str(request.type))
        if mode is None:
            raise UnsupportedError(f"unsupported media type: {request.type}")
        if request.model and not config.model:
            config = config.derive(model=request.model)
        body = adaptor.encode_media(config, mode, request)
        raw = self._do_request(adaptor, config, mode, body, cancellation_token)
        return adaptor.decode_media(config, mode, raw)

    # ------------------------------------------------------------------ task
    def task_status(
        self,
        adaptor: Adaptor,
        config: Optional[ProviderConfig],
        task_id: str,
        *,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> TaskStatusResponse:
        """Poll an asynchronous task.

        The poll is a GET without body unless the adaptor provides its own
        method and body through ``prepare_task_status_request``.
        """
        config = _require_config(config)
        task_adaptor = require_capability(adaptor, TaskCapable, "task status")
        if not task_id:
            raise RequestError("task id is required")
        url = task_adaptor.resolve_task_status_url(task_id, config)
        method, body = "GET", b""
        if isinstance(adaptor, CustomTaskRequest):
            method, body = adaptor.prepare_task_status_request(config, task_id)
        response, elapsed = self._send(
            adaptor, config, MODE_TASK, method, url, body, cancellation_token, stream=False
        )
        if not 200 <= response.status_code < 300:
            raise self._failed(config, MODE_TASK, response, elapsed)
        self._log_response(config, MODE_TASK, response, elapsed)
        result = task_adaptor.decode_task_status(config, response.content)
        if not result.output.task_id:
            result.output.task_id = task_id
        return result

    # ---------------------------------------------------------------- stream
    def stream(
        self,
        adaptor: Adaptor,
        config: Optional[ProviderConfig],
        request: ChatRequest,
        *,
        stream_adaptor: Optional[StreamCapable] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> StreamBody:
        """Open a streaming chat request and return the live body.

        ``stream_adaptor`` encodes the request (default: ``adaptor`` itself,
        which must then be stream capable). Stream headers contributed by
        the adaptor are applied to a derived config; the caller's config is
        never mutated. The caller owns the returned body and must close it.
        """
        config = _require_config(config)
        if stream_adaptor is None:
            stream_adaptor = require_capability(adaptor, StreamCapable, "streaming")
        if request.model and not config.model:
            config = config.derive(model=request.model)
        if isinstance(adaptor, StreamHeaders):
            config = config.with_headers(dict(adaptor.stream_headers(config)))
        body = stream_adaptor.prepare_stream_request(config, request)
        url = self._resolve_url(adaptor, config, MODE_CHAT)
        client, owned = select_client(config.http_client, self.client, timeout=config.timeout)
        try:
            response, elapsed = self._send(
                adaptor, config, MODE_CHAT, "POST", url, body, cancellation_token, stream=True, client=client
            )
        except BaseException:
            if owned:
                client.close()
            raise
        if response.status_code != 200:
            try:
                response.read()
                raise self._failed(config, MODE_CHAT, response, elapsed)
            finally:
                response.close()
                if owned:
                    client.close()
        log_event(
            self._logger,
            "stream.open",
            self._ctx(config, MODE_CHAT),
            status=response.status_code,
            elapsed_ms=elapsed,
        )
        return StreamBody(response, owned_client=client if owned else None)

    # --------------------------------------------------------------- helpers
    def _do_request(
        self,
        adaptor: Adaptor,
        config: ProviderConfig,
        mode: str,
        body: bytes,
        token: Optional[CancellationToken],
    ) -> bytes:
        url = self._resolve_url(adaptor, config, mode)
        response, elapsed = self._send(adaptor, config, mode, "POST", url, body, token, stream=False)
        if response.status_code not in _OK_STATUSES:
            raise self._failed(config, mode, response, elapsed)
        self._log_response(config, mode, response, elapsed)
        return response.content

    @staticmethod
    def _resolve_url(adaptor: Adaptor, config: ProviderConfig, mode: str) -> str:
        url = adaptor.resolve_url(mode, config)
        if not url:
            raise RequestError("request url is empty")
        return url

    @staticmethod
    def _headers(adaptor: Adaptor, config: ProviderConfig, mode: str) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        adaptor.apply_auth(headers, config, mode)
        headers.update(config.headers)
        return headers

    def _send(
        self,
        adaptor: Adaptor,
        config: ProviderConfig,
        mode: str,
        method: str,
        url: str,
        body: bytes,
        token: Optional[CancellationToken],
        *,
        stream: bool,
        client: Optional[httpx.Client] = None,
    ) -> Tuple[httpx.Response, int]:
        """Send one request and return ``(response, elapsed_ms)``.

        Without ``stream`` the body is read before returning and a client
        built for this call is closed. A cancelled token closes the
        in-flight response, which aborts the read with ``CancelledError``.
        """
        if token is not None:
            token.raise_if_cancelled()
        owned = False
        if client is None:
            client, owned = select_client(config.http_client, self.client, timeout=config.timeout)
        headers = self._headers(adaptor, config, mode)
        request = client.build_request(
            method,
            url,
            content=body or None,
            headers=headers,
            timeout=request_timeout(config.timeout, stream=stream),
        )
        ctx = self._ctx(config, mode)
        log_event(self._logger, "relay.request", ctx, method=method, url=url, bytes=len(body))
        start = time.perf_counter()
        try:
            response = client.send(request, stream=True)
            if stream:
                return response, int((time.perf_counter() - start) * 1000)
            remove = token.add_callback(response.close) if token is not None else None
            try:
                response.read()
            except (httpx.HTTPError, httpx.StreamError) as exc:
                if token is not None and token.cancelled:
                    raise CancelledError(token.reason or "request cancelled") from exc
                raise
            finally:
                if remove is not None:
                    remove()
                response.close()
            if token is not None and token.cancelled:
                raise CancelledError(token.reason or "request cancelled")
            return response, int((time.perf_counter() - start) * 1000)
        except httpx.TransportError as exc:
            log_event(
                self._logger,
                "relay.error",
                ctx,
                level=logging.WARNING,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise
        finally:
            if owned and not stream:
                client.close()

    def _failed(self, config: ProviderConfig, mode: str, response: httpx.Response, elapsed: int) -> RelayError:
        error = _status_error(config, response)
        log_event(
            self._logger,
            "relay.error",
            self._ctx(config, mode),
            level=logging.WARNING,
            status=response.status_code,
            elapsed_ms=elapsed,
            error_code=error.error_code.value,
        )
        return error

    def _log_response(self, config: ProviderConfig, mode: str, response: httpx.Response, elapsed: int) -> None:
        log_event(
            self._logger,
            "relay.response",
            self._ctx(config, mode),
            status=response.status_code,
            elapsed_ms=elapsed,
            bytes=len(response.content),
        )

    @staticmethod
    def _ctx(config: ProviderConfig, mode: str) -> LogContext:
        return LogContext(provider=config.name or None, model=config.model or None, mode=mode)


__all__ = ["Relay", "stream_format_for"]
