"""Caller-facing ``LLM`` facade.

Purpose
-------
Bind one provider (adaptor + spec + connection settings) and expose the
everyday operations: ``generate``, ``generate_with_schema``, ``stream``,
``media`` and ``task_status``. Requests run through a shared :class:`Relay`.

External dependencies
---------------------
- ``httpx`` (through the relay) and ``pydantic`` (``ProviderParams``).

Retry semantics
---------------
- ``generate`` / ``generate_with_schema`` run an attempt loop driven by
  :class:`RetryConfig` with ``max_retries + 1`` attempts. Only errors
  classified as transient (timeouts, rate limits, 5xx, transport failures)
  are retried; waits go through the cancellation token. The last error is
  re-raised unchanged.
- ``stream`` never retries the request; per-event decode failures are
  handled by the ``TokenStream`` retry strategy.

Options
-------
Instance options (``set_option``) are copied per call. ``temperature`` and
``max_tokens`` move into the request fields; everything else is forwarded to
the adaptor, which applies its own deny-list.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import httpx

from ..base.cancellation import CancellationToken
from ..base.constants import OPTION_STRUCTURED_MESSAGES, OPTION_SYSTEM_PROMPT, PROTOCOL_OPENAI
from ..base.dto import ProviderParams
from ..base.errors import DecodeError, RequestError, UnsupportedError
from ..base.interfaces import Adaptor, StreamCapable
from ..base.log_support import LogContext
from ..base.logging import get_logger, log_event
from ..base.models import ChatRequest, ChatResponse, MediaRequest, MediaResponse, Message, TaskStatusResponse
from ..base.provider_config import ProviderConfig
from ..base.registry import ProviderSpec, Registry, get_default_registry
from ..base.resilience.retry import DefaultRetryStrategy, RetryConfig, RetryStrategy, call_with_retry
from ..base.streaming import TokenStream
from ..base.utils import copy_options, filter_options
from ..config import get_provider_config
from ..openai.adaptor import OpenAIAdaptor
from ..relay import Relay, stream_format_for

RESERVED_HEADER_KEYS = ("endpoint", "azure_endpoint")
KEYLESS_PROVIDERS = ("ollama",)
SCHEMA_INSTRUCTIONS = "\n\nPlease provide your response in JSON format according to this schema:\n"

MessageLike = Union[Message, Mapping[str, Any]]

_logger = get_logger("omnirelay.llm")


def _to_messages(messages: Optional[Iterable[MessageLike]]) -> List[Message]:
    out: List[Message] = []
    for item in messages or ():
        out.append(item if isinstance(item, Message) else Message.from_dict(item))
    return out


def _first_choice_content(response: ChatResponse) -> str:
    if not response.choices:
        raise DecodeError("empty response choices")
    content = response.choices[0].message.content
    if content is None:
        raise DecodeError("empty response content")
    return response.first_content()


def _base_url(params: ProviderParams, spec: ProviderSpec) -> str:
    if params.base_url:
        return params.base_url
    lowered = {key.lower(): value for key, value in params.headers.items()}
    for key in RESERVED_HEADER_KEYS:
        if lowered.get(key):
            return lowered[key]
    return spec.endpoint


class LLM:
    """One provider binding.

    Args:
        params: Validated construction parameters.
        registry: Registry used to build the adaptor (default registry when omitted).
        relay: Relay executing the requests (a new one when omitted).
        http_client: Optional ``httpx.Client`` used for every call.

    Raises:
        RequestError: when the API key is empty for a provider that needs one.
        UnknownProviderError: when the provider cannot be resolved.
    """

    def __init__(
        self,
        params: ProviderParams,
        *,
        registry: Optional[Registry] = None,
        relay: Optional[Relay] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        name = params.provider.lower().strip()
        if not params.api_key and name not in KEYLESS_PROVIDERS:
            raise RequestError(f"empty API key for provider {name}")
        registry = registry or get_default_registry()
        adaptor, spec = registry.build_adaptor(name)

        headers = dict(spec.required_headers)
        for key, value in params.headers.items():
            if key.lower() in RESERVED_HEADER_KEYS:
                continue
            headers[key] = value

        self._params = params
        self._spec = spec
        self._adaptor: Adaptor = adaptor
        self._relay = relay or Relay()
        self._config = ProviderConfig(
            name=spec.name,
            api_key=params.api_key,
            model=params.model,
            base_url=_base_url(params, spec),
            organization=params.organization,
            auth_header=spec.auth_header,
            auth_prefix=spec.auth_prefix,
            headers=headers,
            http_client=http_client,
            timeout=params.timeout_seconds,
            chat_protocol=params.chat_protocol,
        )
        self._options: Dict[str, Any] = dict(params.options)
        self._options_lock = threading.Lock()

    # ------------------------------------------------------------ properties
    @property
    def provider_name(self) -> str:
        return self._spec.name

    @property
    def adaptor(self) -> Adaptor:
        return self._adaptor

    @property
    def config(self) -> ProviderConfig:
        """A copy of the bound provider config."""
        return self._config.derive()

    def supports_json_schema(self) -> bool:
        return self._spec.supports_schema

    def supports_streaming(self) -> bool:
        return isinstance(self._adaptor, StreamCapable) or self._spec.supports_streaming

    def _use_openai_protocol(self) -> bool:
        return self._config.chat_protocol.lower() == PROTOCOL_OPENAI

    # --------------------------------------------------------------- options
    def set_option(self, key: str, value: Any) -> None:
        with self._options_lock:
            self._options[key] = value
        log_event(_logger, "llm.option", self._ctx(), level=logging.DEBUG, key=key)

    def options(self) -> Dict[str, Any]:
        """Snapshot of the instance options."""
        with self._options_lock:
            return dict(self._options)

    def _call_options(
        self,
        *,
        system_prompt: Optional[str] = None,
        tools: Optional[Sequence[Mapping[str, Any]]] = None,
        tool_choice: Any = None,
    ) -> Dict[str, Any]:
        options = copy_options(self.options())
        if system_prompt:
            options[OPTION_SYSTEM_PROMPT] = system_prompt
        if tools:
            options["tools"] = list(tools)
        if tool_choice:
            options["tool_choice"] = tool_choice
        if self._use_openai_protocol():
            options = filter_options(options, OPTION_STRUCTURED_MESSAGES)
        return options

    def _build_request(
        self,
        prompt: Optional[str],
        messages: Optional[Iterable[MessageLike]],
        options: Dict[str, Any],
    ) -> ChatRequest:
        temperature = options.pop("temperature", None)
        max_tokens = options.pop("max_tokens", None)
        return ChatRequest(
            model=self._config.model,
            messages=_to_messages(messages),
            prompt=prompt or "",
            temperature=float(temperature) if isinstance(temperature, (int, float)) else 0.0,
            max_tokens=int(max_tokens) if isinstance(max_tokens, (int, float)) else 0,
            options=options,
        )

    # ------------------------------------------------------------ generation
    def generate(
        self,
        prompt: Optional[str] = None,
        *,
        messages: Optional[Iterable[MessageLike]] = None,
        system_prompt: Optional[str] = None,
        tools: Optional[Sequence[Mapping[str, Any]]] = None,
        tool_choice: Any = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> str:
        """Return the first choice content for ``prompt`` / ``messages``."""
        if not prompt and not messages:
            raise RequestError("prompt or messages are required")
        options = self._call_options(system_prompt=system_prompt, tools=tools, tool_choice=tool_choice)
        request = self._build_request(prompt, messages, options)
        return self._with_retry(lambda: self._chat_text(request, cancellation_token), cancellation_token)

    def generate_with_schema(
        self,
        prompt: str,
        schema: Any,
        *,
        system_prompt: Optional[str] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> str:
        """Generate a JSON answer for ``schema``.

        Providers with native schema support receive the schema on the
        request; others get the schema appended to the prompt as
        instructions. The answer must parse as JSON (``DecodeError``
        otherwise).
        """
        if self.supports_json_schema():
            full_prompt = prompt
        else:
            full_prompt = prompt + SCHEMA_INSTRUCTIONS + json.dumps(schema, indent=2, default=str)
        options = self._call_options(system_prompt=system_prompt)
        request = self._build_request(full_prompt, [Message(role="user", content=full_prompt)], options)
        if self.supports_json_schema():
            request.schema = schema

        def attempt() -> str:
            text = self._chat_text(request, cancellation_token)
            try:
                json.loads(text)
            except ValueError as exc:
                raise DecodeError(f"response is not valid JSON: {exc}") from exc
            return text

        return self._with_retry(attempt, cancellation_token)

    def chat(
        self,
        request: ChatRequest,
        *,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> ChatResponse:
        """Send a fully built ``ChatRequest`` once (no retry) and return the raw response."""
        if not request.model:
            request = dataclasses.replace(request, model=self._config.model)
        return self._relay.chat(self._adaptor, self._config, request, cancellation_token=cancellation_token)

    def _chat_text(self, request: ChatRequest, token: Optional[CancellationToken]) -> str:
        response = self._relay.chat(self._adaptor, self._config, request, cancellation_token=token)
        return _first_choice_content(response)

    def _with_retry(self, func, token: Optional[CancellationToken]) -> str:
        ctx = self._ctx()

        def log_attempt(*, attempt: int, max_attempts: int, delay: float | None, error: BaseException | None) -> None:
            log_event(
                _logger,
                "llm.attempt",
                ctx,
                level=logging.INFO if error is None else logging.WARNING,
                attempt=attempt + 1,
                max_attempts=max_attempts,
                retry_in=delay,
                error=str(error) if error is not None else None,
                error_type=type(error).__name__ if error is not None else None,
            )

        config = RetryConfig(
            max_attempts=self._params.max_retries + 1,
            initial_delay=self._params.retry_delay,
            attempt_logger=log_attempt,
        )
        return call_with_retry(func, config, cancellation_token=token)

    # ------------------------------------------------------------- streaming
    def stream(
        self,
        prompt: Optional[str] = None,
        *,
        messages: Optional[Iterable[MessageLike]] = None,
        system_prompt: Optional[str] = None,
        tools: Optional[Sequence[Mapping[str, Any]]] = None,
        tool_choice: Any = None,
        retry_strategy: Optional[RetryStrategy] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> TokenStream:
        """Open a token stream.

        Raises:
            UnsupportedError: when neither the provider nor the adaptor streams.
        """
        if not self.supports_streaming():
            raise UnsupportedError(f"streaming not supported by provider {self.provider_name}")
        if self._use_openai_protocol():
            stream_adaptor: StreamCapable = OpenAIAdaptor()
        elif isinstance(self._adaptor, StreamCapable):
            stream_adaptor = self._adaptor
        else:
            raise UnsupportedError(f"streaming not supported by adaptor for {self.provider_name}")

        options = self._call_options(system_prompt=system_prompt, tools=tools, tool_choice=tool_choice)
        options["stream"] = True
        if self._use_openai_protocol():
            options["stream_options"] = {"include_usage": True}
        request = self._build_request(prompt, messages, options)
        request.stream = True

        strategy = retry_strategy or DefaultRetryStrategy(
            max_retries=self._params.max_retries,
            initial_wait=self._params.retry_delay,
            max_wait=self._params.retry_delay * 10,
        )
        body = self._relay.stream(
            self._adaptor,
            self._config,
            request,
            stream_adaptor=stream_adaptor,
            cancellation_token=cancellation_token,
        )
        return TokenStream(
            body,
            stream_adaptor,
            retry_strategy=strategy,
            cancellation_token=cancellation_token,
            stream_format=stream_format_for(stream_adaptor),
            log_context=self._ctx(),
        )

    # ----------------------------------------------------------------- media
    def media(
        self,
        request: Optional[MediaRequest],
        *,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> MediaResponse:
        """Submit an image or video generation request."""
        if request is None:
            raise RequestError("media request is required")
        if not request.model:
            request = dataclasses.replace(request, model=self._config.model)
        config = self._config.derive(model=request.model)
        return self._relay.media(self._adaptor, config, request, cancellation_token=cancellation_token)

    def task_status(
        self,
        task_id: str,
        *,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> TaskStatusResponse:
        """Poll an asynchronous media task."""
        return self._relay.task_status(self._adaptor, self._config, task_id, cancellation_token=cancellation_token)

    def _ctx(self) -> LogContext:
        return LogContext(provider=self._spec.name, model=self._config.model or None)

    def __repr__(self) -> str:
        return f"LLM(provider={self.provider_name!r}, model={self._config.model!r})"


_PARAM_FIELDS = {
    "model": "model",
    "api_key": "api_key",
    "base_url": "base_url",
    "organization": "organization",
    "timeout": "timeout_seconds",
    "timeout_seconds": "timeout_seconds",
    "headers": "headers",
    "options": "options",
    "chat_protocol": "chat_protocol",
    "max_retries": "max_retries",
    "retry_delay": "retry_delay",
}


def create_llm(
    provider: str,
    *,
    params: Optional[ProviderParams] = None,
    registry: Optional[Registry] = None,
    relay: Optional[Relay] = None,
    http_client: Optional[httpx.Client] = None,
    **kwargs: Any,
) -> LLM:
    """Create an :class:`LLM` for ``provider``.

    Without ``params`` the layered configuration
    (:func:`omnirelay.config.get_provider_config`) is merged with ``kwargs``
    (explicit values win, ``None`` ignored) and validated into
    :class:`ProviderParams`.
    """
    if params is None:
        merged = get_provider_config(provider, kwargs)
        fields: Dict[str, Any] = {"provider": provider}
        for key, value in merged.items():
            target = _PARAM_FIELDS.get(key)
            if target is not None and value is not None:
                fields[target] = value
        params = ProviderParams(**fields)
    return LLM(params, registry=registry, relay=relay, http_client=http_client)


__all__ = ["LLM", "create_llm", "RESERVED_HEADER_KEYS", "SCHEMA_INSTRUCTIONS"]
