"""Provider registry.

Purpose
-------
Map provider names (``"openai"``, ``"groq"``, ``"ali"``...) to a
:class:`ProviderSpec` describing the endpoint, credential header, required
headers and capabilities, and build the matching adaptor. Built-in adaptors
are imported lazily using ``importlib`` so importing the registry stays
cheap.

External dependencies
---------------------
- Standard library only (``importlib``, ``threading``, ``types``).

Concurrency
-----------
- Lookups read the current mapping without locking. Writers serialize on a
  lock, copy the mapping, apply the change and publish the new read-only
  mapping in a single assignment.
- ``get_default_registry`` builds the process-wide instance exactly once.
"""

from __future__ import annotations

import dataclasses
import threading
from dataclasses import dataclass, field
from enum import Enum
from importlib import import_module
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple

from .errors import UnknownProviderError
from .interfaces import Adaptor
from .logging import get_logger, log_event

_logger = get_logger("omnirelay.registry")


class ProviderType(str, Enum):
    """Adaptor family a provider belongs to."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    COHERE = "cohere"
    OLLAMA = "ollama"
    GOOGLE = "google"
    ALI = "ali"
    JIMENG = "jimeng"
    CUSTOM = "custom"


# Map adaptor families to import paths and class names
_ADAPTORS: Dict[ProviderType, Dict[str, str]] = {
    ProviderType.OPENAI: {"module": "omnirelay.openai.adaptor", "class": "OpenAIAdaptor"},
    ProviderType.ANTHROPIC: {"module": "omnirelay.anthropic.adaptor", "class": "AnthropicAdaptor"},
    ProviderType.COHERE: {"module": "omnirelay.cohere.adaptor", "class": "CohereAdaptor"},
    ProviderType.OLLAMA: {"module": "omnirelay.ollama.adaptor", "class": "OllamaAdaptor"},
    ProviderType.GOOGLE: {"module": "omnirelay.google.adaptor", "class": "GoogleAdaptor"},
    ProviderType.ALI: {"module": "omnirelay.ali.adaptor", "class": "AliAdaptor"},
    ProviderType.JIMENG: {"module": "omnirelay.jimeng.adaptor", "class": "JimengAdaptor"},
}


def _frozen(headers: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return MappingProxyType(dict(headers or {}))


@dataclass(frozen=True)
class ProviderSpec:
    """Static description of a provider.

    Attributes:
        name: Registry key (forced on registration).
        type: Adaptor family used when no ``adaptor_factory`` is given.
        endpoint: Default endpoint or base URL.
        auth_header: Header carrying the credential (empty for none).
        auth_prefix: Prefix placed before the credential.
        required_headers: Headers every request to the provider carries.
        supports_schema: Native JSON schema support.
        supports_streaming: Native streaming support.
        adaptor_factory: Zero-argument callable building a custom adaptor.
    """

    name: str = ""
    type: ProviderType = ProviderType.CUSTOM
    endpoint: str = ""
    auth_header: str = ""
    auth_prefix: str = ""
    required_headers: Mapping[str, str] = field(default_factory=lambda: _frozen(None))
    supports_schema: bool = False
    supports_streaming: bool = False
    adaptor_factory: Optional[Callable[[], Adaptor]] = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, ProviderType):
            object.__setattr__(self, "type", ProviderType(self.type))
        if not isinstance(self.required_headers, MappingProxyType):
            object.__setattr__(self, "required_headers", _frozen(self.required_headers))


_JSON = {"Content-Type": "application/json"}


def _openai_compatible(name: str, endpoint: str, **extra_headers: str) -> ProviderSpec:
    return ProviderSpec(
        name=name,
        type=ProviderType.OPENAI,
        endpoint=endpoint,
        auth_header="Authorization",
        auth_prefix="Bearer ",
        required_headers={**_JSON, **extra_headers},
        supports_schema=True,
        supports_streaming=True,
    )


def builtin_specs() -> Dict[str, ProviderSpec]:
    """Return a fresh mapping of every built-in provider spec."""
    specs = [
        _openai_compatible("openai", "https://api.openai.com/v1/chat/completions"),
        ProviderSpec(
            name="azure-openai",
            type=ProviderType.OPENAI,
            auth_header="api-key",
            required_headers=_JSON,
            supports_schema=True,
            supports_streaming=True,
        ),
        ProviderSpec(
            name="anthropic",
            type=ProviderType.ANTHROPIC,
            endpoint="https://api.anthropic.com/v1/messages",
            auth_header="x-api-key",
            required_headers={**_JSON, "anthropic-version": "2023-06-01"},
            supports_schema=True,
            supports_streaming=True,
        ),
        _openai_compatible("groq", "https://api.groq.com/openai/v1/chat/completions"),
        ProviderSpec(
            name="ollama",
            type=ProviderType.OLLAMA,
            endpoint="http://localhost:11434/api/generate",
            required_headers=_JSON,
            supports_streaming=True,
        ),
        _openai_compatible("deepseek", "https://api.deepseek.com/chat/completions"),
        _openai_compatible(
            "google-openai",
            "https://generativelanguage.googleapis.com/v1beta/openai/chat/completions",
        ),
        _openai_compatible("mistral", "https://api.mistral.ai/v1/chat/completions"),
        ProviderSpec(
            name="cohere",
            type=ProviderType.COHERE,
            endpoint="https://api.cohere.ai/v2/chat",
            auth_header="Authorization",
            auth_prefix="Bearer ",
            required_headers=_JSON,
            supports_schema=True,
            supports_streaming=True,
        ),
        _openai_compatible(
            "openrouter",
            "https://openrouter.ai/api/v1/chat/completions",
            **{"X-Title": "omnirelay"},
        ),
        ProviderSpec(
            name="google",
            type=ProviderType.GOOGLE,
            endpoint="https://generativelanguage.googleapis.com/v1beta",
            auth_header="x-goog-api-key",
            required_headers=_JSON,
            supports_schema=True,
            supports_streaming=True,
        ),
        ProviderSpec(
            name="ali",
            type=ProviderType.ALI,
            endpoint="https://dashscope.aliyuncs.com",
            auth_header="Authorization",
            auth_prefix="Bearer ",
            required_headers=_JSON,
            supports_streaming=True,
        ),
        ProviderSpec(
            name="jimeng",
            type=ProviderType.JIMENG,
            endpoint="https://visual.volcengineapi.com",
            auth_header="Authorization",
            auth_prefix="Bearer ",
            required_headers=_JSON,
        ),
    ]
    return {spec.name: spec for spec in specs}


def _builtin_adaptor(spec: ProviderSpec) -> Adaptor:
    entry = _ADAPTORS.get(spec.type)
    if entry is None:
        raise UnknownProviderError(f"provider {spec.name} requires a custom adaptor")
    module_path, class_name = entry["module"], entry["class"]
    try:
        mod = import_module(module_path)
    except ImportError as exc:  # pragma: no cover - import failure path
        raise UnknownProviderError(
            f"failed to import module '{module_path}' for provider '{spec.name}': {exc}"
        ) from exc
    klass = getattr(mod, class_name)
    return klass(base_url=spec.endpoint)


class Registry:
    """Name → :class:`ProviderSpec` registry with adaptor construction.

    ``Registry()`` seeds every built-in provider; ``Registry("openai", "groq")``
    seeds only the named ones (unknown names are ignored).
    """

    def __init__(self, *provider_names: str) -> None:
        known = builtin_specs()
        if provider_names:
            known = {name: known[name] for name in provider_names if name in known}
        self._lock = threading.Lock()
        self._specs: Mapping[str, ProviderSpec] = MappingProxyType(known)

    def get_provider_spec(self, name: str) -> Optional[ProviderSpec]:
        """Return the spec registered under ``name`` or ``None``."""
        return self._specs.get(name)

    def register_provider_spec(self, name: str, spec: ProviderSpec) -> ProviderSpec:
        """Register or replace ``name``; the stored spec always carries ``name``."""
        spec = dataclasses.replace(spec, name=name)
        with self._lock:
            updated = dict(self._specs)
            updated[name] = spec
            self._specs = MappingProxyType(updated)
        log_event(
            _logger,
            "registry.register",
            provider=name,
            type=spec.type.value,
            custom_adaptor=spec.adaptor_factory is not None,
        )
        return spec

    def build_adaptor(self, name: str) -> Tuple[Adaptor, ProviderSpec]:
        """Return ``(adaptor, spec)`` for ``name``.

        Raises
        ------
        UnknownProviderError
            If ``name`` is not registered, or its spec has no factory and no
            built-in adaptor family.
        """
        spec = self.get_provider_spec(name)
        if spec is None:
            raise UnknownProviderError(f"unknown provider: {name}")
        if spec.adaptor_factory is not None:
            return spec.adaptor_factory(), spec
        return _builtin_adaptor(spec), spec

    def provider_names(self) -> Tuple[str, ...]:
        """Registered provider names in sorted order."""
        return tuple(sorted(self._specs))


_default_registry: Optional[Registry] = None
_default_lock = threading.Lock()


def get_default_registry() -> Registry:
    """Return the process-wide registry, building it on first use."""
    global _default_registry  # noqa: PLW0603 - documented module singleton
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = Registry()
    return _default_registry


def register_provider(name: str, spec: ProviderSpec) -> ProviderSpec:
    """Register ``spec`` under ``name`` in the default registry."""
    return get_default_registry().register_provider_spec(name, spec)


def register_adaptor(name: str, spec: ProviderSpec, factory: Callable[[], Adaptor]) -> ProviderSpec:
    """Register ``spec`` with a custom adaptor ``factory`` in the default registry."""
    return register_provider(name, dataclasses.replace(spec, adaptor_factory=factory))


__all__ = [
    "ProviderType",
    "ProviderSpec",
    "Registry",
    "UnknownProviderError",
    "builtin_specs",
    "get_default_registry",
    "register_provider",
    "register_adaptor",
]
