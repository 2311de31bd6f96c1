"""Unit tests for the provider registry."""

from __future__ import annotations

import dataclasses
import threading
from typing import Optional

import pytest

from omnirelay.anthropic.adaptor import AnthropicAdaptor
from omnirelay.base.errors import UnknownProviderError
from omnirelay.base.registry import ProviderSpec, ProviderType, Registry, builtin_specs, get_default_registry
from omnirelay.openai.adaptor import OpenAIAdaptor


def test_builtin_providers_are_seeded() -> None:
    reg = Registry()
    names = reg.provider_names()
    for name in ("openai", "azure-openai", "anthropic", "groq", "ollama", "google", "ali", "jimeng"):
        assert name in names  # nosec B101 - asserts are appropriate in unit tests
    assert len(builtin_specs()) == 13  # nosec B101


def test_subset_registry_ignores_unknown_names() -> None:
    reg = Registry("openai", "groq", "not-a-provider")
    assert reg.provider_names() == ("groq", "openai")  # nosec B101
    assert reg.get_provider_spec("anthropic") is None  # nosec B101


def test_spec_headers_are_read_only() -> None:
    spec = Registry().get_provider_spec("openrouter")
    assert spec is not None  # nosec B101
    assert spec.required_headers["X-Title"]  # nosec B101
    with pytest.raises(TypeError):
        spec.required_headers["X-Title"] = "changed"  # type: ignore[index]


def test_build_adaptor_for_builtin_families() -> None:
    reg = Registry()
    adaptor, spec = reg.build_adaptor("groq")
    assert isinstance(adaptor, OpenAIAdaptor)  # nosec B101
    assert spec.type is ProviderType.OPENAI  # nosec B101
    adaptor, _ = reg.build_adaptor("anthropic")
    assert isinstance(adaptor, AnthropicAdaptor)  # nosec B101


def test_build_adaptor_unknown_provider() -> None:
    with pytest.raises(UnknownProviderError, match="unknown provider: nope"):
        Registry().build_adaptor("nope")


def test_custom_type_without_factory_is_rejected() -> None:
    reg = Registry()
    reg.register_provider_spec("mine", ProviderSpec(type="custom", endpoint="http://x"))
    with pytest.raises(UnknownProviderError, match="requires a custom adaptor"):
        reg.build_adaptor("mine")


def test_register_forces_name_and_uses_factory() -> None:
    reg = Registry()
    sentinel = OpenAIAdaptor(base_url="http://local")
    stored = reg.register_provider_spec(
        "local", ProviderSpec(name="other", type=ProviderType.CUSTOM, adaptor_factory=lambda: sentinel)
    )
    assert stored.name == "local"  # nosec B101
    adaptor, spec = reg.build_adaptor("local")
    assert adaptor is sentinel  # nosec B101
    assert spec.name == "local"  # nosec B101


def test_register_replaces_existing_entry() -> None:
    reg = Registry("openai")
    reg.register_provider_spec("openai", ProviderSpec(type="openai", endpoint="http://proxy/v1"))
    spec = reg.get_provider_spec("openai")
    assert spec is not None and spec.endpoint == "http://proxy/v1"  # nosec B101
    assert spec.auth_header == ""  # nosec B101


def test_default_registry_is_a_singleton() -> None:
    assert get_default_registry() is get_default_registry()  # nosec B101


def test_lookups_during_reregistration_see_whole_specs() -> None:
    reg = Registry("openai")
    variants = (
        ProviderSpec(type="openai", endpoint="http://a.test/v1", auth_header="Authorization", auth_prefix="Bearer "),
        ProviderSpec(type="anthropic", endpoint="http://b.test/v1/messages", auth_header="x-api-key"),
    )
    expected = [dataclasses.replace(v, name="shared") for v in variants]
    reg.register_provider_spec("shared", variants[0])
    stop = threading.Event()
    seen: list[Optional[ProviderSpec]] = []

    def write() -> None:
        for i in range(300):
            reg.register_provider_spec("shared", variants[i % 2])

    def read() -> None:
        while not stop.is_set():
            seen.append(reg.get_provider_spec("shared"))

    readers = [threading.Thread(target=read) for _ in range(4)]
    writers = [threading.Thread(target=write) for _ in range(2)]
    for t in readers + writers:
        t.start()
    for t in writers:
        t.join()
    stop.set()
    for t in readers:
        t.join()
    assert seen  # nosec B101
    assert all(spec in expected for spec in seen)  # nosec B101
