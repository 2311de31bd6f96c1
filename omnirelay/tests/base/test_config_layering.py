"""Configuration layering tests: defaults, file, env, overrides."""

from __future__ import annotations

import json

from omnirelay.config import DEFAULTS, env_prefix, get_model, get_provider_config, reset_config_cache


def test_defaults_cover_every_builtin_provider() -> None:
    from omnirelay.base.registry import builtin_specs

    assert set(builtin_specs()) <= set(DEFAULTS)  # nosec B101


def test_env_prefix_replaces_hyphens() -> None:
    assert env_prefix("azure-openai") == "AZURE_OPENAI"  # nosec B101


def test_env_overrides_defaults(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_MODEL", "gpt-test")
    monkeypatch.setenv("OPENAI_TIMEOUT", "12.5")
    cfg = get_provider_config("openai")
    assert cfg["model"] == "gpt-test"  # nosec B101
    assert cfg["timeout"] == 12.5  # nosec B101


def test_unparsable_timeout_is_ignored(monkeypatch) -> None:
    monkeypatch.setenv("GROQ_TIMEOUT", "soon")
    assert "timeout" not in get_provider_config("groq")  # nosec B101


def test_file_then_env_then_overrides(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("ANTHROPIC_MODEL", raising=False)
    path = tmp_path / "omnirelay.yaml"
    path.write_text("anthropic:\n  model: from-file\n  base_url: http://file\n", encoding="utf-8")
    monkeypatch.setenv("OMNIRELAY_CONFIG_FILE", str(path))
    reset_config_cache()
    assert get_model("anthropic") == "from-file"  # nosec B101

    monkeypatch.setenv("ANTHROPIC_BASE_URL", "http://env")
    cfg = get_provider_config("anthropic", {"model": "explicit", "api_key": None})
    assert cfg["model"] == "explicit"  # nosec B101
    assert cfg["base_url"] == "http://env"  # nosec B101
    assert "api_key" not in cfg  # nosec B101


def test_json_config_file(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("OLLAMA_MODEL", raising=False)
    path = tmp_path / "omnirelay.json"
    path.write_text(json.dumps({"ollama": {"model": "llama-json"}}), encoding="utf-8")
    monkeypatch.setenv("OMNIRELAY_CONFIG_FILE", str(path))
    reset_config_cache()
    assert get_model("ollama") == "llama-json"  # nosec B101


def test_unknown_provider_has_no_defaults() -> None:
    assert get_provider_config("unknown") == {}  # nosec B101
