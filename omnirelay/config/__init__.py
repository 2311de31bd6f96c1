"""Layered configuration for providers.

Goals
-----
* Centralize defaults (models) per provider.
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by OMNIRELAY_CONFIG_FILE
    3. Environment variables (e.g. OPENAI_MODEL, OPENAI_API_KEY)
    4. In-code overrides passed to the helper (``None`` values ignored)
* Provide a single call site: ``get_provider_config(provider)``.

Environment Variable Conventions
--------------------------------
<PROVIDER>_API_KEY, <PROVIDER>_MODEL, <PROVIDER>_BASE_URL, <PROVIDER>_TIMEOUT,
<PROVIDER>_CHAT_PROTOCOL, with the provider name upper-cased and hyphens
replaced by underscores (``azure-openai`` reads ``AZURE_OPENAI_API_KEY``).

External Config File
--------------------
JSON is tried first, then YAML (PyYAML). Structure example:

```
openai:
  model: gpt-4o-mini
groq:
  base_url: https://api.groq.com/openai/v1
  timeout: 30
```

Public API
----------
* get_provider_config(provider: str, overrides: dict | None = None) -> dict
* get_model(provider: str) -> str | None
* reset_config_cache() -> None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .defaults import (
    ALI_DEFAULT_MODEL,
    ANTHROPIC_DEFAULT_MODEL,
    COHERE_DEFAULT_MODEL,
    CONFIG_FILE_ENV,
    DEEPSEEK_DEFAULT_MODEL,
    GOOGLE_DEFAULT_MODEL,
    GROQ_DEFAULT_MODEL,
    JIMENG_DEFAULT_REQ_KEY,
    MISTRAL_DEFAULT_MODEL,
    OLLAMA_DEFAULT_MODEL,
    OPENAI_DEFAULT_MODEL,
    OPENROUTER_DEFAULT_MODEL,
)

# -------------------- Defaults --------------------

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"model": OPENAI_DEFAULT_MODEL},
    "azure-openai": {"model": OPENAI_DEFAULT_MODEL},
    "anthropic": {"model": ANTHROPIC_DEFAULT_MODEL},
    "google": {"model": GOOGLE_DEFAULT_MODEL},
    "google-openai": {"model": GOOGLE_DEFAULT_MODEL},
    "cohere": {"model": COHERE_DEFAULT_MODEL},
    "ollama": {"model": OLLAMA_DEFAULT_MODEL},
    "groq": {"model": GROQ_DEFAULT_MODEL},
    "deepseek": {"model": DEEPSEEK_DEFAULT_MODEL},
    "mistral": {"model": MISTRAL_DEFAULT_MODEL},
    "openrouter": {"model": OPENROUTER_DEFAULT_MODEL},
    "ali": {"model": ALI_DEFAULT_MODEL},
    "jimeng": {"model": JIMENG_DEFAULT_REQ_KEY},
}


ENV_FIELD_MAP = {
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "model": "MODEL",
    "base_url": "BASE_URL",
    "timeout": "TIMEOUT",
    "chat_protocol": "CHAT_PROTOCOL",
}


_FILE_CACHE: Optional[Tuple[str, Dict[str, Any]]] = None


def _parse_config_text(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except ValueError:
        data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


def _load_external_config() -> Dict[str, Any]:
    """Load (and cache per path) the file named by ``OMNIRELAY_CONFIG_FILE``."""
    global _FILE_CACHE  # noqa: PLW0603 - documented module cache
    path = os.getenv(CONFIG_FILE_ENV, "")
    if _FILE_CACHE is not None and _FILE_CACHE[0] == path:
        return _FILE_CACHE[1]
    data: Dict[str, Any] = {}
    if path and Path(path).is_file():
        data = _parse_config_text(Path(path).read_text(encoding="utf-8"))
    _FILE_CACHE = (path, data)
    return data


def reset_config_cache() -> None:
    """Forget the cached config file contents."""
    global _FILE_CACHE  # noqa: PLW0603 - documented module cache
    _FILE_CACHE = None


def env_prefix(provider: str) -> str:
    return provider.upper().replace("-", "_")


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = env_prefix(provider)
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is None:
            continue
        if field == "timeout":
            try:
                out[field] = float(val)
            except ValueError:
                continue
        else:
            out[field] = val
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides
    """
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    # 1. Defaults
    cfg |= DEFAULTS.get(name, {})

    # 2. External config file section
    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    # 3. Env overrides
    cfg |= _env_overrides(name)

    # 4. Explicit overrides arg
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


__all__ = [
    "get_provider_config",
    "get_model",
    "reset_config_cache",
    "env_prefix",
    "DEFAULTS",
    "ENV_FIELD_MAP",
]
