"""omnirelay.config.defaults
=========================

Central place for small, stable default values used by the configuration
layer and the ``LLM`` facade. These defaults can be overridden via
environment variables or an external configuration file.

This module avoids importing from other omnirelay packages to prevent
circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Models ----
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
ANTHROPIC_DEFAULT_MODEL = "claude-3-5-sonnet-latest"
GOOGLE_DEFAULT_MODEL = "gemini-2.0-flash"
COHERE_DEFAULT_MODEL = "command-r-plus"
OLLAMA_DEFAULT_MODEL = "llama3"
GROQ_DEFAULT_MODEL = "llama-3.1-8b-instant"
DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"
MISTRAL_DEFAULT_MODEL = "mistral-small-latest"
OPENROUTER_DEFAULT_MODEL = "openrouter/auto"
ALI_DEFAULT_MODEL = "qwen-plus"
JIMENG_DEFAULT_REQ_KEY = "jimeng_ti2v_v30_pro"

# ---- Request defaults ----
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_SECONDS = 1.0

# ---- Environment ----
# Path of an optional JSON or YAML file with per-provider sections.
CONFIG_FILE_ENV = "OMNIRELAY_CONFIG_FILE"

__all__ = [
    "OPENAI_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_MODEL",
    "GOOGLE_DEFAULT_MODEL",
    "COHERE_DEFAULT_MODEL",
    "OLLAMA_DEFAULT_MODEL",
    "GROQ_DEFAULT_MODEL",
    "DEEPSEEK_DEFAULT_MODEL",
    "MISTRAL_DEFAULT_MODEL",
    "OPENROUTER_DEFAULT_MODEL",
    "ALI_DEFAULT_MODEL",
    "JIMENG_DEFAULT_REQ_KEY",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_DELAY_SECONDS",
    "CONFIG_FILE_ENV",
]
