"""
Service package.

Exports:
- LLM: caller-facing provider binding (generate, stream, media, task status)
- create_llm: construct an ``LLM`` from layered configuration
"""

from .llm import LLM, create_llm

__all__ = ["LLM", "create_llm"]
