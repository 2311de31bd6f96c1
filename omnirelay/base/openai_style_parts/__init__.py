"""OpenAI-style composition helpers (chat wrapper)."""

from .chat_wrapper import OpenAIChatStreamWrapper, OpenAIChatWrapper, is_openai_tagged, wrap_chat_with_openai

__all__ = ["OpenAIChatWrapper", "OpenAIChatStreamWrapper", "wrap_chat_with_openai", "is_openai_tagged"]
