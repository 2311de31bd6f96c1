"""
OpenAI adaptor package.

Exports:
- OpenAIAdaptor: adaptor for the OpenAI REST dialect (and compatible vendors)
"""

from .adaptor import DEFAULT_BASE_URL, OpenAIAdaptor

__all__ = ["OpenAIAdaptor", "DEFAULT_BASE_URL"]
