"""
Anthropic adaptor package.

Exports:
- AnthropicAdaptor: adaptor for the Anthropic Messages API
"""

from .adaptor import AnthropicAdaptor

__all__ = ["AnthropicAdaptor"]
