"""
Ollama adaptor package.

Exports:
- OllamaAdaptor: adaptor for a local Ollama ``/api/generate`` endpoint
"""

from .adaptor import OllamaAdaptor

__all__ = ["OllamaAdaptor"]
