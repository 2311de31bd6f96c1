"""
Cohere adaptor package.

Exports:
- CohereAdaptor: adaptor for the Cohere v2 chat endpoint
"""

from .adaptor import CohereAdaptor

__all__ = ["CohereAdaptor"]
