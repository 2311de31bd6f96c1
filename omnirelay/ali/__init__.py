"""
Ali (DashScope) adaptor package.

Exports:
- AliAdaptor: adaptor for DashScope chat, video generation and task polling
"""

from .adaptor import AliAdaptor

__all__ = ["AliAdaptor"]
