"""
Jimeng adaptor package.

Exports:
- JimengAdaptor: adaptor for Jimeng asynchronous video generation
"""

from .adaptor import JimengAdaptor

__all__ = ["JimengAdaptor"]
