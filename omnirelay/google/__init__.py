"""
Google adaptor package.

Exports:
- GoogleAdaptor: adaptor for the Gemini REST API (chat, images, video, operations)
"""

from .adaptor import GoogleAdaptor

__all__ = ["GoogleAdaptor"]
