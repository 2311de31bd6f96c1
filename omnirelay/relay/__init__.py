"""
Relay package.

Exports:
- Relay: unified request execution engine (chat, media, task status, stream)
- stream_format_for: framing lookup for stream-capable adaptors
"""

from .relay import Relay, stream_format_for

__all__ = ["Relay", "stream_format_for"]
