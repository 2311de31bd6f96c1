"""Text helpers: system prompt splitting and function-call rendering."""
from __future__ import annotations

import json
from typing import Any, List


def split_system_prompt(prompt: str, parts: int) -> List[str]:
    """Split ``prompt`` into at most ``parts`` groups of whitespace-separated words.

    Groups hold ``ceil(words / parts)`` words each, so fewer groups come back
    for short prompts. Prompts of zero or one word are returned whole.
    """
    if parts <= 1 or not prompt:
        return [prompt]
    words = prompt.split()
    if len(words) <= 1:
        return [prompt]
    size = (len(words) + parts - 1) // parts
    return [" ".join(words[i : i + size]) for i in range(0, len(words), size)]


def format_function_call(name: str, arguments: Any) -> str:
    """Render a tool call as a JSON object string ``{"name": ..., "arguments": ...}``."""
    return json.dumps({"name": name, "arguments": arguments}, ensure_ascii=False)


__all__ = ["split_system_prompt", "format_function_call"]
