"""Anthropic helpers module.

Purpose:
- Side-effect-free utilities for the Anthropic adaptor: system block
  construction, tool conversion and content shaping for the Messages API.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..base.models import Message
from ..base.utils import split_system_prompt

# Number of word groups the ``system_prompt`` option is split into.
SYSTEM_PROMPT_GROUPS = 3

EPHEMERAL = {"type": "ephemeral"}

TOOL_USAGE_PROMPT = (
    "When multiple tools are needed to answer a question, you should identify all "
    "required tools upfront and use them all at once in your response, rather than "
    "using them sequentially. Do not wait for tool results before calling other tools."
)


def text_block(text: str, *, cached: bool = False) -> Dict[str, Any]:
    block: Dict[str, Any] = {"type": "text", "text": text}
    if cached:
        block["cache_control"] = dict(EPHEMERAL)
    return block


def system_prompt_blocks(system_prompt: str) -> List[Dict[str, Any]]:
    """Split the system prompt into word groups; groups after the first are cache points."""
    parts = split_system_prompt(system_prompt, SYSTEM_PROMPT_GROUPS)
    return [text_block(part, cached=i > 0) for i, part in enumerate(parts)]


def convert_tool(tool: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    """Convert an OpenAI-style (or flat) tool definition to Anthropic's shape."""
    fn = tool.get("function")
    spec = fn if isinstance(fn, Mapping) else tool
    name = spec.get("name")
    if not isinstance(name, str) or not name:
        return None
    schema = spec.get("parameters", spec.get("input_schema")) or {"type": "object", "properties": {}}
    return {
        "name": name,
        "description": spec.get("description") or "",
        "input_schema": schema,
    }


def convert_tools(tools: Any) -> List[Dict[str, Any]]:
    if not isinstance(tools, (list, tuple)):
        return []
    converted = (convert_tool(t) for t in tools if isinstance(t, Mapping))
    return [t for t in converted if t is not None]


def tool_choice_payload(choice: Any) -> Dict[str, Any]:
    if isinstance(choice, str) and choice:
        return {"type": choice}
    if isinstance(choice, Mapping):
        return dict(choice)
    return {"type": "auto"}


def message_payloads(messages: Iterable[Message], *, enable_caching: bool) -> List[Dict[str, Any]]:
    return [
        {"role": m.role, "content": [text_block(m.text(), cached=enable_caching)]}
        for m in messages
    ]


__all__ = [
    "SYSTEM_PROMPT_GROUPS",
    "TOOL_USAGE_PROMPT",
    "text_block",
    "system_prompt_blocks",
    "convert_tool",
    "convert_tools",
    "tool_choice_payload",
    "message_payloads",
]
