"""Output formatters for conversations."""
from __future__ import annotations

import json
from collections.abc import Sequence

from ai_cli.core.models import Message, Role, Usage

_LABELS = {
    Role.SYSTEM: "system",
    Role.USER: "you",
    Role.ASSISTANT: "assistant",
}


def format_message(message: Message, indent: str = "  ") -> str:
    """Format a single message for terminal display."""
    lines = [f"[{_LABELS[message.role]}]"]
    for content_line in message.content.split("\n"):
        lines.append(f"{indent}{content_line}" if content_line else "")
    return "\n".join(lines)


def format_history(messages: Sequence[Message]) -> str:
    """Format a whole conversation, one block per message."""
    if not messages:
        return "(empty conversation)"
    return "\n\n".join(format_message(m) for m in messages)


def history_to_json(messages: Sequence[Message]) -> str:
    """Serialize a conversation to the JSON shape used in API requests."""
    return json.dumps({"messages": [m.to_dict() for m in messages]}, indent=2)


def format_usage(usage: Usage | None) -> str:
    """One-line summary of a provider's token usage."""
    if usage is None:
        return "usage: n/a"
    parts = [
        f"prompt={_count(usage.prompt_tokens)}",
        f"completion={_count(usage.completion_tokens)}",
        f"total={_count(usage.total_tokens)}",
    ]
    return "usage: " + " ".join(parts)


def format_session_summary(provider: str, messages: int, tokens_sent: int | None) -> str:
    """Closing summary printed when an interactive session ends."""
    lines = [
        f"Provider:  {provider}",
        f"Messages:  {messages}",
        f"Tokens:    {_count(tokens_sent)}",
    ]
    return "\n".join(lines)


def _count(value: int | None) -> str:
    return "unknown" if value is None else str(value)
