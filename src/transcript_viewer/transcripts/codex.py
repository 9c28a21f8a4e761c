"""Extract messages from Codex CLI session records."""

from __future__ import annotations

from . import Message, join_text_items
from .clean import clean_message_text


def message_from_record(entry: dict) -> Message | None:
    """Map one decoded Codex record to a Message.

    Codex rollouts interleave session metadata, turn context, reasoning and
    tool calls with the actual conversation. Only ``response_item`` records
    whose payload is a user or assistant ``message`` are kept.
    """
    if entry.get("type") != "response_item":
        return None

    payload = entry.get("payload")
    if not isinstance(payload, dict) or payload.get("type") != "message":
        return None

    role = payload.get("role")
    if role not in ("user", "assistant"):
        return None

    content = clean_message_text(join_text_items(payload.get("content")))
    if not content:
        return None

    return Message(
        role="user" if role == "user" else "assistant",
        content=content,
        timestamp=entry.get("timestamp"),
        source="codex",
    )
