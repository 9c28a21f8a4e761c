"""Extract messages from Claude Code transcript records."""

from __future__ import annotations

from . import Message, join_text_items
from .clean import clean_message_text

ROLES = ("user", "assistant")


def message_from_record(entry: dict) -> Message | None:
    """Map one decoded Claude Code record to a Message.

    Only ``user`` and ``assistant`` entries carry conversation turns; summaries,
    file-history snapshots and the like are skipped. The text lives in
    ``message.content`` as a list of typed items.
    """
    role = entry.get("type")
    if role not in ROLES:
        return None

    msg = entry.get("message")
    if not isinstance(msg, dict):
        return None

    content = clean_message_text(join_text_items(msg.get("content")))
    if not content:
        return None

    return Message(
        role=role,
        content=content,
        timestamp=entry.get("timestamp"),
        source="claude",
    )
