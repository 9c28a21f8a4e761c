"""Transcript interpreters for Claude Code and Codex CLI session logs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SourceFormat(Enum):
    CLAUDE = "claude"  # Claude Code: ~/.claude/projects/<project>/<session>.jsonl
    CODEX = "codex"  # Codex CLI: ~/.codex/sessions/YYYY/MM/DD/rollout-*.jsonl

    @classmethod
    def parse(cls, value: SourceFormat | str) -> SourceFormat:
        """Resolve a format tag. Accepts the enum, its value, or the "A"/"B" aliases."""
        if isinstance(value, cls):
            return value
        tag = str(value).strip().lower()
        aliases = {"a": cls.CLAUDE, "b": cls.CODEX}
        if tag in aliases:
            return aliases[tag]
        try:
            return cls(tag)
        except ValueError:
            raise ValueError(
                f"Unknown source format: {value!r}. Use 'claude' or 'codex'."
            ) from None


@dataclass
class Message:
    """Normalized message from any agent transcript."""

    role: str  # "user" or "assistant"
    content: str  # cleaned text, never empty
    timestamp: str | None = None  # copied verbatim from the record
    source: str = ""  # "claude" or "codex"


TEXT_ITEM_TYPES = ("text", "input_text", "output_text")


def join_text_items(content) -> str | None:
    """Join the text payloads of a content-item list with newlines.

    Returns None when ``content`` is not a list. Items whose type is not one of
    TEXT_ITEM_TYPES are ignored, as are empty texts.
    """
    if not isinstance(content, list):
        return None

    parts = []
    for item in content:
        if not isinstance(item, dict):
            continue
        if item.get("type") not in TEXT_ITEM_TYPES:
            continue
        text = item.get("text")
        if isinstance(text, str) and text:
            parts.append(text)
    return "\n".join(parts)
