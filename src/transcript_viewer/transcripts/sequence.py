"""Assemble normalized messages from a transcript in source order."""

from __future__ import annotations

from collections import Counter
from typing import Callable, Iterator

from . import Message, SourceFormat
from . import claude, codex
from .records import decode_lines

_ADAPTERS: dict[SourceFormat, Callable[[dict], Message | None]] = {
    SourceFormat.CLAUDE: claude.message_from_record,
    SourceFormat.CODEX: codex.message_from_record,
}


class MessageSequence:
    """Ordered messages of one transcript. No sorting, merging or dedup."""

    def __init__(self, messages: list[Message] | None = None) -> None:
        self._messages: list[Message] = list(messages or [])

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __getitem__(self, index):
        return self._messages[index]

    def __bool__(self) -> bool:
        return bool(self._messages)

    def __repr__(self) -> str:
        return f"MessageSequence({len(self._messages)} messages)"

    @property
    def count(self) -> int:
        return len(self._messages)

    def role_counts(self) -> dict[str, int]:
        """Messages per role; both roles are always present."""
        counts = Counter(m.role for m in self._messages)
        return {"user": counts.get("user", 0), "assistant": counts.get("assistant", 0)}


def extract_messages(text: str, source_format: SourceFormat | str) -> MessageSequence:
    """Parse raw transcript text into a MessageSequence.

    Args:
        text: Full content of a .jsonl transcript.
        source_format: Which schema the file uses. Not detected from content.

    Returns:
        The messages in file order. Malformed lines and records that carry no
        displayable text contribute nothing.

    Raises:
        ValueError: If ``source_format`` is not a known format.
    """
    adapter = _ADAPTERS[SourceFormat.parse(source_format)]

    sequence = MessageSequence()
    for record in decode_lines(text):
        message = adapter(record)
        if message is not None:
            sequence.append(message)
    return sequence
