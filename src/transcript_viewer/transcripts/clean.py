"""Strip injected IDE and environment context from message text."""

from __future__ import annotations

import re

ASSISTANT_NAMES = ("Claude", "Codex")

_ENVIRONMENT_CONTEXT = re.compile(r"<environment_context>.*?</environment_context>", re.DOTALL)

# Lazy match: an unclosed preamble does not match at all and the text is kept.
_IDE_PREAMBLE = re.compile(
    r"# Context from my IDE setup:.*?## My request for (?:"
    + "|".join(ASSISTANT_NAMES)
    + r"):\s*",
    re.DOTALL,
)

_ACTIVE_FILE = re.compile(r"## Active file:.*?(?=\n\n|\Z)", re.DOTALL)
_OPEN_FILES = re.compile(r"## Open files:.*?(?=\n\n|\Z)", re.DOTALL)
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def clean_message_text(text: str | None) -> str | None:
    """Remove boilerplate blocks from a message and normalize blank lines.

    The passes run in a fixed order, each on the output of the previous one:
    environment-context blocks, the "Context from my IDE setup" preamble up to
    the "My request for ..." marker, the "Active file" and "Open files"
    sections (each up to the next blank line), then runs of three or more
    newlines collapse to two and the result is trimmed.

    Returns:
        The cleaned text, or None if nothing but whitespace remains.
    """
    if not text:
        return None

    cleaned = _ENVIRONMENT_CONTEXT.sub("", text)
    cleaned = _IDE_PREAMBLE.sub("", cleaned)
    cleaned = _ACTIVE_FILE.sub("", cleaned)
    cleaned = _OPEN_FILES.sub("", cleaned)
    cleaned = _EXCESS_NEWLINES.sub("\n\n", cleaned).strip()

    return cleaned or None
