"""Render cleaned message text into display blocks.

The renderer is line based. Fenced code blocks are the only construct that
spans lines; everything else (headings, list items, inline code, blank lines)
is decided one line at a time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Union

FENCE = "```"
MAX_HEADING_LEVEL = 6

_INLINE_CODE = re.compile(r"(`[^`]+`)")
_HEADING = re.compile(r"^(#+)\s*")
_BULLET = re.compile(r"^[-*]\s")
_NUMBERED = re.compile(r"^\d+\.\s")


@dataclass
class InlineSpan:
    text: str
    code: bool = False


@dataclass
class CodeBlock:
    language: str
    lines: list[str] = field(default_factory=list)
    kind: str = field(default="code", init=False)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass
class Paragraph:
    spans: list[InlineSpan] = field(default_factory=list)
    kind: str = field(default="paragraph", init=False)

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)


@dataclass
class Heading:
    level: int
    text: str
    kind: str = field(default="heading", init=False)


@dataclass
class ListItem:
    ordered: bool
    text: str
    kind: str = field(default="list_item", init=False)


@dataclass
class Separator:
    kind: str = field(default="separator", init=False)


DisplayBlock = Union[CodeBlock, Paragraph, Heading, ListItem, Separator]


class _Fence:
    """Open code fence: declared language plus the body lines seen so far."""

    def __init__(self, language: str) -> None:
        self.language = language
        self.lines: list[str] = []

    def close(self) -> CodeBlock:
        return CodeBlock(language=self.language, lines=self.lines)


def _inline_spans(line: str) -> list[InlineSpan]:
    spans = []
    for part in _INLINE_CODE.split(line):
        if not part:
            continue
        if _INLINE_CODE.fullmatch(part):
            spans.append(InlineSpan(part[1:-1], code=True))
        else:
            spans.append(InlineSpan(part))
    return spans


def _render_line(line: str) -> DisplayBlock:
    """Classify a single line outside a code fence."""
    stripped = line.strip()

    if "`" in line:
        return Paragraph(_inline_spans(line))

    heading = _HEADING.match(line)
    if heading:
        level = min(len(heading.group(1)), MAX_HEADING_LEVEL)
        return Heading(level=level, text=line[heading.end():])

    if _BULLET.match(stripped):
        return ListItem(ordered=False, text=stripped[2:])

    numbered = _NUMBERED.match(stripped)
    if numbered:
        return ListItem(ordered=True, text=stripped[numbered.end():])

    if not stripped:
        return Separator()

    return Paragraph([InlineSpan(line)])


def render_message_body(content: str) -> list[DisplayBlock]:
    """Convert a message body into an ordered list of display blocks.

    A fence that is never closed is emitted as a code block holding every line
    after the opening marker.
    """
    blocks: list[DisplayBlock] = []
    fence: _Fence | None = None

    for line in content.split("\n"):
        starts_fence = line.strip().startswith(FENCE)

        if fence is not None:
            if starts_fence:
                blocks.append(fence.close())
                fence = None
            else:
                fence.lines.append(line)
            continue

        if starts_fence:
            fence = _Fence(line.strip()[len(FENCE):].strip())
            continue

        blocks.append(_render_line(line))

    if fence is not None:
        blocks.append(fence.close())

    return blocks
