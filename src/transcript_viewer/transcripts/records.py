"""Split raw transcript text into decoded JSON records."""

from __future__ import annotations

import json
import logging
from typing import Iterator

_LOGGER = logging.getLogger(__name__)


class DecodedLines:
    """Lazy view over the JSON records in a newline-delimited transcript.

    Every iteration rescans the text from the top, so the same instance can be
    consumed more than once. Blank lines are skipped before decoding, and lines
    that fail to decode (or decode to something other than an object) are
    dropped without interrupting the scan.
    """

    def __init__(self, text: str) -> None:
        self._text = text

    def __iter__(self) -> Iterator[dict]:
        for lineno, line in enumerate(self._text.split("\n"), start=1):
            if not line.strip():
                continue
            try:
                record = json.loads(line)
            except (ValueError, RecursionError) as exc:
                _LOGGER.debug("Skipping malformed JSON on line %d: %s", lineno, exc)
                continue
            if not isinstance(record, dict):
                _LOGGER.debug("Skipping non-object record on line %d", lineno)
                continue
            yield record


def decode_lines(text: str) -> DecodedLines:
    return DecodedLines(text)
