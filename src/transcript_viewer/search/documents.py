"""Turn transcripts into per-message search documents."""

from __future__ import annotations

import logging

from . import Document

_LOGGER = logging.getLogger(__name__)


def build_documents(conversations) -> list[Document]:
    """Parse each transcript and emit one Document per message.

    Unreadable files are skipped with a warning.
    """
    from ..store import load_conversation

    documents = []
    for conv in conversations:
        try:
            messages = load_conversation(conv.file_path, conv.app_type)
        except OSError as exc:
            _LOGGER.warning("Skipping %s while indexing: %s", conv.file_path, exc)
            continue

        title = conv.project_name or conv.session_id or conv.id
        for position, message in enumerate(messages):
            documents.append(
                Document(
                    doc_id=f"{conv.file_path}#{position}",
                    file_path=conv.file_path,
                    app_type=conv.app_type,
                    title=title,
                    role=message.role,
                    position=position,
                    content=message.content,
                    timestamp=message.timestamp,
                )
            )
    return documents
