"""Full-text search over transcript messages."""

from __future__ import annotations

from dataclasses import dataclass

DISABLED = "none"


@dataclass
class Document:
    """One cleaned message, addressable back to its transcript."""

    doc_id: str  # "<file_path>#<position>"
    file_path: str
    app_type: str  # "claude" or "codex"
    title: str  # project/session label shown in results
    role: str  # "user" or "assistant"
    position: int  # index of the message within its transcript
    content: str
    timestamp: str | None = None


@dataclass
class SearchResult:
    """A single search hit."""

    document: Document
    score: float
    rank: int


def get_backend(backend_name: str, config):
    """Resolve a backend name to an index. ``"none"`` disables content search."""
    if backend_name == "bm25":
        from .bm25 import MessageIndex

        return MessageIndex(config.search_index_dir / "bm25.pkl")
    elif backend_name == DISABLED:
        return None
    else:
        raise ValueError(
            f"Unknown search backend: {backend_name!r}. "
            "Use 'bm25' or 'none'."
        )


def reindex(config, conversations=None) -> int:
    """Parse transcripts and rebuild the message index.

    Args:
        config: Runtime config.
        conversations: ConversationMeta entries to index. Defaults to every
            transcript under the configured Claude and Codex roots.

    Returns:
        Number of messages indexed (0 when content search is disabled).
    """
    from ..store import list_conversations
    from .documents import build_documents

    index = get_backend(config.search_backend, config)
    if index is None:
        return 0

    if conversations is None:
        conversations = list_conversations(config)

    documents = build_documents(conversations)
    index.index(documents, {c.file_path: c.modified_at for c in conversations})
    return len(documents)
