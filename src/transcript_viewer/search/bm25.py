"""Message index ranked with rank-bm25."""

from __future__ import annotations

import logging
import pickle
import re
from pathlib import Path

from . import Document, SearchResult

_LOGGER = logging.getLogger(__name__)

_INDEX_VERSION = 2

_STOPWORDS = frozenset({
    "the", "a", "an", "is", "are", "was", "were", "in", "on", "at",
    "to", "for", "of", "and", "or", "but", "not", "with", "by", "from",
    "it", "this", "that", "be", "can", "you", "i", "me", "my",
})


def _tokenize(text: str) -> list[str]:
    """Lowercase, drop punctuation and stopwords. Identifiers keep underscores."""
    text = re.sub(r"[^\w\s]", " ", text.lower())
    return [w for w in text.split() if w not in _STOPWORDS]


class MessageIndex:
    """BM25 index over individual messages, pickled to disk between runs.

    The index remembers the modification time of every transcript it was
    built from, so callers can tell when it no longer matches the disk.
    """

    def __init__(self, index_path: Path) -> None:
        self._index_path = index_path
        self._bm25 = None
        self._documents: list[Document] = []
        self._corpus: list[list[str]] = []
        self._sources: dict[str, float] = {}
        self._load()

    @property
    def document_count(self) -> int:
        return len(self._documents)

    def index(self, documents: list[Document], sources: dict[str, float]) -> None:
        """Replace the index with ``documents`` built from ``sources`` (path -> mtime)."""
        self._documents = documents
        self._corpus = [_tokenize(doc.content) for doc in documents]
        self._sources = dict(sources)
        self._build()
        self._save()

    def is_current(self, conversations) -> bool:
        """True if the index was built from exactly these transcript versions."""
        return self._sources == {c.file_path: c.modified_at for c in conversations}

    def search(
        self,
        query: str,
        limit: int = 10,
        app_type: str | None = None,
    ) -> list[SearchResult]:
        """Rank messages against ``query``, optionally within one agent's transcripts."""
        if self._bm25 is None:
            return []

        terms = _tokenize(query)
        if not terms:
            return []

        scored = sorted(
            (
                (score, doc)
                for score, doc in zip(self._bm25.get_scores(terms), self._documents)
                if score > 0 and (app_type is None or doc.app_type == app_type)
            ),
            key=lambda pair: pair[0],
            reverse=True,
        )
        return [
            SearchResult(document=doc, score=float(score), rank=rank)
            for rank, (score, doc) in enumerate(scored[:limit], start=1)
        ]

    def _build(self) -> None:
        if not self._corpus:
            self._bm25 = None
            return
        from rank_bm25 import BM25Okapi

        self._bm25 = BM25Okapi(self._corpus)

    def _save(self) -> None:
        self._index_path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "version": _INDEX_VERSION,
            "documents": self._documents,
            "corpus": self._corpus,
            "sources": self._sources,
        }
        with open(self._index_path, "wb") as f:
            pickle.dump(data, f)

    def _load(self) -> None:
        if not self._index_path.exists():
            return
        try:
            with open(self._index_path, "rb") as f:
                data = pickle.load(f)
            if data.get("version") != _INDEX_VERSION:
                _LOGGER.info("Ignoring outdated search index at %s", self._index_path)
                return
            self._documents = data["documents"]
            self._corpus = data["corpus"]
            self._sources = data["sources"]
        except Exception as exc:
            _LOGGER.warning("Discarding unreadable search index %s: %s", self._index_path, exc)
            self._documents, self._corpus, self._sources = [], [], {}
            return
        self._build()
