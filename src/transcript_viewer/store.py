"""Discover, read and delete transcripts on disk."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from .config import Config
from .transcripts import SourceFormat
from .transcripts.sequence import MessageSequence, extract_messages

_LOGGER = logging.getLogger(__name__)


class ConversationNotFoundError(FileNotFoundError):
    """Raised when a transcript path does not exist."""


@dataclass
class ConversationMeta:
    """Listing entry for one transcript file."""

    id: str  # file stem
    app_type: str  # "claude" or "codex"
    file_path: str
    file_size: int
    modified_at: float
    created_at: float | None = None
    record_count: int = 0  # non-empty lines
    project_name: str | None = None  # Claude: project directory
    session_id: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


def _first_record(lines: list[str]) -> dict | None:
    for line in lines:
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except (ValueError, RecursionError):
            return None
        return record if isinstance(record, dict) else None
    return None


def _read_meta(path: Path, app_type: str, project_name: str | None = None) -> ConversationMeta:
    stat = path.stat()
    lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    first = _first_record(lines) or {}

    session_id = None
    if app_type == "claude":
        session_id = first.get("sessionId")
    elif first.get("type") == "session_meta":
        payload = first.get("payload")
        if isinstance(payload, dict):
            session_id = payload.get("id")

    # st_birthtime only exists on some platforms
    created_at = getattr(stat, "st_birthtime", None)

    return ConversationMeta(
        id=path.stem,
        app_type=app_type,
        file_path=str(path),
        file_size=stat.st_size,
        modified_at=stat.st_mtime,
        created_at=created_at,
        record_count=sum(1 for line in lines if line.strip()),
        project_name=project_name,
        session_id=session_id if isinstance(session_id, str) else None,
    )


def list_claude_conversations(projects_dir: Path) -> list[ConversationMeta]:
    """List Claude Code transcripts, newest first."""
    conversations: list[ConversationMeta] = []
    if not projects_dir.exists():
        return conversations

    for project_dir in projects_dir.iterdir():
        # Skip .timelines and other hidden bookkeeping dirs
        if not project_dir.is_dir() or project_dir.name.startswith("."):
            continue
        for jsonl in project_dir.glob("*.jsonl"):
            try:
                conversations.append(_read_meta(jsonl, "claude", project_dir.name))
            except (OSError, ValueError) as exc:
                _LOGGER.warning("Skipping unreadable transcript %s: %s", jsonl, exc)

    return sorted(conversations, key=lambda c: c.modified_at, reverse=True)


def list_codex_conversations(sessions_dir: Path) -> list[ConversationMeta]:
    """List Codex sessions stored as sessions/YYYY/MM/DD/*.jsonl, newest first."""
    conversations: list[ConversationMeta] = []
    if not sessions_dir.exists():
        return conversations

    for jsonl in sessions_dir.glob("*/*/*/*.jsonl"):
        if not jsonl.is_file():
            continue
        try:
            conversations.append(_read_meta(jsonl, "codex"))
        except (OSError, ValueError) as exc:
            _LOGGER.warning("Skipping unreadable session %s: %s", jsonl, exc)

    return sorted(conversations, key=lambda c: c.modified_at, reverse=True)


def list_conversations(config: Config, app_type: str | None = None) -> list[ConversationMeta]:
    """List transcripts for one agent (``"claude"``/``"codex"``) or both."""
    conversations: list[ConversationMeta] = []
    if app_type in (None, "all", "claude"):
        conversations.extend(list_claude_conversations(config.claude_projects_dir))
    if app_type in (None, "all", "codex"):
        conversations.extend(list_codex_conversations(config.codex_sessions_dir))
    return conversations


def search_conversations(
    config: Config,
    app_type: str | None,
    keyword: str,
) -> list[ConversationMeta]:
    """Filter listed transcripts by a case-insensitive keyword.

    Matches against the file id, the project name and the session id. An empty
    keyword returns everything.
    """
    conversations = list_conversations(config, app_type)
    if not keyword:
        return conversations

    needle = keyword.lower()
    return [
        conv for conv in conversations
        if needle in conv.id.lower()
        or (conv.project_name and needle in conv.project_name.lower())
        or (conv.session_id and needle in conv.session_id.lower())
    ]


def read_conversation_content(file_path: str | Path) -> str:
    """Return the raw text of a transcript."""
    path = Path(file_path)
    if not path.exists():
        raise ConversationNotFoundError(f"Transcript not found: {path}")
    return path.read_text(encoding="utf-8", errors="replace")


def load_conversation(file_path: str | Path, source_format: SourceFormat | str) -> MessageSequence:
    """Read a transcript and extract its messages."""
    return extract_messages(read_conversation_content(file_path), source_format)


def delete_conversation(file_path: str | Path, roots: tuple[Path, ...] = ()) -> None:
    """Delete a transcript and prune the directories it leaves empty.

    Pruning only happens below one of ``roots`` (the Claude projects and Codex
    sessions directories) and never removes a root itself. A transcript that
    lives anywhere else is deleted without touching its parents.
    """
    path = Path(file_path)
    if not path.exists():
        raise ConversationNotFoundError(f"Transcript not found: {path}")

    path.unlink()
    _LOGGER.info("Deleted transcript %s", path)

    parent = path.parent.resolve()
    for root in roots:
        root = root.expanduser().resolve()
        if parent != root and parent.is_relative_to(root):
            _prune_empty_dirs(parent, root)
            break


def _prune_empty_dirs(directory: Path, root: Path) -> None:
    """Remove empty directories upward, stopping below ``root``."""
    while directory != root and directory.is_relative_to(root):
        try:
            if any(directory.iterdir()):
                return
            directory.rmdir()
        except OSError as exc:
            _LOGGER.debug("Stopped pruning at %s: %s", directory, exc)
            return
        _LOGGER.debug("Removed empty directory %s", directory)
        directory = directory.parent
