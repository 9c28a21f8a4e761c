"""Paths, defaults, and environment detection."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _xdg_data_home() -> Path:
    return Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))


def _xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def _claude_dir() -> Path:
    override = os.environ.get("TV_CLAUDE_DIR") or os.environ.get("CLAUDE_CONFIG_DIR")
    return Path(override).expanduser() if override else Path.home() / ".claude"


def _codex_home() -> Path:
    override = os.environ.get("TV_CODEX_DIR") or os.environ.get("CODEX_HOME")
    return Path(override).expanduser() if override else Path.home() / ".codex"


ENV_FILE_TEMPLATE = """\
# Transcript Viewer: settings
# This file is read by tv on startup. Values already set in the
# environment take precedence.
#
# Override where transcripts are read from:

# TV_CLAUDE_DIR=~/.claude
# TV_CODEX_DIR=~/.codex

# Full-text search backend: bm25 (default), none
# TV_SEARCH_BACKEND=bm25
"""


@dataclass
class Config:
    """Runtime configuration: resolved from env vars and defaults."""

    # Local data (search index)
    data_dir: Path = field(default_factory=lambda: _xdg_data_home() / "transcript-viewer")

    # Env file for directory overrides
    env_file: Path = field(default_factory=lambda: _xdg_config_home() / "transcript-viewer" / "env")

    # Claude Code root (holds projects/)
    claude_dir: Path = field(default_factory=_claude_dir)

    # Codex CLI root (holds sessions/)
    codex_home: Path = field(default_factory=_codex_home)

    # Search settings
    search_backend: str = field(
        default_factory=lambda: os.environ.get("TV_SEARCH_BACKEND", "bm25")
    )  # "bm25" | "none"

    @property
    def claude_projects_dir(self) -> Path:
        return self.claude_dir / "projects"

    @property
    def codex_sessions_dir(self) -> Path:
        return self.codex_home / "sessions"

    @property
    def transcript_roots(self) -> tuple[Path, Path]:
        return (self.claude_projects_dir, self.codex_sessions_dir)

    @property
    def search_index_dir(self) -> Path:
        return self.data_dir / ".search-index"

    def load_env_file(self) -> None:
        """Load settings from the env file into os.environ (if not already set)."""
        if not self.env_file.exists():
            return
        for line in self.env_file.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip("'\"")
            # Don't overwrite keys already in the environment
            if key and key not in os.environ:
                os.environ[key] = value

    def ensure_env_file(self) -> bool:
        """Create the env file from template if it doesn't exist. Returns True if created."""
        if self.env_file.exists():
            return False
        self.env_file.parent.mkdir(parents=True, exist_ok=True)
        self.env_file.write_text(ENV_FILE_TEMPLATE)
        self.env_file.chmod(0o600)
        return True

    def source_for_path(self, path: Path) -> str | None:
        """Guess which agent wrote a transcript from where it lives."""
        resolved = path.expanduser().resolve()
        for root, source in (
            (self.claude_projects_dir, "claude"),
            (self.codex_sessions_dir, "codex"),
        ):
            try:
                resolved.relative_to(root.expanduser().resolve())
            except ValueError:
                continue
            return source
        return None
