"""Shared fixtures: a fake ~/.claude and ~/.codex tree."""

import os
import shutil
from pathlib import Path

import pytest

from transcript_viewer.config import Config

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def config(tmp_path, monkeypatch) -> Config:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    return Config(
        data_dir=tmp_path / "data",
        env_file=tmp_path / "xdg-config" / "transcript-viewer" / "env",
        claude_dir=tmp_path / ".claude",
        codex_home=tmp_path / ".codex",
        search_backend="bm25",
    )


@pytest.fixture
def populated(config) -> Config:
    """Two Claude projects and one Codex session, with distinct mtimes."""
    atlas = config.claude_projects_dir / "-home-dev-atlas"
    atlas.mkdir(parents=True)
    shutil.copy(FIXTURES / "claude-transcript.jsonl", atlas / "5d1c0f2e.jsonl")

    notes = config.claude_projects_dir / "-home-dev-notes"
    notes.mkdir()
    (notes / "a1b2c3.jsonl").write_text(
        '{"type":"user","sessionId":"notes-session","message":{"content":[{"type":"text","text":"Summarize my meeting notes"}]}}\n'
        '{"type":"assistant","sessionId":"notes-session","message":{"content":[{"type":"text","text":"Here is a summary of the standup."}]}}\n'
    )

    # Hidden bookkeeping dir must be ignored
    hidden = config.claude_projects_dir / ".timelines"
    hidden.mkdir()
    (hidden / "ignored.jsonl").write_text("{}\n")

    day = config.codex_sessions_dir / "2026" / "03" / "02"
    day.mkdir(parents=True)
    shutil.copy(FIXTURES / "codex-transcript.jsonl", day / "rollout-2026-03-02T09-15-00.jsonl")

    os.utime(notes / "a1b2c3.jsonl", (1_700_000_000, 1_700_000_000))
    os.utime(atlas / "5d1c0f2e.jsonl", (1_700_000_100, 1_700_000_100))
    os.utime(day / "rollout-2026-03-02T09-15-00.jsonl", (1_700_000_200, 1_700_000_200))
    return config
