"""Tests for the tv command line."""

import json
import os

from click.testing import CliRunner

from transcript_viewer.cli import cli


def _invoke(config, *args, input=None):
    runner = CliRunner()
    return runner.invoke(cli, list(args), obj={"config": config}, input=input)


def _codex_path(config):
    return config.codex_sessions_dir / "2026" / "03" / "02" / "rollout-2026-03-02T09-15-00.jsonl"


def _claude_path(config):
    return config.claude_projects_dir / "-home-dev-atlas" / "5d1c0f2e.jsonl"


class TestList:
    def test_lists_all(self, populated):
        result = _invoke(populated, "list")
        assert result.exit_code == 0, result.output
        assert "[claude]" in result.output
        assert "[codex]" in result.output
        assert "5d1c0f2e" in result.output

    def test_json_output(self, populated):
        result = _invoke(populated, "list", "--source", "codex", "--json")
        data = json.loads(result.output)
        assert [c["app_type"] for c in data] == ["codex"]
        assert data[0]["session_id"] == "0199a3f1-codex-session"

    def test_limit(self, populated):
        result = _invoke(populated, "list", "--json", "-n", "1")
        assert len(json.loads(result.output)) == 1

    def test_nothing_found(self, config):
        result = _invoke(config, "list")
        assert result.exit_code == 0
        assert "No transcripts found." in result.output


class TestSearch:
    def test_metadata_search(self, populated):
        result = _invoke(populated, "search", "atlas", "--json")
        data = json.loads(result.output)
        assert [c["id"] for c in data] == ["5d1c0f2e"]

    def test_metadata_search_no_results(self, populated):
        result = _invoke(populated, "search", "zzz")
        assert "No results found." in result.output

    def test_content_search_builds_index(self, populated):
        result = _invoke(populated, "search", "--content", "gzip")
        assert result.exit_code == 0, result.output
        assert "Indexed 9 message(s) from 3 transcript(s)" in result.output
        assert "[codex]" in result.output
        assert "USER #2 2026-03-02T09:16:00.000Z" in result.output

    def test_content_search_reuses_current_index(self, populated):
        _invoke(populated, "search", "--content", "gzip")
        result = _invoke(populated, "search", "--content", "gzip")
        assert result.exit_code == 0, result.output
        assert "Indexed" not in result.output
        assert "[codex]" in result.output

    def test_content_search_reindexes_changed_transcript(self, populated):
        _invoke(populated, "search", "--content", "gzip")
        with open(_claude_path(populated), "a") as f:
            f.write('{"type":"user","timestamp":"2026-02-10T15:00:00.000Z","message":{"content":[{"type":"text","text":"Switch to brotli instead of gzip"}]}}\n')
        os.utime(_claude_path(populated), (1_700_000_300, 1_700_000_300))

        result = _invoke(populated, "search", "--content", "brotli")
        assert "Indexed 10 message(s)" in result.output
        assert "-home-dev-atlas" in result.output

    def test_content_search_json(self, populated):
        result = _invoke(populated, "search", "--content", "--reindex", "--json", "fastapi")
        data = json.loads(result.output)
        assert data[0]["app_type"] == "claude"
        assert {hit["file_path"] for hit in data} == {str(_claude_path(populated))}
        assert {hit["role"] for hit in data} <= {"user", "assistant"}
        assert all(hit["timestamp"].startswith("2026-02-10T14:00") for hit in data)

    def test_content_search_filters_source(self, populated):
        result = _invoke(populated, "search", "--content", "--json", "--source", "claude", "gzip")
        assert json.loads(result.output) == []

    def test_content_search_disabled(self, populated):
        populated.search_backend = "none"
        result = _invoke(populated, "search", "--content", "gzip")
        assert result.exit_code == 1
        assert "Content search is disabled" in result.output
        assert "Indexed" not in result.output
        assert not populated.search_index_dir.exists()

    def test_content_search_unknown_backend(self, populated):
        populated.search_backend = "qmd"
        result = _invoke(populated, "search", "--content", "gzip")
        assert result.exit_code == 1
        assert "Unknown search backend" in result.output


class TestShow:
    def test_renders_messages(self, populated):
        result = _invoke(populated, "show", str(_claude_path(populated)))
        assert result.exit_code == 0, result.output
        assert "USER" in result.output
        assert "ASSISTANT" in result.output
        assert "pip install fastapi uvicorn psycopg" in result.output
        assert "```bash" in result.output
        assert "4 message(s): 2 user, 2 assistant" in result.output

    def test_source_inferred_from_location(self, populated):
        result = _invoke(populated, "show", "--json", str(_codex_path(populated)))
        data = json.loads(result.output)
        assert [m["role"] for m in data] == ["user", "assistant", "user"]
        assert data[0]["content"] == "Load the CSV export into S3 nightly."

    def test_unknown_location_requires_source(self, populated, tmp_path):
        outside = tmp_path / "copy.jsonl"
        outside.write_text(_claude_path(populated).read_text())
        result = _invoke(populated, "show", str(outside))
        assert result.exit_code == 2
        assert "--source" in result.output

        result = _invoke(populated, "show", "--source", "claude", "--raw", str(outside))
        assert result.exit_code == 0
        assert "Why does `uvicorn` fail to start?" in result.output

    def test_missing_file(self, populated):
        result = _invoke(populated, "show", "--source", "codex", "/nonexistent/x.jsonl")
        assert result.exit_code == 1
        assert "Failed to read transcript" in result.output

    def test_no_messages(self, populated, tmp_path):
        empty = tmp_path / "empty.jsonl"
        empty.write_text('{"type":"summary"}\n')
        result = _invoke(populated, "show", "--source", "claude", str(empty))
        assert result.exit_code == 0
        assert "No messages found." in result.output


class TestStats:
    def test_counts(self, populated):
        result = _invoke(populated, "stats", "--json", str(_codex_path(populated)))
        assert json.loads(result.output) == {"total": 3, "user": 2, "assistant": 1}


class TestDelete:
    def test_confirm_and_delete(self, populated):
        path = _codex_path(populated)
        result = _invoke(populated, "delete", str(path), input="y\n")
        assert result.exit_code == 0, result.output
        assert not path.exists()
        assert not (populated.codex_sessions_dir / "2026").exists()
        assert populated.codex_sessions_dir.exists()

    def test_abort_keeps_file(self, populated):
        path = _codex_path(populated)
        result = _invoke(populated, "delete", str(path), input="n\n")
        assert result.exit_code == 1
        assert path.exists()

    def test_missing_file(self, populated):
        result = _invoke(populated, "delete", "--yes", "/nonexistent/x.jsonl")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestStatus:
    def test_status(self, populated):
        result = _invoke(populated, "status")
        assert result.exit_code == 0
        assert "Transcripts: 2" in result.output
        assert "Sessions: 1" in result.output
