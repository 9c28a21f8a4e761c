"""Transcript Viewer: browse Claude Code and Codex CLI conversation logs."""
