"""CLI entry points: tv list, tv search, tv show, tv stats, tv delete, tv status."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

import click

from .config import Config

SOURCES = ["claude", "codex", "all"]

_ROLE_LABELS = {"user": "USER", "assistant": "ASSISTANT"}
_ROLE_COLORS = {"user": "blue", "assistant": "magenta"}


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Transcript Viewer: browse Claude Code & Codex CLI conversation logs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )
    ctx.ensure_object(dict)
    Config().load_env_file()  # Seed os.environ before constructing final config
    ctx.obj.setdefault("config", Config())


def _format_time(epoch: float | None) -> str:
    if not epoch:
        return "-"
    return datetime.fromtimestamp(epoch).strftime("%Y-%m-%d %H:%M")


def _format_timestamp(timestamp: str | None) -> str:
    """Shorten an ISO 8601 timestamp to month-day hour:minute."""
    if not timestamp:
        return ""
    try:
        parsed = datetime.fromisoformat(str(timestamp).replace("Z", "+00:00"))
    except ValueError:
        return str(timestamp)
    return parsed.astimezone().strftime("%m-%d %H:%M")


def _label(conv) -> str:
    return conv.project_name or conv.session_id or conv.id


def _echo_conversations(conversations, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps([c.to_dict() for c in conversations], indent=2))
        return
    for conv in conversations:
        click.echo(
            f"[{conv.app_type}] {_format_time(conv.modified_at)}  "
            f"{_label(conv)}/{conv.id}  ({conv.file_size:,} bytes, {conv.record_count} records)"
        )
        click.echo(f"    {conv.file_path}")


def _resolve_source(config: Config, path: Path, source: str | None) -> str:
    if source:
        return source
    guessed = config.source_for_path(path)
    if guessed is None:
        raise click.UsageError(
            f"Cannot tell which agent wrote {path}; pass --source claude or --source codex."
        )
    return guessed


def _load(config: Config, path: Path, source: str | None):
    from .store import load_conversation

    fmt = _resolve_source(config, path, source)
    try:
        return load_conversation(path, fmt)
    except OSError as e:
        raise click.ClickException(f"Failed to read transcript: {e}") from e


@cli.command("list")
@click.option("--source", type=click.Choice(SOURCES), default="all", help="Which agent transcripts to list")
@click.option("--limit", "-n", type=int, default=0, help="Max transcripts to show (0 = unlimited)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_cmd(ctx: click.Context, source: str, limit: int, as_json: bool) -> None:
    """List transcripts, newest first."""
    from .store import list_conversations

    config = ctx.obj["config"]
    conversations = list_conversations(config, source)[: limit or None]

    if not conversations and not as_json:
        click.echo("No transcripts found.")
        return
    _echo_conversations(conversations, as_json)


@cli.command()
@click.argument("keyword")
@click.option("--source", type=click.Choice(SOURCES), default="all", help="Which agent transcripts to search")
@click.option("--content", is_flag=True, help="Search message text with the full-text index")
@click.option("--limit", "-n", type=int, default=10, help="Max results to return")
@click.option("--reindex", is_flag=True, help="Rebuild the full-text index before searching")
@click.option("--json", "as_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def search(
    ctx: click.Context,
    keyword: str,
    source: str,
    content: bool,
    limit: int,
    reindex: bool,
    as_json: bool,
) -> None:
    """Search transcripts by id, project or session id (or by content with --content)."""
    config = ctx.obj["config"]

    if not content:
        from .store import search_conversations

        matches = search_conversations(config, source, keyword)[: limit or None]
        if not matches and not as_json:
            click.echo("No results found.")
            return
        _echo_conversations(matches, as_json)
        return

    from .search import DISABLED, get_backend, reindex as do_reindex
    from .store import list_conversations

    if config.search_backend == DISABLED:
        raise click.ClickException(
            "Content search is disabled (TV_SEARCH_BACKEND=none). "
            "Set TV_SEARCH_BACKEND=bm25 to enable it."
        )

    try:
        index = get_backend(config.search_backend, config)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    conversations = list_conversations(config)

    if reindex or not index.is_current(conversations):
        n = do_reindex(config, conversations)
        if not as_json:
            click.echo(f"Indexed {n} message(s) from {len(conversations)} transcript(s)")
        index = get_backend(config.search_backend, config)

    results = index.search(keyword, limit=limit, app_type=None if source == "all" else source)

    if as_json:
        output = [
            {
                "rank": r.rank,
                "score": r.score,
                "file_path": r.document.file_path,
                "app_type": r.document.app_type,
                "title": r.document.title,
                "role": r.document.role,
                "position": r.document.position,
                "timestamp": r.document.timestamp,
                "content": r.document.content,
            }
            for r in results
        ]
        click.echo(json.dumps(output, indent=2))
    elif results:
        for r in results:
            doc = r.document
            role = _ROLE_LABELS.get(doc.role, doc.role.upper())
            when = f" {doc.timestamp}" if doc.timestamp else ""
            click.echo(f"\n--- [{r.rank}] [{doc.app_type}] {doc.title} (score: {r.score:.2f}) ---")
            click.secho(f"  {role} #{doc.position}{when}", fg=_ROLE_COLORS.get(doc.role), bold=True)
            click.echo(f"  {doc.file_path}")
            lines = doc.content.strip().splitlines()
            for line in lines[:3]:
                click.echo(f"  {line}")
            if len(lines) > 3:
                click.echo(f"  ... ({len(lines) - 3} more lines)")
    else:
        click.echo("No results found.")


def _echo_blocks(blocks) -> None:
    """Print display blocks as styled terminal text."""
    for block in blocks:
        if block.kind == "code":
            click.secho(f"  ```{block.language}", dim=True)
            for line in block.lines:
                click.secho(f"  {line}", fg="green")
            click.secho("  ```", dim=True)
        elif block.kind == "heading":
            click.secho(f"  {block.text}", bold=True, underline=block.level <= 2)
        elif block.kind == "list_item":
            marker = "›" if block.ordered else "•"
            click.echo(f"    {marker} {block.text}")
        elif block.kind == "separator":
            click.echo("")
        else:
            rendered = "".join(
                click.style(span.text, fg="cyan") if span.code else span.text
                for span in block.spans
            )
            click.echo(f"  {rendered}")


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--source", type=click.Choice(["claude", "codex"]), default=None, help="Transcript format (inferred from location if omitted)")
@click.option("--raw", is_flag=True, help="Print message text without markup rendering")
@click.option("--json", "as_json", is_flag=True, help="Output messages as JSON")
@click.pass_context
def show(ctx: click.Context, path: Path, source: str | None, raw: bool, as_json: bool) -> None:
    """Show the conversation in a transcript."""
    from .render import render_message_body

    config = ctx.obj["config"]
    messages = _load(config, path, source)

    if as_json:
        output = [
            {"role": m.role, "content": m.content, "timestamp": m.timestamp}
            for m in messages
        ]
        click.echo(json.dumps(output, indent=2, ensure_ascii=False))
        return

    if not messages:
        click.echo("No messages found.")
        return

    for message in messages:
        header = _ROLE_LABELS.get(message.role, message.role.upper())
        stamp = _format_timestamp(message.timestamp)
        click.secho(
            f"\n{header}" + (f"  {stamp}" if stamp else ""),
            fg=_ROLE_COLORS.get(message.role),
            bold=True,
        )
        if raw:
            click.echo(message.content)
        else:
            _echo_blocks(render_message_body(message.content))

    counts = messages.role_counts()
    click.echo(
        f"\n{len(messages)} message(s): {counts['user']} user, {counts['assistant']} assistant"
    )


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--source", type=click.Choice(["claude", "codex"]), default=None, help="Transcript format (inferred from location if omitted)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def stats(ctx: click.Context, path: Path, source: str | None, as_json: bool) -> None:
    """Count the messages in a transcript by role."""
    config = ctx.obj["config"]
    messages = _load(config, path, source)
    counts = messages.role_counts()

    if as_json:
        click.echo(json.dumps({"total": len(messages), **counts}))
        return

    click.echo(f"Messages:  {len(messages)}")
    click.echo(f"  user:      {counts['user']}")
    click.echo(f"  assistant: {counts['assistant']}")


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--yes", "-y", is_flag=True, help="Delete without asking")
@click.pass_context
def delete(ctx: click.Context, path: Path, yes: bool) -> None:
    """Delete a transcript file (and any directories it leaves empty)."""
    from .store import ConversationNotFoundError, delete_conversation

    if not yes:
        click.confirm(f"Delete {path}? This cannot be undone", abort=True)

    try:
        delete_conversation(path, ctx.obj["config"].transcript_roots)
    except ConversationNotFoundError as e:
        raise click.ClickException(str(e)) from e
    except OSError as e:
        raise click.ClickException(f"Failed to delete transcript: {e}") from e

    click.echo(f"Deleted {path}")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show configured directories and transcript counts."""
    from .store import list_claude_conversations, list_codex_conversations

    config = ctx.obj["config"]

    click.echo("Transcript Viewer Status")
    click.echo("=" * 40)

    click.echo(f"\nClaude projects: {config.claude_projects_dir}")
    click.echo(f"  Exists: {config.claude_projects_dir.exists()}")
    click.echo(f"  Transcripts: {len(list_claude_conversations(config.claude_projects_dir))}")

    click.echo(f"\nCodex sessions: {config.codex_sessions_dir}")
    click.echo(f"  Exists: {config.codex_sessions_dir.exists()}")
    click.echo(f"  Sessions: {len(list_codex_conversations(config.codex_sessions_dir))}")

    click.echo(f"\nEnv file: {config.env_file}")
    click.echo(f"  Exists: {config.env_file.exists()}")

    click.echo(f"\nSearch backend: {config.search_backend}")
    click.echo(f"  Index dir: {config.search_index_dir}")
