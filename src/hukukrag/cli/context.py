"""hukukrag context — replay a stored conversation and show its context window."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from hukukrag.cli.common import console, load_cli_config, require_file
from hukukrag.cli.errors import err_invalid_history, err_invalid_json
from hukukrag.memory.export import EXPORT_FORMATS, export_conversation
from hukukrag.memory.repository import InMemoryConversationRepository
from hukukrag.memory.window import (
    build_context,
    context_aware_system_prompt,
    update_summary_if_needed,
)

_ROLES = ("user", "assistant", "system")
_PREVIEW_CHARS = 60


def context_cmd(
    history_file: Annotated[
        Path,
        typer.Argument(help='JSON file: [{"role": ..., "content": ...}, ...] or {"title": ..., "messages": [...]}.'),
    ],
    export: Annotated[
        str | None,
        typer.Option("--export", "-e", help=f"Print the conversation as {', '.join(EXPORT_FORMATS)} instead."),
    ] = None,
) -> None:
    """Build the context window (and summary, when due) for a conversation history."""
    cfg = load_cli_config()
    require_file(history_file)

    if export is not None and export not in EXPORT_FORMATS:
        console.print(err_invalid_history(str(history_file), f"unknown export format '{export}'"))
        raise typer.Exit(1)

    try:
        raw = json.loads(history_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        console.print(err_invalid_json(str(history_file), exc.msg))
        raise typer.Exit(1) from exc

    title, messages = _parse_history(raw)
    if messages is None:
        console.print(err_invalid_history(str(history_file), title))
        raise typer.Exit(1)

    conversation_id = history_file.stem
    repo = InMemoryConversationRepository()
    repo.get_or_create(conversation_id, title=title or None)
    for message in messages:
        repo.add_message(conversation_id, message["role"], message["content"])
    update_summary_if_needed(
        repo,
        conversation_id,
        threshold=cfg.context.summarize_threshold,
        resummarize_after=cfg.context.resummarize_after,
    )

    if export is not None:
        typer.echo(export_conversation(repo, conversation_id, export))
        return

    conversation = repo.get(conversation_id)
    window = build_context(
        conversation,
        max_messages=cfg.context.max_messages,
        max_tokens=cfg.context.max_tokens,
        include_summary=cfg.context.include_summary,
    )

    console.print(Panel(escape(context_aware_system_prompt(conversation)), title="[bold]System prompt[/]"))
    if window.summary:
        console.print(Panel(escape(window.summary), title="[bold]Summary[/]"))
    elif conversation.summary is None:
        console.print(
            f"[dim]No summary ({len(conversation.messages)} message(s), "
            f"threshold {cfg.context.summarize_threshold}).[/]"
        )

    table = Table(
        title=f"{len(window.messages)}/{len(conversation.messages)} message(s), ~{window.token_count} tokens"
    )
    table.add_column("Role")
    table.add_column("Content")
    for message in window.messages:
        preview = message.content.replace("\n", " ")
        if len(preview) > _PREVIEW_CHARS:
            preview = preview[:_PREVIEW_CHARS] + "…"
        table.add_row(message.role, escape(preview))
    console.print(table)


def _parse_history(raw: Any) -> tuple[str, list[dict[str, str]] | None]:
    """Return (title, messages); on a malformed payload messages is None and title the reason."""
    title = ""
    if isinstance(raw, dict):
        title = str(raw.get("title") or "")
        raw = raw.get("messages")
    if not isinstance(raw, list):
        return "expected a list of messages", None

    messages: list[dict[str, str]] = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict) or item.get("role") not in _ROLES:
            return f"message {i} needs a role of {', '.join(_ROLES)}", None
        messages.append({"role": item["role"], "content": str(item.get("content") or "")})
    return title, messages
