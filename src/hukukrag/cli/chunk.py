"""hukukrag chunk — split one legal document and show the chunks."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from hukukrag.cli.common import console, load_cli_config, require_file
from hukukrag.cli.errors import err_unsupported_type
from hukukrag.ingest.legal import semantic_chunk
from hukukrag.ingest.loaders import SUPPORTED_EXTS, load_document
from hukukrag.models import Chunk


def chunk_cmd(
    path: Annotated[Path, typer.Argument(help="Document to chunk (.txt, .md, .pdf, .html).")],
    title: Annotated[
        str | None,
        typer.Option("--title", "-t", help="Document title (defaults to the file name)."),
    ] = None,
    max_chars: Annotated[
        int | None,
        typer.Option("--max-chars", min=1, help="Override chunker.max_chars."),
    ] = None,
) -> None:
    """Chunk a document and print offsets, sections, types and entities."""
    cfg = load_cli_config()
    chunks = load_and_chunk(path, title, max_chars or cfg.chunker.max_chars, cfg.chunker.min_chars)

    table = Table(title=f"{path.name} — {len(chunks)} chunk(s)")
    table.add_column("#", justify="right")
    table.add_column("Span")
    table.add_column("Section")
    table.add_column("Type")
    table.add_column("Importance", justify="right")
    table.add_column("Entities")
    for c in chunks:
        meta = c.metadata
        table.add_row(
            str(meta.chunk_index),
            f"{meta.char_start}-{meta.char_end}",
            escape(meta.section or ""),
            meta.type,
            f"{meta.importance:.2f}" if meta.importance is not None else "",
            escape(", ".join(meta.entities)),
        )
    console.print(table)


def load_and_chunk(
    path: Path,
    title: str | None,
    max_chars: int,
    min_chars: int,
    document_id: str | None = None,
) -> list[Chunk]:
    """Load *path* and chunk it; exits 1 on missing or unsupported files.

    The document id defaults to the file stem.
    """
    require_file(path)
    try:
        text = load_document(path)
    except ValueError as exc:
        console.print(err_unsupported_type(str(path), sorted(SUPPORTED_EXTS)))
        raise typer.Exit(1) from exc
    return semantic_chunk(
        text,
        document_id or path.stem,
        title or path.stem,
        max_chars=max_chars,
        min_chars=min_chars,
    )
