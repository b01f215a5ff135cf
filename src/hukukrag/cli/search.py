"""hukukrag search — retrieve, rerank and assemble context from local documents."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from hukukrag.cli.chunk import load_and_chunk
from hukukrag.cli.common import console, load_cli_config
from hukukrag.models import Chunk
from hukukrag.rag.analyzer import analyze_query
from hukukrag.rag.assembler import format_context_from_results
from hukukrag.rag.reranker import rerank_results
from hukukrag.rag.retriever import keyword_retrieval


def search_cmd(
    paths: Annotated[list[Path], typer.Argument(help="Documents to search.")],
    query: Annotated[str, typer.Option("--query", "-q", help="The user question.")],
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Override retrieval.limit."),
    ] = None,
) -> None:
    """Run analyze → retrieve → rerank → assemble over local documents."""
    cfg = load_cli_config()

    corpus: list[Chunk] = []
    for path, document_id in zip(paths, _document_ids(paths)):
        corpus.extend(
            load_and_chunk(
                path, None, cfg.chunker.max_chars, cfg.chunker.min_chars, document_id=document_id
            )
        )

    analysis = analyze_query(query)
    results = keyword_retrieval(corpus, analysis, limit=limit or cfg.retrieval.limit)
    results = rerank_results(results, analysis, entity_boost=cfg.retrieval.entity_boost)

    if not results:
        console.print(f"[yellow]No chunks matched[/] '{escape(query)}' in {len(corpus)} chunk(s).")
        raise typer.Exit(0)

    table = Table(title=f"{len(results)} result(s) — intent: {analysis.intent}")
    table.add_column("Score", justify="right")
    table.add_column("Chunk")
    table.add_column("Section")
    for r in results:
        table.add_row(f"{r.score:.3f}", r.chunk.id, escape(r.chunk.metadata.section or ""))
    console.print(table)
    console.print(Panel(escape(format_context_from_results(results)), title="[bold]Context[/]"))


def _document_ids(paths: list[Path]) -> list[str]:
    """File stems, suffixed with the argument position when a stem repeats."""
    stems = [path.stem for path in paths]
    return [
        stem if stems.count(stem) == 1 else f"{stem}_{i}"
        for i, stem in enumerate(stems, start=1)
    ]
