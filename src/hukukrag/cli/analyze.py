"""hukukrag analyze — show how a query is understood."""

from __future__ import annotations

import json
from typing import Annotated, Any

import typer
from rich.markup import escape
from rich.table import Table

from hukukrag.cli.common import console
from hukukrag.rag.analyzer import QueryAnalysis, analyze_query


def analyze_cmd(
    query: Annotated[str, typer.Argument(help="The user question, in Turkish.")],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the analysis as JSON."),
    ] = False,
) -> None:
    """Classify intent and extract entities, keywords, expansions and filters."""
    analysis = analyze_query(query)

    if as_json:
        typer.echo(json.dumps(analysis_to_dict(analysis), ensure_ascii=False, indent=2))
        return

    console.print(f"[bold]Intent:[/] {analysis.intent}")

    table = Table(title="Entities", show_lines=False)
    table.add_column("Type")
    table.add_column("Text")
    table.add_column("Offset", justify="right")
    for entity in analysis.entities:
        table.add_row(entity.type, escape(entity.text), str(entity.offset))
    console.print(table)

    console.print(f"[bold]Keywords:[/] {escape(', '.join(analysis.keywords)) or '(none)'}")
    console.print("[bold]Expanded queries:[/]")
    for expanded in analysis.expanded_queries:
        console.print(f"  • {escape(expanded)}")
    if analysis.filters.courts or analysis.filters.law_numbers:
        console.print(
            f"[bold]Filters:[/] courts={analysis.filters.courts} "
            f"law_numbers={analysis.filters.law_numbers}"
        )


def analysis_to_dict(analysis: QueryAnalysis) -> dict[str, Any]:
    return {
        "original_query": analysis.original_query,
        "intent": analysis.intent,
        "entities": [
            {"type": e.type, "text": e.text, "offset": e.offset} for e in analysis.entities
        ],
        "keywords": analysis.keywords,
        "expanded_queries": analysis.expanded_queries,
        "filters": {
            "courts": analysis.filters.courts,
            "law_numbers": analysis.filters.law_numbers,
        },
    }
