"""hukukrag cite — annotate a generated answer with its grounding metadata."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from hukukrag.cli.common import console, load_cli_config, require_file
from hukukrag.cli.errors import err_invalid_citations, err_invalid_json, err_unsupported_type
from hukukrag.ingest.loaders import SUPPORTED_EXTS, load_document
from hukukrag.models import GroundingMetadata
from hukukrag.rag.citations import add_citations, numbered_sources, validate_citations
from hukukrag.rag.verification import verify_answer

_RISK_STYLES = {"low": "green", "medium": "yellow", "high": "red"}


def cite_cmd(
    answer_file: Annotated[Path, typer.Argument(help="Text file with the generated answer.")],
    metadata_file: Annotated[
        Path, typer.Argument(help="JSON file with the provider's groundingMetadata.")
    ],
    source_files: Annotated[
        list[Path] | None,
        typer.Option("--source", "-s", help="Source document to verify legal references against (repeatable)."),
    ] = None,
) -> None:
    """Insert [n] citation markers and list the cited sources."""
    cfg = load_cli_config()
    require_file(answer_file)
    require_file(metadata_file)

    answer = answer_file.read_text(encoding="utf-8")
    try:
        raw = json.loads(metadata_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        console.print(err_invalid_json(str(metadata_file), exc.msg))
        raise typer.Exit(1) from exc

    metadata = GroundingMetadata.from_dict(raw if isinstance(raw, dict) else None)
    annotated = add_citations(answer, metadata)
    typer.echo(annotated)

    sources = numbered_sources(metadata)
    if sources:
        console.print("\n[bold]Kaynaklar[/]")
        for i, source in sources:
            console.print(f"  [{i}] {escape(source.title or source.uri)} — {escape(source.uri)}")

    if source_files:
        _report_verification(annotated, source_files, len(metadata.grounding_chunks))

    validation = validate_citations(annotated, len(metadata.grounding_chunks))
    if validation.valid:
        return
    if cfg.citations.strict:
        console.print(err_invalid_citations(validation.invalid_citations, len(metadata.grounding_chunks)))
        raise typer.Exit(1)
    console.print(
        "[yellow]⚠[/]  Citations without a source: "
        + ", ".join(f"[{n}]" for n in validation.invalid_citations)
    )


def _report_verification(answer: str, paths: list[Path], source_count: int) -> None:
    texts: list[str] = []
    for path in paths:
        require_file(path)
        try:
            texts.append(load_document(path))
        except ValueError as exc:
            console.print(err_unsupported_type(str(path), sorted(SUPPORTED_EXTS)))
            raise typer.Exit(1) from exc

    result = verify_answer(answer, texts, source_count=source_count)
    style = _RISK_STYLES[result.risk_level]
    console.print(
        f"\n[bold]Doğrulama:[/] entity grounding {result.entity_grounding:.0%}, "
        f"risk [{style}]{result.risk_level}[/]"
    )
    for warning in result.warnings:
        console.print(f"  [yellow]⚠[/]  {escape(warning)}")
