"""hukukrag CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from hukukrag.cli.analyze import analyze_cmd
from hukukrag.cli.chunk import chunk_cmd
from hukukrag.cli.cite import cite_cmd
from hukukrag.cli.context import context_cmd
from hukukrag.cli.search import search_cmd
from hukukrag.log import setup_logging


def _installed_version() -> str:
    try:
        return importlib.metadata.version("hukukrag")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hukukrag {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="hukukrag",
    help=(
        "hukukrag — Turkish legal assistant core.\n\n"
        "  hukukrag analyze  Show intent, entities and expansions of a question.\n"
        "  hukukrag search   Retrieve and assemble context from local documents.\n"
        "  hukukrag context  Show the conversation window sent with the next question."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR (default: $HUKUKRAG_LOG_LEVEL)."),
    ] = None,
) -> None:
    """hukukrag — Turkish legal assistant core."""
    setup_logging(log_level)


app.command("analyze")(analyze_cmd)
app.command("chunk")(chunk_cmd)
app.command("search")(search_cmd)
app.command("cite")(cite_cmd)
app.command("context")(context_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed hukukrag version."""
    typer.echo(f"hukukrag {_installed_version()}")


if __name__ == "__main__":
    app()
