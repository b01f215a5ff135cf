"""Helpers shared by the hukukrag CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from hukukrag.cli.errors import err_config, err_file_not_found
from hukukrag.config import ConfigError, HukukConfig, load_config

console = Console()


def load_cli_config() -> HukukConfig:
    """Load config from CWD + global file; exit 1 with a readable message on error."""
    try:
        return load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1) from exc


def require_file(path: Path) -> None:
    if not path.is_file():
        console.print(err_file_not_found(str(path)))
        raise typer.Exit(1)
