"""hukukrag rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from hukukrag.cli.errors import err_file_not_found
    console.print(err_file_not_found(path))
    raise typer.Exit(1)
"""

from __future__ import annotations


def err_file_not_found(path: str) -> str:
    return (
        f"[red]Error:[/] File not found: '{path}'\n"
        "  Check the path, or run the command from the directory that contains it."
    )


def err_unsupported_type(path: str, accepted: list[str]) -> str:
    """Document extension has no loader."""
    return (
        f"[red]Error:[/] Unsupported file type: '{path}'\n"
        f"  Accepted extensions: {', '.join(accepted)}\n"
        "  Convert the document to .txt, .pdf or .html first."
    )


def err_invalid_json(path: str, detail: str) -> str:
    """Grounding metadata file is not valid JSON."""
    return (
        f"[red]Error:[/] '{path}' is not valid JSON ({detail}).\n"
        "  Save the provider's groundingMetadata object as-is, e.g.:\n"
        '    {"groundingChunks": [...], "groundingSupports": [...]}'
    )


def err_invalid_history(path: str, detail: str) -> str:
    """Conversation history file has the wrong shape."""
    return (
        f"[red]Error:[/] Cannot read conversation history '{path}': {detail}.\n"
        '  Use a list of messages, e.g. [{"role": "user", "content": "..."}], '
        "and --export json, markdown or text."
    )


def err_config(detail: str) -> str:
    """hukukrag.yaml or a HUKUKRAG_* variable holds an invalid value."""
    return (
        f"[red]Error:[/] Invalid configuration: {detail}\n"
        "  Fix hukukrag.yaml (or ~/.hukukrag/config.yaml) or unset the HUKUKRAG_* variable."
    )


def err_invalid_citations(invalid: list[int], source_count: int) -> str:
    """Answer cites sources that do not exist (strict mode)."""
    markers = ", ".join(f"[{n}]" for n in invalid)
    return (
        f"[red]Error:[/] Citations without a source: {markers} "
        f"(only {source_count} source(s) available).\n"
        "  Regenerate the answer, or set citations.strict: false in hukukrag.yaml to only warn."
    )
