"""Tests for hukukrag rich error messages."""

from __future__ import annotations

import pytest

from hukukrag.cli.errors import (
    err_config,
    err_file_not_found,
    err_invalid_citations,
    err_invalid_history,
    err_invalid_json,
    err_unsupported_type,
)


@pytest.mark.parametrize(
    "msg",
    [
        err_file_not_found("kanun.txt"),
        err_unsupported_type("dilekce.docx", [".pdf", ".txt"]),
        err_invalid_json("g.json", "Expecting value"),
        err_config("chunker.max_chars must be >= 1 (got 0)."),
        err_invalid_citations([4, 5], 3),
        err_invalid_history("sohbet.json", "expected a list of messages"),
    ],
)
def test_every_error_has_cause_and_action(msg: str) -> None:
    first, *rest = msg.splitlines()
    assert first.startswith("[red]Error:[/]")
    assert rest, "error must include an action line"


def test_unsupported_type_lists_extensions() -> None:
    assert ".pdf, .txt" in err_unsupported_type("dilekce.docx", [".pdf", ".txt"])


def test_invalid_citations_lists_markers() -> None:
    msg = err_invalid_citations([4, 5], 3)
    assert "[4], [5]" in msg
    assert "only 3 source(s)" in msg
