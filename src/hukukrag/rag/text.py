"""Turkish-aware text helpers used by the analyzer, retriever and memory search."""

from __future__ import annotations

import re

# Dotted/dotless I have to be mapped before str.lower(), which would turn
# "İ" into "i" + U+0307 and "I" into "i".
_TR_UPPER = str.maketrans({"İ": "i", "I": "ı"})

_WORD_EDGE_RE = re.compile(r"^[\W_]+|[\W_]+$")


def normalize(text: str) -> str:
    """Lower-case *text* with Turkish casing rules."""
    return text.translate(_TR_UPPER).lower()


def tokenize(text: str) -> list[str]:
    """Split *text* on whitespace into normalised tokens.

    Leading and trailing punctuation is stripped from every token
    ("nedir?" → "nedir"); tokens that are pure punctuation are dropped.
    """
    tokens: list[str] = []
    for raw in text.split():
        token = _WORD_EDGE_RE.sub("", normalize(raw))
        if token:
            tokens.append(token)
    return tokens


def snippet(text: str, start: int, length: int, context: int = 50) -> str:
    """Return text[start:start+length] padded with *context* chars each side.

    Elided ends are marked with "...".
    """
    lo = max(0, start - context)
    hi = min(len(text), start + length + context)
    out = text[lo:hi]
    if lo > 0:
        out = "..." + out
    if hi < len(text):
        out = out + "..."
    return out
