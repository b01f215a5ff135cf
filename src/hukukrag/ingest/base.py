"""Base chunker interface and offset-preserving span helpers."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from hukukrag.models import Chunk

Span = tuple[int, int]

# Break candidates inside an over-long span, strongest first.
_BREAK_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\n\s*\n"),
    re.compile(r"[.;:]\s+(?=[A-ZÇĞİÖŞÜ(\d])"),
    re.compile(r"\s+"),
)


class BaseChunker(ABC):
    """Abstract base for chunkers that keep absolute character offsets.

    Every chunk's content is exactly ``text[char_start:char_end]`` of the
    document it came from; whitespace at either end of a span is trimmed by
    moving the offsets, never by rewriting the content.

    Args:
        max_chars: Upper bound on a chunk's length in characters.
        min_chars: When an over-long span has to be cut, no cut is made
            closer than this to the start of the span.
    """

    def __init__(self, max_chars: int = 1500, min_chars: int = 100) -> None:
        if max_chars < 1:
            raise ValueError("max_chars must be >= 1")
        if min_chars < 0:
            raise ValueError("min_chars must be >= 0")
        self.max_chars = max_chars
        self.min_chars = min(min_chars, max_chars - 1)

    @abstractmethod
    def chunk(self, text: str, document_id: str, document_title: str) -> list[Chunk]:
        """Split *text* into Chunks with dense ``chunk_index`` 0..n-1."""

    @staticmethod
    def _trim(text: str, start: int, end: int) -> Span | None:
        """Shrink [start, end) past surrounding whitespace; None if nothing is left."""
        while start < end and text[start].isspace():
            start += 1
        while end > start and text[end - 1].isspace():
            end -= 1
        if start >= end:
            return None
        return start, end

    def _split_window(self, text: str, start: int, end: int) -> list[Span]:
        """Cut [start, end) into trimmed spans no longer than ``max_chars``.

        Each cut is placed at the last paragraph break, sentence end or
        whitespace found between ``min_chars`` and ``max_chars`` from the
        current position, in that order of preference. Text without any
        break candidate is cut hard at ``max_chars``.
        """
        spans: list[Span] = []
        pos = start
        while pos < end:
            trimmed = self._trim(text, pos, end)
            if trimmed is None:
                break
            pos = trimmed[0]
            if end - pos <= self.max_chars:
                spans.append(trimmed)
                break

            lo = pos + self.min_chars
            hi = pos + self.max_chars
            cut = hi
            for pattern in _BREAK_PATTERNS:
                last = None
                for last in pattern.finditer(text, lo, hi):
                    pass
                if last is not None and last.end() > pos:
                    cut = last.end()
                    break

            piece = self._trim(text, pos, cut)
            if piece is not None:
                spans.append(piece)
            pos = cut
        return spans
