"""Inline citation markers from grounding metadata.

``add_citations`` inserts "[n]" markers (n = grounding chunk index + 1) at
the end offset of every grounding support. Markers are pure insertions: no
character of the answer is removed or changed. A single space is inserted
before a marker when the character before it is not whitespace.

Supports with a missing, negative or out-of-range end offset are skipped
with a warning; the rest are still applied.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from hukukrag.models import EvidenceSource, GroundingMetadata

logger = logging.getLogger(__name__)

_CITATION_RE = re.compile(r"\[(\d+)\]")


@dataclass
class CitationValidation:
    valid: bool
    invalid_citations: list[int] = field(default_factory=list)


def add_citations(text: str, metadata: GroundingMetadata | None) -> str:
    """Return *text* with "[n]" markers inserted at grounded span ends."""
    if not text or metadata is None or not metadata.grounding_supports:
        return text

    insertions: dict[int, set[int]] = {}
    for support in metadata.grounding_supports:
        end = support.segment.end_index if support.segment is not None else None
        if end is None or end < 0 or end > len(text):
            logger.warning("Skipping grounding support with invalid endIndex=%r", end)
            continue
        if not support.grounding_chunk_indices:
            continue
        numbers = insertions.setdefault(end, set())
        numbers.update(idx + 1 for idx in support.grounding_chunk_indices)

    parts: list[str] = []
    cursor = 0
    for offset in sorted(insertions):
        parts.append(text[cursor:offset])
        if offset > 0 and not text[offset - 1].isspace():
            parts.append(" ")
        parts.append("".join(f"[{n}]" for n in sorted(insertions[offset])))
        cursor = offset
    parts.append(text[cursor:])
    return "".join(parts)


def extract_citation_numbers(text: str) -> list[int]:
    """Sorted, distinct numbers of all "[n]" markers in *text*."""
    return sorted({int(m.group(1)) for m in _CITATION_RE.finditer(text)})


def validate_citations(text: str, source_count: int) -> CitationValidation:
    """Report markers that do not point at one of *source_count* sources."""
    invalid = [n for n in extract_citation_numbers(text) if n < 1 or n > source_count]
    return CitationValidation(valid=not invalid, invalid_citations=invalid)


def sources_from_grounding(metadata: GroundingMetadata | None) -> list[EvidenceSource]:
    """Web sources of *metadata*, first occurrence per normalised URI."""
    return [source for _, source in numbered_sources(metadata)]


def numbered_sources(metadata: GroundingMetadata | None) -> list[tuple[int, EvidenceSource]]:
    """Like sources_from_grounding, paired with the [n] marker number of each source.

    The number is the grounding chunk index + 1 of the first occurrence, so it
    matches the markers inserted by add_citations even when earlier chunks were
    dropped as duplicates or non-web entries.
    """
    if metadata is None:
        return []
    numbered: list[tuple[int, EvidenceSource]] = []
    seen: set[str] = set()
    for i, chunk in enumerate(metadata.grounding_chunks, start=1):
        if chunk.web is None or not chunk.web.uri:
            continue
        key = _normalize_uri(chunk.web.uri)
        if key in seen:
            continue
        seen.add(key)
        numbered.append((i, EvidenceSource(title=chunk.web.title, uri=chunk.web.uri)))
    return numbered


def _normalize_uri(uri: str) -> str:
    return uri.strip().rstrip("/").lower()
