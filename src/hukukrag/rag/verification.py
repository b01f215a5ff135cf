"""Answer verification: are the legal references in an answer backed by its sources?

Reporting only. Nothing here raises on odd input; callers decide whether a
low score is logged, shown as a badge, or blocks the answer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from hukukrag.rag.citations import validate_citations
from hukukrag.rag.entities import entity_texts
from hukukrag.rag.text import normalize

RiskLevel = Literal["low", "medium", "high"]


@dataclass
class EntityMatch:
    entity: str
    found_in_source: bool


@dataclass
class AnswerVerification:
    """Outcome of ``verify_answer``.

    Attributes:
        entity_grounding: Share of answer entities present in the sources (0-1).
        matches: Per-entity result, in answer order.
        citations_valid: Whether every "[n]" marker points at an existing source.
        invalid_citations: Marker numbers outside 1..source_count.
        risk_level: "low", "medium" or "high".
        warnings: Human-readable (Turkish) findings for display.
    """

    entity_grounding: float
    matches: list[EntityMatch] = field(default_factory=list)
    citations_valid: bool = True
    invalid_citations: list[int] = field(default_factory=list)
    risk_level: RiskLevel = "low"
    warnings: list[str] = field(default_factory=list)


def extract_legal_entities(text: str) -> list[str]:
    return entity_texts(text)


def calculate_entity_grounding(
    entities: list[str], source_text: str
) -> tuple[float, list[EntityMatch]]:
    """Return (share of *entities* found in *source_text*, per-entity matches).

    An answer without entities is fully grounded (1.0).
    """
    if not entities:
        return 1.0, []
    haystack = normalize(source_text)
    matches = [EntityMatch(e, normalize(e) in haystack) for e in entities]
    found = sum(1 for m in matches if m.found_in_source)
    return found / len(entities), matches


def verify_answer(
    answer: str,
    source_texts: list[str],
    source_count: int | None = None,
) -> AnswerVerification:
    """Check *answer* against the texts of the sources it was generated from.

    Args:
        answer: Generated answer, usually after ``add_citations``.
        source_texts: Full text of every source (chunk contents or pages).
        source_count: Number of citable sources; defaults to ``len(source_texts)``.
    """
    count = len(source_texts) if source_count is None else source_count
    grounding, matches = calculate_entity_grounding(
        extract_legal_entities(answer), " ".join(source_texts)
    )
    citations = validate_citations(answer, count)

    warnings: list[str] = []
    orphaned = [m.entity for m in matches if not m.found_in_source]
    if orphaned:
        shown = ", ".join(orphaned[:3]) + ("..." if len(orphaned) > 3 else "")
        warnings.append(
            f"Yanıtta kaynaklarla desteklenmeyen {len(orphaned)} referans bulundu: {shown}"
        )
    if not citations.valid:
        warnings.append(
            "Geçersiz kaynak numaraları: "
            + ", ".join(f"[{n}]" for n in citations.invalid_citations)
        )

    if grounding >= 0.7 and citations.valid:
        risk: RiskLevel = "low"
    elif grounding >= 0.4:
        risk = "medium"
    else:
        risk = "high"

    return AnswerVerification(
        entity_grounding=grounding,
        matches=matches,
        citations_valid=citations.valid,
        invalid_citations=citations.invalid_citations,
        risk_level=risk,
        warnings=warnings,
    )
