"""Domain models shared by ingestion, retrieval and citation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ChunkMetadata:
    document_id: str
    document_title: str
    chunk_index: int
    total_chunks: int
    type: str = "paragraph"  # article | header | list | table | citation | paragraph
    char_start: int = 0
    char_end: int = 0
    section: str | None = None
    entities: tuple[str, ...] = ()
    importance: float | None = None


@dataclass(frozen=True)
class Chunk:
    id: str
    content: str
    metadata: ChunkMetadata


@dataclass
class RetrievalResult:
    """A chunk scored against one analysed query.

    Attributes:
        chunk: The matched chunk (shared by reference, never copied).
        score: Retrieval score; the reranker returns new results with adjusted scores.
        match_type: Strategy that produced the result. Only "keyword" is implemented.
        highlights: Up to three keyword-centred snippets of the chunk content.
    """

    chunk: Chunk
    score: float
    match_type: str = "keyword"
    highlights: list[str] = field(default_factory=list)


# ------------------------------------------------------------------
# Grounding metadata (produced by the generation provider)
# ------------------------------------------------------------------


@dataclass
class WebSource:
    uri: str = ""
    title: str = ""


@dataclass
class GroundingChunk:
    web: WebSource | None = None


@dataclass
class Segment:
    end_index: int | None = None
    start_index: int | None = None


@dataclass
class GroundingSupport:
    segment: Segment | None = None
    grounding_chunk_indices: list[int] = field(default_factory=list)
    confidence_scores: list[float] = field(default_factory=list)


@dataclass
class GroundingMetadata:
    """Grounding spans returned next to a generated answer.

    Field names follow Python conventions; ``from_dict`` accepts the provider's
    camelCase JSON shape.
    """

    grounding_chunks: list[GroundingChunk] = field(default_factory=list)
    grounding_supports: list[GroundingSupport] = field(default_factory=list)
    web_search_queries: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> GroundingMetadata:
        """Build from a provider payload, tolerating missing keys."""
        if not data:
            return cls()

        chunks: list[GroundingChunk] = []
        for raw in data.get("groundingChunks") or []:
            web = (raw or {}).get("web")
            chunks.append(
                GroundingChunk(
                    web=WebSource(
                        uri=str(web.get("uri") or ""),
                        title=str(web.get("title") or ""),
                    )
                    if web
                    else None
                )
            )

        supports: list[GroundingSupport] = []
        for raw in data.get("groundingSupports") or []:
            raw = raw or {}
            seg = raw.get("segment")
            supports.append(
                GroundingSupport(
                    segment=Segment(
                        end_index=seg.get("endIndex"),
                        start_index=seg.get("startIndex"),
                    )
                    if seg is not None
                    else None,
                    grounding_chunk_indices=list(raw.get("groundingChunkIndices") or []),
                    confidence_scores=list(raw.get("confidenceScores") or []),
                )
            )

        return cls(
            grounding_chunks=chunks,
            grounding_supports=supports,
            web_search_queries=list(data.get("webSearchQueries") or []),
        )


@dataclass(frozen=True)
class EvidenceSource:
    title: str
    uri: str
