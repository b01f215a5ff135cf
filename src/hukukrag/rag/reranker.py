"""Entity-overlap reranker.

adjusted(r) = r.score + entity_boost × |query entities also found in r.chunk|

A query entity counts once per result when a chunk entity has the same
``entity_key`` (same law number, article number, docket or court), so
"6698 sayılı" in the query matches "6698 Sayılı" in a chunk.
"""

from __future__ import annotations

import dataclasses
import logging

from hukukrag.models import Chunk, RetrievalResult
from hukukrag.rag.analyzer import QueryAnalysis
from hukukrag.rag.entities import entity_key, extract_entities

logger = logging.getLogger(__name__)

DEFAULT_ENTITY_BOOST = 0.1


def rerank_results(
    results: list[RetrievalResult],
    query: QueryAnalysis,
    entity_boost: float = DEFAULT_ENTITY_BOOST,
) -> list[RetrievalResult]:
    """Return new results with entity-boosted scores, best-first.

    Input results and their chunks are left untouched. Equal adjusted scores
    keep their input order.
    """
    if not results:
        return []

    query_keys = {entity_key(e) for e in query.entities}
    reranked: list[RetrievalResult] = []
    for result in results:
        overlap = len(query_keys & chunk_entity_keys(result.chunk)) if query_keys else 0
        reranked.append(
            dataclasses.replace(
                result,
                score=result.score + entity_boost * overlap,
                highlights=list(result.highlights),
            )
        )

    reranked.sort(key=lambda r: r.score, reverse=True)
    logger.debug("rerank_results: %d results, %d query entities", len(reranked), len(query_keys))
    return reranked


def chunk_entity_keys(chunk: Chunk) -> set[str]:
    """Canonical keys of the entity texts recorded on *chunk*."""
    keys: set[str] = set()
    for text in chunk.metadata.entities or ():
        keys.update(entity_key(e) for e in extract_entities(text))
    return keys
