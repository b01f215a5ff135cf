"""Keyword retriever: lexical overlap between an analysed query and chunks.

score(chunk) = |matched query terms| / |query terms|

Query terms are ``analysis.keywords`` united with the keywords of every
expanded query (synonym variants). A term matches a chunk when some token
of the chunk equals it or starts with it; Turkish attaches suffixes to the
stem, so "tazminat" matches "tazminatı" and "tazminatın".

Chunks without any matching term are not returned. Results are ordered by
score, then chunk importance, then corpus order.
"""

from __future__ import annotations

import logging

from hukukrag.models import Chunk, RetrievalResult
from hukukrag.rag.analyzer import QueryAnalysis, extract_keywords
from hukukrag.rag.text import normalize, snippet, tokenize

logger = logging.getLogger(__name__)

_MAX_HIGHLIGHTS = 3


def keyword_retrieval(
    chunks: list[Chunk],
    query: QueryAnalysis,
    limit: int | None = None,
) -> list[RetrievalResult]:
    """Score *chunks* against *query* and return matches best-first.

    Args:
        chunks: Candidate chunks, in corpus order. Never modified.
        query: Output of ``analyze_query``.
        limit: Maximum number of results; ``None`` returns all matches.

    Returns:
        Results with strictly positive scores, at most *limit* of them.
    """
    terms = query_terms(query)
    if not chunks or not terms:
        return []

    results: list[RetrievalResult] = []
    for chunk in chunks:
        tokens = set(tokenize(chunk.content))
        matched = [t for t in terms if _matches(t, tokens)]
        if not matched:
            continue
        results.append(
            RetrievalResult(
                chunk=chunk,
                score=len(matched) / len(terms),
                match_type="keyword",
                highlights=find_highlights(chunk.content, matched),
            )
        )

    # sorted() is stable, so equal (score, importance) keep corpus order.
    results = sorted(
        results,
        key=lambda r: (r.score, r.chunk.metadata.importance or 0.0),
        reverse=True,
    )
    logger.debug("keyword_retrieval: %d/%d chunks matched %d terms", len(results), len(chunks), len(terms))

    if limit is not None:
        results = results[: max(0, limit)]
    return results


def query_terms(query: QueryAnalysis) -> list[str]:
    """Distinct keywords of the query and of all its expansions."""
    terms = list(query.keywords)
    for expanded in query.expanded_queries:
        for keyword in extract_keywords(expanded):
            if keyword not in terms:
                terms.append(keyword)
    return terms


def _matches(term: str, tokens: set[str]) -> bool:
    if term in tokens:
        return True
    return any(token.startswith(term) for token in tokens)


def find_highlights(text: str, terms: list[str]) -> list[str]:
    """Return up to three snippets of *text* centred on the first hit of each term."""
    lowered = normalize(text)
    highlights: list[str] = []
    for term in terms:
        index = lowered.find(term)
        if index == -1:
            continue
        excerpt = snippet(text, index, len(term))
        if excerpt in highlights:
            continue
        highlights.append(excerpt)
        if len(highlights) >= _MAX_HIGHLIGHTS:
            break
    return highlights
