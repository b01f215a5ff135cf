"""Tests for inline citation markers."""

from __future__ import annotations

import logging
import re

from hukukrag.models import (
    GroundingChunk,
    GroundingMetadata,
    GroundingSupport,
    Segment,
    WebSource,
)
from hukukrag.rag.citations import (
    add_citations,
    extract_citation_numbers,
    numbered_sources,
    sources_from_grounding,
    validate_citations,
)

ANSWER = "Ali geldi. Veli gitti."


def _support(end: int | None, *indices: int) -> GroundingSupport:
    return GroundingSupport(segment=Segment(end_index=end), grounding_chunk_indices=list(indices))


def _meta(*supports: GroundingSupport) -> GroundingMetadata:
    return GroundingMetadata(grounding_supports=list(supports))


def _strip_markers(text: str) -> str:
    return re.sub(r" ?(?:\[\d+\])+", "", text)


# ------------------------------------------------------------------
# add_citations
# ------------------------------------------------------------------


def test_marker_inserted_after_span():
    out = add_citations(ANSWER, _meta(_support(10, 0)))
    assert out == "Ali geldi. [1] Veli gitti."


def test_original_text_is_preserved():
    out = add_citations(ANSWER, _meta(_support(22, 1), _support(10, 0)))
    assert out == "Ali geldi. [1] Veli gitti. [2]"
    assert _strip_markers(out) == ANSWER


def test_same_offset_markers_merged_and_sorted():
    out = add_citations(ANSWER, _meta(_support(10, 2, 0), _support(10, 1)))
    assert out == "Ali geldi. [1][2][3] Veli gitti."


def test_no_extra_space_after_whitespace():
    assert add_citations("Ali geldi ", _meta(_support(10, 0))) == "Ali geldi [1]"


def test_offset_zero_gets_no_space():
    assert add_citations("metin", _meta(_support(0, 0))) == "[1]metin"


def test_invalid_end_index_is_skipped_with_warning(caplog):
    meta = _meta(_support(999, 0), _support(None, 1), _support(-1, 2), _support(10, 3))
    with caplog.at_level(logging.WARNING, logger="hukukrag.rag.citations"):
        out = add_citations(ANSWER, meta)
    assert out == "Ali geldi. [4] Veli gitti."
    assert caplog.text.count("invalid endIndex") == 3


def test_nothing_to_insert():
    assert add_citations(ANSWER, None) == ANSWER
    assert add_citations(ANSWER, GroundingMetadata()) == ANSWER
    assert add_citations("", _meta(_support(0, 0))) == ""


# ------------------------------------------------------------------
# extract / validate
# ------------------------------------------------------------------


def test_extract_citation_numbers_sorted_distinct():
    assert extract_citation_numbers("a [2] b [1] c [2]") == [1, 2]
    assert extract_citation_numbers("köşeli [parantez] yok") == []


def test_validate_citations():
    ok = validate_citations("x [1] y [2]", 2)
    assert ok.valid
    assert ok.invalid_citations == []

    bad = validate_citations("x [0] y [1] z [3]", 2)
    assert not bad.valid
    assert bad.invalid_citations == [0, 3]


# ------------------------------------------------------------------
# Grounding payload
# ------------------------------------------------------------------


def test_from_dict_reads_camel_case():
    meta = GroundingMetadata.from_dict(
        {
            "groundingChunks": [{"web": {"uri": "https://mevzuat.gov.tr/6698", "title": "KVKK"}}],
            "groundingSupports": [
                {"segment": {"startIndex": 0, "endIndex": 10}, "groundingChunkIndices": [0]}
            ],
            "webSearchQueries": ["kvkk madde 5"],
        }
    )
    assert meta.grounding_chunks[0].web.title == "KVKK"
    assert meta.grounding_supports[0].segment.end_index == 10
    assert meta.grounding_supports[0].grounding_chunk_indices == [0]
    assert meta.web_search_queries == ["kvkk madde 5"]
    assert add_citations(ANSWER, meta) == "Ali geldi. [1] Veli gitti."


def test_from_dict_tolerates_missing_keys():
    assert GroundingMetadata.from_dict(None) == GroundingMetadata()
    meta = GroundingMetadata.from_dict({"groundingSupports": [{"groundingChunkIndices": [0]}]})
    assert meta.grounding_supports[0].segment is None


def test_sources_deduplicated_by_uri():
    meta = GroundingMetadata(
        grounding_chunks=[
            GroundingChunk(web=WebSource("https://mevzuat.gov.tr/6698/", "KVKK")),
            GroundingChunk(web=WebSource("HTTPS://mevzuat.gov.tr/6698", "KVKK tekrar")),
            GroundingChunk(web=None),
            GroundingChunk(web=WebSource("https://karararama.yargitay.gov.tr", "Yargıtay")),
        ]
    )
    sources = sources_from_grounding(meta)
    assert [s.title for s in sources] == ["KVKK", "Yargıtay"]
    assert sources_from_grounding(None) == []


def test_numbered_sources_keep_grounding_positions():
    meta = GroundingMetadata(
        grounding_chunks=[
            GroundingChunk(web=None),
            GroundingChunk(web=WebSource("https://a", "A")),
            GroundingChunk(web=WebSource("https://a/", "A tekrar")),
            GroundingChunk(web=WebSource("https://b", "B")),
        ]
    )
    assert [(n, s.title) for n, s in numbered_sources(meta)] == [(2, "A"), (4, "B")]


# ------------------------------------------------------------------
# Properties
# ------------------------------------------------------------------


def test_marker_after_whitespace_gets_no_extra_space():
    meta = GroundingMetadata(
        grounding_chunks=[GroundingChunk(web=WebSource("https://x", "x"))],
        grounding_supports=[_support(3, 0)],
    )
    assert add_citations("Bu bir tespittir.", meta) == "Bu [1]bir tespittir."


def test_citation_numbers_match_valid_supports():
    meta = _meta(_support(3, 0), _support(10, 4, 1), _support(99, 7), _support(22, 1))
    out = add_citations(ANSWER, meta)
    assert extract_citation_numbers(out) == [1, 2, 5]
    assert _strip_markers(out) == ANSWER
