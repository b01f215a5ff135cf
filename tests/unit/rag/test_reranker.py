"""Tests for the entity-overlap reranker."""

from __future__ import annotations

import pytest
from conftest import make_chunk

from hukukrag.models import RetrievalResult
from hukukrag.rag.analyzer import analyze_query
from hukukrag.rag.reranker import chunk_entity_keys, rerank_results


def _result(index: int, score: float, entities: tuple[str, ...] = ()) -> RetrievalResult:
    return RetrievalResult(chunk=make_chunk(index, f"içerik {index}", entities=entities), score=score)


def test_entity_overlap_boosts_score():
    plain = _result(0, 0.8)
    cited = _result(1, 0.7, entities=("6698 Sayılı", "madde 5"))
    reranked = rerank_results([plain, cited], analyze_query("6698 sayılı kanun madde 5"))

    assert [r.chunk.id for r in reranked] == ["doc_chunk_1", "doc_chunk_0"]
    assert reranked[0].score == pytest.approx(0.9)
    assert reranked[1].score == pytest.approx(0.8)


def test_inputs_are_not_modified():
    cited = _result(0, 0.7, entities=("6698 sayılı",))
    reranked = rerank_results([cited], analyze_query("6698 sayılı"))
    assert cited.score == 0.7
    assert reranked[0] is not cited
    assert reranked[0].chunk is cited.chunk


def test_query_without_entities_keeps_order():
    results = [_result(0, 0.5), _result(1, 0.5, entities=("madde 3",)), _result(2, 0.4)]
    reranked = rerank_results(results, analyze_query("tazminat"))
    assert [r.chunk.id for r in reranked] == ["doc_chunk_0", "doc_chunk_1", "doc_chunk_2"]
    assert [r.score for r in reranked] == [0.5, 0.5, 0.4]


def test_custom_boost():
    cited = _result(0, 0.1, entities=("madde 5",))
    [r] = rerank_results([cited], analyze_query("madde 5"), entity_boost=0.5)
    assert r.score == pytest.approx(0.6)


def test_empty_results():
    assert rerank_results([], analyze_query("madde 5")) == []


def test_chunk_entity_keys():
    chunk = make_chunk(0, "x", entities=("6698 sayılı", "Yargıtay"))
    assert chunk_entity_keys(chunk) == {"law:6698", "court:Yargıtay"}


def test_highlights_are_not_shared_with_input():
    cited = RetrievalResult(chunk=make_chunk(0, "madde 5"), score=0.5, highlights=["madde 5"])
    [reranked] = rerank_results([cited], analyze_query("madde 5"))
    reranked.highlights.append("ek")
    assert cited.highlights == ["madde 5"]
