"""Tests for answer verification."""

from __future__ import annotations

import pytest

from hukukrag.rag.verification import calculate_entity_grounding, verify_answer


def test_fully_grounded_answer_is_low_risk():
    result = verify_answer(
        "6698 sayılı Kanun madde 5 uyarınca açık rıza gerekir [1].",
        ["6698 Sayılı Kanunun madde 5 hükmü açık rızayı düzenler."],
    )
    assert result.entity_grounding == 1.0
    assert result.citations_valid
    assert result.risk_level == "low"
    assert result.warnings == []


def test_answer_without_entities_is_grounded():
    grounding, matches = calculate_entity_grounding([], "herhangi bir metin")
    assert grounding == 1.0
    assert matches == []


def test_unsupported_entities_are_high_risk():
    result = verify_answer("6098 sayılı Kanun madde 49 uygulanır.", ["başka bir metin"])
    assert result.entity_grounding == 0.0
    assert result.risk_level == "high"
    assert [m.found_in_source for m in result.matches] == [False, False]
    assert "2 referans" in result.warnings[0]


def test_partial_grounding():
    result = verify_answer(
        "6698 sayılı Kanun madde 5 ve madde 11 ile madde 12",
        ["6698 sayılı Kanun madde 5"],
    )
    assert result.entity_grounding == pytest.approx(0.5)
    assert result.risk_level == "medium"


def test_invalid_citation_raises_risk():
    result = verify_answer("Açık rıza gerekir [3].", ["kaynak"])
    assert not result.citations_valid
    assert result.invalid_citations == [3]
    assert result.risk_level == "medium"
    assert any("[3]" in w for w in result.warnings)


def test_explicit_source_count():
    result = verify_answer("metin [3]", ["kaynak"], source_count=3)
    assert result.citations_valid
