"""Query analyzer: intent, typed entities, keywords, synonym expansion, filters.

Intent is decided by an ordered rule table; the first rule whose pattern
matches (and whose ``unless`` pattern does not) wins:

  find_law         "<4+ digit> sayılı" anchor, optionally followed by "madde N"
  find_case        court names, "emsal", "karar", "içtihat" without a law anchor
  compare          "X ve Y arasındaki fark", "karşılaştır"
  procedure        "nasıl … -ılır/-ilir", "açılır"
  explain_concept  a bare "<terim> nedir"
  general          fallback

``analyze_query`` never raises; unmatched input yields ``general`` with
empty entity/keyword lists.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

from hukukrag.rag.entities import CourtEntity, LawEntity, TypedEntity, extract_entities
from hukukrag.rag.text import tokenize

QueryIntent = Literal[
    "find_law", "find_case", "explain_concept", "compare", "procedure", "general"
]


@dataclass(frozen=True)
class IntentRule:
    intent: QueryIntent
    pattern: re.Pattern[str]
    unless: re.Pattern[str] | None = None

    def matches(self, query: str) -> bool:
        if self.unless is not None and self.unless.search(query):
            return False
        return self.pattern.search(query) is not None


_FLAGS = re.IGNORECASE | re.DOTALL
_LAW_ANCHOR_RE = re.compile(r"\d{3,6}\s*sayılı", _FLAGS)

INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule("find_law", re.compile(r"\d{4,}\s*sayılı(?:.*?madde\s*\d+)?", _FLAGS)),
    IntentRule(
        "find_case",
        re.compile(
            r"emsal|içtihat|karar|\bmahkeme|\bYargıtay|\bDanıştay|\bSayıştay|\bAYM\b",
            _FLAGS,
        ),
        unless=_LAW_ANCHOR_RE,
    ),
    IntentRule("compare", re.compile(r"arasındaki\s+fark|\bfarkı?\b|karşılaştır", _FLAGS)),
    IntentRule(
        "procedure",
        re.compile(r"\bnasıl\b.*?(?:ılır|ilir|ulur|ülür)\b|\baçılır\b", _FLAGS),
    ),
    IntentRule(
        "explain_concept",
        re.compile(r"^\s*(?:\S+\s+){1,4}nedir\s*\??\s*$", _FLAGS),
    ),
)

STOP_WORDS: frozenset[str] = frozenset(
    [
        "ve", "veya", "ile", "için", "bu", "şu", "o", "bir", "de", "da",
        "mi", "mı", "mu", "mü", "ne", "nasıl", "hangi", "nerede", "neden",
        "gibi", "kadar", "daha", "en", "çok", "az", "her", "tüm", "bazı",
        "nedir", "nelerdir", "hakkında", "olan", "olarak", "ise", "ama",
        "fakat", "ancak", "göre", "sonra", "önce", "değil", "var", "yok",
        "midir", "mıdır", "mudur", "müdür", "şey", "ben", "sen", "biz",
    ]
)

MIN_KEYWORD_LENGTH = 3

# term → alternates; one expanded query is produced per matching keyword,
# using the first alternate.
SYNONYMS: dict[str, tuple[str, ...]] = {
    "tazminat": ("zarar", "bedel", "ödeme"),
    "fesih": ("sona erdirme", "iptal", "bozma"),
    "sözleşme": ("akit", "mukavele", "kontrat"),
    "dava": ("yargılama", "muhakeme", "duruşma"),
    "kanun": ("yasa", "mevzuat"),
    "mahkeme": ("yargı yeri", "hakim"),
    "hüküm": ("karar", "netice"),
    "delil": ("kanıt", "ispat", "belge"),
    "işçi": ("çalışan", "personel"),
    "işveren": ("patron", "istihdam eden"),
    "kira": ("kiralama", "icar"),
    "boşanma": ("evliliğin sona ermesi",),
}


@dataclass
class QueryFilters:
    courts: list[str] = field(default_factory=list)
    law_numbers: list[int] = field(default_factory=list)


@dataclass
class QueryAnalysis:
    """Everything the retrieval stages need to know about one query.

    Attributes:
        original_query: The query exactly as received.
        intent: Coarse task category (see module docstring).
        entities: Typed legal entities found in the query.
        keywords: Normalised, stop-word-free tokens of length >= 3.
        expanded_queries: The original query first, then one synonym variant
            per keyword that has a synonym entry.
        filters: Court names and law numbers derived from the entities.
    """

    original_query: str
    intent: QueryIntent = "general"
    entities: list[TypedEntity] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    expanded_queries: list[str] = field(default_factory=list)
    filters: QueryFilters = field(default_factory=QueryFilters)


def analyze_query(query: str) -> QueryAnalysis:
    """Analyse *query* into intent, entities, keywords, expansions and filters."""
    entities = extract_entities(query)
    keywords = extract_keywords(query)
    return QueryAnalysis(
        original_query=query,
        intent=classify_intent(query),
        entities=entities,
        keywords=keywords,
        expanded_queries=expand_query(query, keywords),
        filters=derive_filters(entities),
    )


def classify_intent(query: str) -> QueryIntent:
    for rule in INTENT_RULES:
        if rule.matches(query):
            return rule.intent
    return "general"


def extract_keywords(text: str) -> list[str]:
    """Return distinct content tokens of *text* in order of appearance."""
    keywords: list[str] = []
    for token in tokenize(text):
        if len(token) < MIN_KEYWORD_LENGTH or token in STOP_WORDS:
            continue
        if token not in keywords:
            keywords.append(token)
    return keywords


def expand_query(query: str, keywords: list[str]) -> list[str]:
    """Return [query, *synonym variants] without duplicates."""
    expanded = [query]
    for keyword in keywords:
        alternates = SYNONYMS.get(keyword)
        if not alternates:
            continue
        replacement = alternates[0]
        variant = re.sub(
            rf"\b{re.escape(keyword)}\b",
            lambda _m: replacement,
            query,
            flags=re.IGNORECASE,
        )
        if variant not in expanded:
            expanded.append(variant)
    return expanded


def derive_filters(entities: list[TypedEntity]) -> QueryFilters:
    filters = QueryFilters()
    for entity in entities:
        if isinstance(entity, CourtEntity):
            filters.courts.append(entity.text)
        elif isinstance(entity, LawEntity) and entity.number not in filters.law_numbers:
            filters.law_numbers.append(entity.number)
    return filters
