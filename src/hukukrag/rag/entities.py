"""Typed legal entities and the rule table that extracts them.

Four entity kinds are recognised in Turkish legal text:

  law      "6698 sayılı"            → LawEntity(number=6698)
  article  "madde 5" / "MADDE 5"    → ArticleEntity(number=5)
  case     "2024/1234 E."           → CaseEntity(docket="2024/1234 E")
  court    "Yargıtay", "Danıştay" … → CourtEntity(name="Yargıtay")

The same rule table is used for queries (analyzer), chunks (chunker) and
conversation history (summary), so an entity found in a question can be
compared with one found in a document by ``entity_key``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, ClassVar, Union


@dataclass(frozen=True)
class LawEntity:
    type: ClassVar[str] = "law"
    text: str
    number: int
    offset: int | None = None


@dataclass(frozen=True)
class ArticleEntity:
    type: ClassVar[str] = "article"
    text: str
    number: int
    offset: int | None = None


@dataclass(frozen=True)
class CaseEntity:
    type: ClassVar[str] = "case"
    text: str
    docket: str
    offset: int | None = None


@dataclass(frozen=True)
class CourtEntity:
    type: ClassVar[str] = "court"
    text: str
    name: str
    offset: int | None = None


TypedEntity = Union[LawEntity, ArticleEntity, CaseEntity, CourtEntity]


# ------------------------------------------------------------------
# Rule table
# ------------------------------------------------------------------

LAW_RE = re.compile(r"(\d{3,6})\s*sayılı", re.IGNORECASE)
ARTICLE_RE = re.compile(r"madde\s*(\d+)", re.IGNORECASE)
CASE_RE = re.compile(r"(\d{4})/(\d+)\s*([EK])\.?", re.IGNORECASE)

# (canonical name, pattern). Suffixes attach directly in Turkish
# ("Yargıtay'ın", "Danıştayın"), so only the left edge is anchored.
COURTS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("Yargıtay", re.compile(r"\bYargıtay", re.IGNORECASE)),
    ("Danıştay", re.compile(r"\bDanıştay", re.IGNORECASE)),
    ("Anayasa Mahkemesi", re.compile(r"\bAnayasa\s+Mahkemesi", re.IGNORECASE)),
    ("Anayasa Mahkemesi", re.compile(r"\bAYM\b")),
    ("Sayıştay", re.compile(r"\bSayıştay", re.IGNORECASE)),
    ("Uyuşmazlık Mahkemesi", re.compile(r"\bUyuşmazlık\s+Mahkemesi", re.IGNORECASE)),
    ("Bölge Adliye Mahkemesi", re.compile(r"\bBölge\s+Adliye\s+Mahkemesi", re.IGNORECASE)),
    ("Bölge İdare Mahkemesi", re.compile(r"\bBölge\s+İdare\s+Mahkemesi", re.IGNORECASE)),
)


def _law(m: re.Match[str]) -> LawEntity:
    return LawEntity(text=m.group(0).strip(), number=int(m.group(1)), offset=m.start())


def _article(m: re.Match[str]) -> ArticleEntity:
    return ArticleEntity(text=m.group(0).strip(), number=int(m.group(1)), offset=m.start())


def _case(m: re.Match[str]) -> CaseEntity:
    docket = f"{m.group(1)}/{m.group(2)} {m.group(3).upper()}"
    return CaseEntity(text=m.group(0).strip(), docket=docket, offset=m.start())


def _court_builder(name: str) -> Callable[[re.Match[str]], CourtEntity]:
    def build(m: re.Match[str]) -> CourtEntity:
        return CourtEntity(text=m.group(0).strip(), name=name, offset=m.start())

    return build


ENTITY_RULES: tuple[tuple[re.Pattern[str], Callable[[re.Match[str]], TypedEntity]], ...] = (
    (LAW_RE, _law),
    (ARTICLE_RE, _article),
    (CASE_RE, _case),
    *((pattern, _court_builder(name)) for name, pattern in COURTS),
)


# ------------------------------------------------------------------
# Extraction
# ------------------------------------------------------------------


def extract_entities(text: str) -> list[TypedEntity]:
    """Return every entity in *text*, ordered by offset.

    Each distinct matched text is recorded once (first occurrence wins).
    """
    found: list[TypedEntity] = []
    seen: set[str] = set()
    for pattern, build in ENTITY_RULES:
        for match in pattern.finditer(text):
            entity = build(match)
            if entity.text in seen:
                continue
            seen.add(entity.text)
            found.append(entity)
    found.sort(key=lambda e: e.offset if e.offset is not None else 0)
    return found


def entity_texts(text: str) -> list[str]:
    """Return the matched texts of ``extract_entities(text)``."""
    return [e.text for e in extract_entities(text)]


def entity_key(entity: TypedEntity) -> str:
    """Canonical identity of *entity*, independent of casing and spacing.

    "6698 sayılı" and "6698 Sayılı" share the key "law:6698".
    """
    if isinstance(entity, LawEntity):
        return f"law:{entity.number}"
    if isinstance(entity, ArticleEntity):
        return f"article:{entity.number}"
    if isinstance(entity, CaseEntity):
        return f"case:{entity.docket}"
    if isinstance(entity, CourtEntity):
        return f"court:{entity.name}"
    raise TypeError(f"Unknown entity type: {type(entity).__name__}")
