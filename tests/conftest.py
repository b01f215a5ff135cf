"""Shared pytest fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from hukukrag.memory.repository import InMemoryConversationRepository
from hukukrag.models import Chunk, ChunkMetadata

KVKK_TEXT = (
    "MADDE 1 - Bu Kanunun amacı, kişisel verilerin işlenmesinde başta özel hayatın "
    "gizliliği olmak üzere kişilerin temel hak ve özgürlüklerini korumaktır.\n\n"
    "MADDE 5 - Kişisel veriler ilgili kişinin açık rızası olmaksızın işlenemez. "
    "Kanunlarda açıkça öngörülmesi halinde açık rıza aranmaz.\n\n"
    "MADDE 11 - Herkes, veri sorumlusuna başvurarak kendisiyle ilgili kişisel veri "
    "işlenip işlenmediğini öğrenme hakkına sahiptir."
)


@pytest.fixture
def kvkk_text() -> str:
    """Three short articles of 6698 sayılı Kanun."""
    return KVKK_TEXT


@pytest.fixture
def clock():
    """Deterministic clock: 15.03.2024 10:00 UTC, one second later per call."""
    base = datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc)
    ticks = count()
    return lambda: base + timedelta(seconds=next(ticks))


@pytest.fixture
def repo(clock) -> InMemoryConversationRepository:
    return InMemoryConversationRepository(clock=clock)


def make_chunk(
    index: int,
    content: str,
    *,
    document_id: str = "doc",
    title: str = "Belge",
    section: str | None = None,
    entities: tuple[str, ...] = (),
    importance: float | None = None,
) -> Chunk:
    """Build a Chunk directly, bypassing the chunker."""
    return Chunk(
        id=f"{document_id}_chunk_{index}",
        content=content,
        metadata=ChunkMetadata(
            document_id=document_id,
            document_title=title,
            chunk_index=index,
            total_chunks=index + 1,
            section=section,
            entities=entities,
            importance=importance,
            char_end=len(content),
        ),
    )
