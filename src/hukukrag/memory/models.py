"""Conversation domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

from hukukrag.models import EvidenceSource

Role = Literal["user", "assistant", "system"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MessageMetadata:
    sources: tuple[EvidenceSource, ...] = ()
    verification_score: float | None = None
    tokens: int | None = None


@dataclass(frozen=True)
class Message:
    id: str
    role: Role
    content: str
    timestamp: datetime = field(default_factory=utcnow)
    metadata: MessageMetadata | None = None


@dataclass
class ConversationSummary:
    """Rule-based digest of a conversation.

    ``message_count`` is the number of messages the summary was computed
    from; it decides when the summary is stale.
    """

    main_topics: list[str] = field(default_factory=list)      # at most 5
    key_entities: list[str] = field(default_factory=list)     # at most 10
    conclusions: list[str] = field(default_factory=list)      # at most 3
    last_updated: datetime = field(default_factory=utcnow)
    message_count: int = 0


@dataclass
class ConversationMetadata:
    message_count: int = 0
    legal_topics: list[str] = field(default_factory=list)


@dataclass
class Conversation:
    id: str
    title: str
    messages: list[Message] = field(default_factory=list)
    summary: ConversationSummary | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    metadata: ConversationMetadata = field(default_factory=ConversationMetadata)
