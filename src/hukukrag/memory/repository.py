"""Conversation repository interface and its in-memory implementation.

Request handlers receive a ``ConversationRepository`` handle; production
deployments back it with an external cache or database. The in-memory
implementation keeps a plain dict and has no locking: concurrent appends
to the same conversation id from several threads are not safe.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable

from hukukrag.memory.models import (
    Conversation,
    ConversationSummary,
    Message,
    MessageMetadata,
    Role,
    utcnow,
)


class ConversationRepository(ABC):
    """Storage for conversations and their messages."""

    @abstractmethod
    def get_or_create(self, conversation_id: str, title: str | None = None) -> Conversation:
        """Return the conversation, creating an empty one on first access."""

    @abstractmethod
    def add_message(
        self,
        conversation_id: str,
        role: Role,
        content: str,
        metadata: MessageMetadata | None = None,
    ) -> Message:
        """Append a new message (get-or-create semantics) and return it."""

    @abstractmethod
    def update_summary(self, conversation_id: str, summary: ConversationSummary) -> None:
        """Replace the stored summary of an existing conversation."""

    @abstractmethod
    def get(self, conversation_id: str) -> Conversation | None:
        """Return the conversation or None; never creates."""

    @abstractmethod
    def list_conversations(self, limit: int = 50) -> list[Conversation]:
        """Conversations, most recently updated first."""

    @abstractmethod
    def delete(self, conversation_id: str) -> bool:
        """Remove a conversation; False if it did not exist."""


class InMemoryConversationRepository(ConversationRepository):
    """Dict-backed repository for tests, the CLI and single-process use.

    Args:
        clock: Returns the current time; injectable for deterministic tests.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._conversations: dict[str, Conversation] = {}
        self._clock = clock

    def get_or_create(self, conversation_id: str, title: str | None = None) -> Conversation:
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            now = self._clock()
            conversation = Conversation(
                id=conversation_id,
                title=title or f"Sohbet {now.strftime('%d.%m.%Y')}",
                created_at=now,
                updated_at=now,
            )
            self._conversations[conversation_id] = conversation
        return conversation

    def add_message(
        self,
        conversation_id: str,
        role: Role,
        content: str,
        metadata: MessageMetadata | None = None,
    ) -> Message:
        conversation = self.get_or_create(conversation_id)
        now = self._clock()
        message = Message(
            id=f"msg_{uuid.uuid4().hex[:12]}",
            role=role,
            content=content,
            timestamp=now,
            metadata=metadata,
        )
        conversation.messages.append(message)
        conversation.updated_at = now
        conversation.metadata.message_count = len(conversation.messages)
        return message

    def update_summary(self, conversation_id: str, summary: ConversationSummary) -> None:
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            return
        conversation.summary = summary
        conversation.metadata.legal_topics = list(summary.main_topics)
        conversation.updated_at = self._clock()

    def get(self, conversation_id: str) -> Conversation | None:
        return self._conversations.get(conversation_id)

    def list_conversations(self, limit: int = 50) -> list[Conversation]:
        ordered = sorted(
            self._conversations.values(), key=lambda c: c.updated_at, reverse=True
        )
        return ordered[:limit]

    def delete(self, conversation_id: str) -> bool:
        return self._conversations.pop(conversation_id, None) is not None
