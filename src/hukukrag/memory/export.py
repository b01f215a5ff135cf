"""Conversation search and export (json / markdown / text)."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from datetime import datetime

from hukukrag.memory.models import Conversation, Message
from hukukrag.memory.repository import ConversationRepository
from hukukrag.rag.text import normalize

EXPORT_FORMATS = ("json", "markdown", "text")

_ROLE_LABELS = {"user": "Kullanıcı", "assistant": "Asistan", "system": "Sistem"}


@dataclass
class ConversationMatch:
    conversation: Conversation
    relevant_messages: list[Message]


def search_conversations(
    repo: ConversationRepository,
    query: str,
    *,
    limit: int = 10,
    conversation_ids: list[str] | None = None,
) -> list[ConversationMatch]:
    """Conversations with messages containing *query* (case-insensitive).

    At most five matching messages are returned per conversation.
    """
    needle = normalize(query)
    if conversation_ids is not None:
        candidates = [c for c in (repo.get(cid) for cid in conversation_ids) if c is not None]
    else:
        candidates = repo.list_conversations(100)

    matches: list[ConversationMatch] = []
    for conversation in candidates:
        if len(matches) >= limit:
            break
        relevant = [m for m in conversation.messages if needle in normalize(m.content)]
        if relevant:
            matches.append(ConversationMatch(conversation, relevant[:5]))
    return matches


def export_conversation(repo: ConversationRepository, conversation_id: str, fmt: str) -> str:
    """Render a stored conversation; ``""`` if it does not exist.

    Raises:
        ValueError: If *fmt* is not one of json, markdown, text.
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(
            f"Unknown export format '{fmt}'. Accepted: {', '.join(EXPORT_FORMATS)}"
        )
    conversation = repo.get(conversation_id)
    if conversation is None:
        return ""
    if fmt == "json":
        return json.dumps(
            dataclasses.asdict(conversation), ensure_ascii=False, indent=2, default=_json_default
        )
    if fmt == "markdown":
        return _as_markdown(conversation)
    return _as_text(conversation)


def _json_default(value: object) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _as_markdown(conversation: Conversation) -> str:
    lines = [
        f"# {conversation.title}",
        f"*Oluşturulma: {conversation.created_at.strftime('%d.%m.%Y')}*",
        "",
    ]
    if conversation.summary is not None:
        lines.append("## Özet")
        lines.append(f"**Konular:** {', '.join(conversation.summary.main_topics)}")
        lines.append("")

    lines.append("## Mesajlar")
    lines.append("")
    for message in conversation.messages:
        role = _ROLE_LABELS.get(message.role, message.role)
        lines.append(f"### **{role}** ({message.timestamp.strftime('%H:%M:%S')})")
        lines.append(message.content)
        lines.append("")
    return "\n".join(lines)


def _as_text(conversation: Conversation) -> str:
    lines = [
        conversation.title,
        f"Tarih: {conversation.created_at.strftime('%d.%m.%Y')}",
        "─" * 50,
        "",
    ]
    for message in conversation.messages:
        lines.append(f"[{_ROLE_LABELS.get(message.role, message.role)}]")
        lines.append(message.content)
        lines.append("")
    return "\n".join(lines)
