"""Conversation context window and rule-based summarisation.

build_context():
  Walk the history from newest to oldest, keeping messages while both the
  message budget and the token budget hold; the kept messages are returned
  in chronological order. When older messages fell out of the window and a
  summary exists, a formatted summary block is added to the result.

needs_summarization() / generate_summary():
  Once a conversation reaches ``summarize_threshold`` messages it gets a
  summary; the summary is recomputed after every ``resummarize_after`` new
  messages. Topics, entities and conclusions are extracted with fixed regex
  tables; no model call is involved.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from hukukrag.memory.models import Conversation, ConversationSummary, Message, utcnow
from hukukrag.memory.repository import ConversationRepository
from hukukrag.rag.assembler import estimate_tokens
from hukukrag.rag.entities import entity_texts
from hukukrag.rag.text import normalize

logger = logging.getLogger(__name__)

MAX_CONTEXT_MESSAGES = 10
MAX_CONTEXT_TOKENS = 4_000
SUMMARIZE_THRESHOLD = 20
RESUMMARIZE_AFTER = 10

MAX_TOPICS = 5
MAX_ENTITIES = 10
MAX_CONCLUSIONS = 3

# Patterns run against normalize(content), so they are written lower-case.
TOPIC_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"iş\s*(?:hukuk|kanun|sözleşme)"), "İş Hukuku"),
    (re.compile(r"ceza\s*(?:hukuk|kanun|dava)"), "Ceza Hukuku"),
    (re.compile(r"ticaret\s*(?:hukuk|kanun)"), "Ticaret Hukuku"),
    (re.compile(r"idare\s*(?:hukuk|mahkeme)"), "İdare Hukuku"),
    (re.compile(r"aile\s*(?:hukuk|mahkeme)|boşanma|velayet"), "Aile Hukuku"),
    (re.compile(r"miras|tereke|vasiyet"), "Miras Hukuku"),
    (re.compile(r"kişisel\s*veri|kvkk|gdpr"), "Veri Koruma Hukuku"),
    (re.compile(r"vergi|kdv"), "Vergi Hukuku"),
    (re.compile(r"sözleşme|borç|tazminat"), "Borçlar Hukuku"),
    (re.compile(r"taşınmaz|gayrimenkul|tapu"), "Gayrimenkul Hukuku"),
)

CONCLUSION_RE = re.compile(
    r"(?:sonuç\s*olarak|özetle|bu\s*nedenle|dolayısıyla)[^.]+\.",
    re.IGNORECASE,
)

BASE_SYSTEM_PROMPT = (
    "Sen Türk hukuku konusunda uzmanlaşmış bir AI asistanısın. "
    "Yanıtlarını her zaman doğrulanabilir kaynaklara dayandır ve referans göster."
)


@dataclass
class ContextWindow:
    messages: list[Message] = field(default_factory=list)
    summary: str | None = None
    token_count: int = 0


def build_context(
    conversation: Conversation,
    *,
    max_messages: int = MAX_CONTEXT_MESSAGES,
    max_tokens: int = MAX_CONTEXT_TOKENS,
    include_summary: bool = True,
) -> ContextWindow:
    """Select the most recent messages that fit both budgets.

    The summary block, when added, is counted in ``token_count`` but is not
    itself constrained by *max_tokens*.
    """
    kept: list[Message] = []
    tokens = 0
    for message in reversed(conversation.messages):
        cost = estimate_tokens(message.content)
        if len(kept) >= max_messages or tokens + cost > max_tokens:
            break
        kept.append(message)
        tokens += cost
    kept.reverse()

    summary_text: str | None = None
    if include_summary and conversation.summary is not None and len(kept) < len(conversation.messages):
        summary_text = format_summary_for_context(conversation.summary)
        tokens += estimate_tokens(summary_text)

    return ContextWindow(messages=kept, summary=summary_text, token_count=tokens)


def format_summary_for_context(summary: ConversationSummary) -> str:
    parts = ["[Önceki Konuşma Özeti]"]
    if summary.main_topics:
        parts.append(f"Konular: {', '.join(summary.main_topics)}")
    if summary.key_entities:
        parts.append(f"Önemli Referanslar: {', '.join(summary.key_entities)}")
    if summary.conclusions:
        parts.append(f"Önceki Sonuçlar: {'; '.join(summary.conclusions)}")
    return "\n".join(parts)


def needs_summarization(
    conversation: Conversation,
    *,
    threshold: int = SUMMARIZE_THRESHOLD,
    resummarize_after: int = RESUMMARIZE_AFTER,
) -> bool:
    count = len(conversation.messages)
    if count < threshold:
        return False
    if conversation.summary is None:
        return True
    return count - conversation.summary.message_count >= resummarize_after


def generate_summary(messages: list[Message]) -> ConversationSummary:
    """Extract topics, entities and (assistant-only) conclusions from *messages*."""
    topics: list[str] = []
    entities: list[str] = []
    conclusions: list[str] = []

    for message in messages:
        lowered = normalize(message.content)
        for pattern, topic in TOPIC_RULES:
            if topic not in topics and pattern.search(lowered):
                topics.append(topic)

        for text in entity_texts(message.content):
            if text not in entities:
                entities.append(text)

        if message.role == "assistant":
            for match in CONCLUSION_RE.finditer(message.content):
                sentence = match.group(0).strip()
                if sentence not in conclusions:
                    conclusions.append(sentence)

    return ConversationSummary(
        main_topics=topics[:MAX_TOPICS],
        key_entities=entities[:MAX_ENTITIES],
        conclusions=conclusions[:MAX_CONCLUSIONS],
        last_updated=utcnow(),
        message_count=len(messages),
    )


def update_summary_if_needed(
    repo: ConversationRepository,
    conversation_id: str,
    *,
    threshold: int = SUMMARIZE_THRESHOLD,
    resummarize_after: int = RESUMMARIZE_AFTER,
) -> ConversationSummary | None:
    """Regenerate and store the summary when it is due; return it, else None."""
    conversation = repo.get(conversation_id)
    if conversation is None:
        return None
    if not needs_summarization(
        conversation, threshold=threshold, resummarize_after=resummarize_after
    ):
        return None

    summary = generate_summary(conversation.messages)
    repo.update_summary(conversation_id, summary)
    logger.debug(
        "Summarised conversation %s at %d messages", conversation_id, summary.message_count
    )
    return summary


def format_messages_for_api(messages: list[Message]) -> list[dict[str, str]]:
    return [{"role": m.role, "content": m.content} for m in messages]


def context_aware_system_prompt(conversation: Conversation) -> str:
    """Base system prompt, narrowed to the summary's topics when there are any."""
    if conversation.summary is None or not conversation.summary.main_topics:
        return BASE_SYSTEM_PROMPT
    topics = ", ".join(conversation.summary.main_topics)
    return (
        f"{BASE_SYSTEM_PROMPT}\n\n"
        f"Bu konuşma şu alanlara odaklanıyor: {topics}. Yanıtlarını bu bağlamda ver."
    )
