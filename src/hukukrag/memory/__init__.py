"""hukukrag conversation memory."""

from hukukrag.memory.models import Conversation, ConversationSummary, Message, MessageMetadata
from hukukrag.memory.repository import ConversationRepository, InMemoryConversationRepository

__all__ = [
    "Conversation",
    "ConversationRepository",
    "ConversationSummary",
    "InMemoryConversationRepository",
    "Message",
    "MessageMetadata",
]
