"""Conversation memory and the Conversation chat session."""

from .conversation import Conversation
from .memory import TOKEN_LEEWAY, ConversationMemory, MemoryStrategy

__all__ = ["Conversation", "ConversationMemory", "MemoryStrategy", "TOKEN_LEEWAY"]
