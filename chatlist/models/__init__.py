"""Pydantic models for conversations and derived views."""

from chatlist.models.conversations import (
    Conversation,
    CreateChatRequest,
    CreatedConversation,
    DateBuckets,
)

__all__ = [
    "Conversation",
    "CreateChatRequest",
    "CreatedConversation",
    "DateBuckets",
]
