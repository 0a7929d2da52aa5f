"""Route and share-link builders for conversations."""

CHATS_PREFIX = "/chats"


def chat_route(chat_id: str) -> str:
    """Navigation target for a conversation."""
    return f"{CHATS_PREFIX}/{chat_id}"


def share_url(origin: str, chat_id: str) -> str:
    """Absolute URL a conversation can be shared with."""
    return f"{origin.rstrip('/')}{chat_route(chat_id)}"
