"""Display helpers for conversation titles and message counts."""

from typing import Optional

UNTITLED = "Untitled Chat"

_QUOTES = ('"', "'")


def clean_title(title: Optional[str]) -> str:
    """Return ``title`` as it should be shown in the chat list.

    Surrounding whitespace is trimmed and one layer of matching quotes is
    removed. Empty titles fall back to ``UNTITLED``. The stored value is
    never modified.

    Examples:
        >>> clean_title('"Hello"')
        'Hello'
        >>> clean_title("  Hello ")
        'Hello'
        >>> clean_title("")
        'Untitled Chat'
    """
    if not title:
        return UNTITLED
    text = title.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in _QUOTES:
        text = text[1:-1].strip()
    return text or UNTITLED


def message_count_label(message_count: Optional[int]) -> str:
    """``"(n)"`` for a positive count, otherwise an empty string."""
    if message_count and message_count > 0:
        return f"({message_count})"
    return ""
