"""Merge windowed conversation lists into one deduplicated list."""

from __future__ import annotations

from collections.abc import Iterable

from chatlist.models.conversations import Conversation


def merge_conversations(lists: Iterable[Iterable[Conversation]]) -> list[Conversation]:
    """Concatenate ``lists`` in order and keep the first entry for each id.

    The output keeps concatenation order; date ordering is left to
    :func:`chatlist.aggregation.buckets.bucketize`.
    """
    seen: set[str] = set()
    merged: list[Conversation] = []
    for conversations in lists:
        for conversation in conversations:
            if conversation.id in seen:
                continue
            seen.add(conversation.id)
            merged.append(conversation)
    return merged
