"""Partition conversations into today / yesterday / last-seven-days buckets."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta, tzinfo

from chatlist.models.conversations import Conversation, DateBuckets


def _as_local(value: datetime, zone: tzinfo | None) -> datetime:
    if zone is None:
        # System local time, with the offset in force at ``value`` itself
        return value.astimezone()
    # Offset-less timestamps are read in the same zone as ``now``
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def _sort_newest_first(
    entries: list[tuple[datetime, Conversation]],
) -> list[Conversation]:
    # sorted() is stable under reverse=True, so ties keep their input order
    return [c for _, c in sorted(entries, key=lambda pair: pair[0], reverse=True)]


def bucketize(conversations: Iterable[Conversation], now: datetime) -> DateBuckets:
    """Group ``conversations`` by creation day relative to ``now``.

    A conversation goes to exactly one bucket, or none when it is older than
    seven days, dated after today, or has no creation time. Each bucket is
    ordered by ``created_at`` descending.

    Args:
        conversations: Cached conversations, in any order.
        now: Reference instant. An aware value fixes the zone days are
            counted in; a naive value means system local time, where each
            timestamp is converted with its own UTC offset.

    Returns:
        DateBuckets with ``today``, ``yesterday`` and ``last_seven_days``.
    """
    zone = now.tzinfo

    today0: date = now.date()
    yesterday0 = today0 - timedelta(days=1)
    seven_days_ago0 = today0 - timedelta(days=7)

    today: list[tuple[datetime, Conversation]] = []
    yesterday: list[tuple[datetime, Conversation]] = []
    last_seven_days: list[tuple[datetime, Conversation]] = []

    for conversation in conversations:
        if conversation.created_at is None:
            continue
        created = _as_local(conversation.created_at, zone)
        created0 = created.date()

        if created0 == today0:
            today.append((created, conversation))
        elif created0 == yesterday0:
            yesterday.append((created, conversation))
        elif seven_days_ago0 <= created0 < yesterday0:
            last_seven_days.append((created, conversation))

    return DateBuckets(
        today=_sort_newest_first(today),
        yesterday=_sort_newest_first(yesterday),
        last_seven_days=_sort_newest_first(last_seven_days),
    )
