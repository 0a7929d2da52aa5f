"""Tests for merging windowed lists and date bucketing."""

import time
from datetime import datetime, timedelta, timezone

import pytest

from chatlist.aggregation.buckets import bucketize
from chatlist.aggregation.merge import merge_conversations
from chatlist.models.conversations import Conversation

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


def _conv(chat_id: str, created_at: str, title: str = "") -> Conversation:
    return Conversation(id=chat_id, title=title or chat_id, created_at=created_at)


def test_merge_keeps_first_occurrence_and_concatenation_order() -> None:
    first_a = _conv("a", "2024-03-10T09:00:00Z", title="first")
    later_a = _conv("a", "2024-03-10T09:00:00Z", title="second")
    b = _conv("b", "2024-03-09T10:00:00Z")
    c = _conv("c", "2024-03-04T10:00:00Z")

    merged = merge_conversations([[first_a, b, later_a], [c, b], []])

    assert [m.id for m in merged] == ["a", "b", "c"]
    assert merged[0].title == "first"


def test_merge_handles_empty_input() -> None:
    assert merge_conversations([]) == []
    assert merge_conversations([[], [], []]) == []


def test_example_scenario() -> None:
    """Duplicate ids across windows end up once, in the right bucket."""
    today = [
        _conv("a", "2024-03-10T09:00:00Z"),
        _conv("b", "2024-03-09T10:00:00Z"),
        _conv("a", "2024-03-10T09:00:00Z"),
    ]
    yesterday = [_conv("c", "2024-03-04T10:00:00Z")]

    merged = merge_conversations([today, yesterday, []])
    buckets = bucketize(merged, NOW)

    assert len(merged) == 3
    assert [c.id for c in buckets.today] == ["a"]
    assert [c.id for c in buckets.yesterday] == ["b"]
    assert [c.id for c in buckets.last_seven_days] == ["c"]
    assert buckets.total == 3


def test_bucket_boundaries() -> None:
    conversations = [
        _conv("start-of-today", "2024-03-10T00:00:00Z"),
        _conv("end-of-yesterday", "2024-03-09T23:59:59Z"),
        _conv("two-days", "2024-03-08T08:00:00Z"),
        _conv("seven-days", "2024-03-03T00:00:00Z"),
        _conv("eight-days", "2024-03-02T23:59:59Z"),
        _conv("tomorrow", "2024-03-11T08:00:00Z"),
    ]

    buckets = bucketize(conversations, NOW)

    assert [c.id for c in buckets.today] == ["start-of-today"]
    assert [c.id for c in buckets.yesterday] == ["end-of-yesterday"]
    assert [c.id for c in buckets.last_seven_days] == ["two-days", "seven-days"]


def test_buckets_are_exclusive_and_sorted_newest_first() -> None:
    conversations = [
        _conv(f"c{i}", (NOW - timedelta(hours=7 * i)).isoformat()) for i in range(30)
    ]
    conversations.reverse()

    buckets = bucketize(conversations, NOW)
    groups = [buckets.today, buckets.yesterday, buckets.last_seven_days]

    ids = [c.id for group in groups for c in group]
    assert len(ids) == len(set(ids))
    for group in groups:
        stamps = [c.created_at for c in group]
        assert stamps == sorted(stamps, reverse=True)


def test_equal_timestamps_keep_input_order() -> None:
    conversations = [
        _conv("x", "2024-03-10T08:00:00Z"),
        _conv("y", "2024-03-10T08:00:00Z"),
        _conv("z", "2024-03-10T10:00:00Z"),
    ]

    buckets = bucketize(conversations, NOW)

    assert [c.id for c in buckets.today] == ["z", "x", "y"]


def test_days_follow_the_zone_of_now() -> None:
    # 23:30 UTC on the 9th is already the 10th in UTC+2
    conversation = _conv("late", "2024-03-09T23:30:00Z")
    now = datetime(2024, 3, 10, 12, 0, tzinfo=timezone(timedelta(hours=2)))

    buckets = bucketize([conversation], now)

    assert [c.id for c in buckets.today] == ["late"]


def test_naive_timestamps_use_the_zone_of_now() -> None:
    conversation = _conv("naive", "2024-03-09T22:00:00")

    buckets = bucketize([conversation], NOW)

    assert [c.id for c in buckets.yesterday] == ["naive"]


def test_bucketize_does_not_depend_on_input_order() -> None:
    conversations = [
        _conv("a", "2024-03-10T09:00:00Z"),
        _conv("b", "2024-03-10T11:00:00Z"),
        _conv("c", "2024-03-08T11:00:00Z"),
    ]

    forward = bucketize(conversations, NOW)
    backward = bucketize(list(reversed(conversations)), NOW)

    assert forward == backward


@pytest.fixture
def new_york_local_time(monkeypatch):
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def test_naive_now_converts_each_timestamp_with_its_own_offset(new_york_local_time) -> None:
    # Clocks moved from EST to EDT at 02:00 local on 2024-03-10.
    # 04:30 UTC on the 9th was 23:30 EST on the 8th, not 00:30 on the 9th.
    conversation = _conv("before-dst", "2024-03-09T04:30:00Z")
    now = datetime(2024, 3, 10, 12, 0)

    buckets = bucketize([conversation], now)

    assert buckets.yesterday == []
    assert [c.id for c in buckets.last_seven_days] == ["before-dst"]


def test_naive_now_and_naive_timestamp_share_local_days(new_york_local_time) -> None:
    conversation = _conv("morning", "2024-03-10T09:00:00")
    now = datetime(2024, 3, 10, 12, 0)

    buckets = bucketize([conversation], now)

    assert [c.id for c in buckets.today] == ["morning"]
