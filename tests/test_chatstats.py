"""
Tests for conversation statistics
"""

import pytest
from datetime import datetime, timedelta
from ratioed.chatstats import compute_stats, late_night_share, messages_to_dataframe
from ratioed.models import Message, SELF, OTHER


BASE = datetime(2024, 1, 15, 10, 0)


def _msg(side, text="hello there", minutes=None):
    ts = BASE + timedelta(minutes=minutes) if minutes is not None else None
    return Message.create(text, side, ts)


@pytest.fixture
def sample_messages():
    """Alternating chat with one same-side pair and one stale reply."""
    return [
        _msg(SELF, "hey how are you?", 0),
        _msg(OTHER, "good thanks", 5),
        _msg(OTHER, "you?", 6),
        _msg(SELF, "all good here", 20),
        _msg(OTHER, "nice", 20 + 2 * 24 * 60),
    ]


def test_side_counts_sum_to_total(sample_messages):
    stats = compute_stats(sample_messages)

    assert stats.self_side.messages + stats.other_side.messages == len(sample_messages)
    assert stats.total_messages == len(sample_messages)


def test_counts(sample_messages):
    stats = compute_stats(sample_messages)

    assert stats.self_side.messages == 2
    assert stats.other_side.messages == 3
    assert stats.self_side.words == 7
    assert stats.other_side.words == 4
    assert stats.self_side.questions == 1
    assert stats.other_side.questions == 1


def test_response_times(sample_messages):
    """Same-side pairs and replies over a day are ignored."""
    stats = compute_stats(sample_messages)

    assert stats.other_side.avg_response_minutes == pytest.approx(5.0)
    assert stats.self_side.avg_response_minutes == pytest.approx(14.0)
    assert stats.response_time_ratio == pytest.approx(14.0 / 5.0)


def test_replies_over_a_day_are_not_latency():
    messages = [
        _msg(SELF, "you there?", 0),
        _msg(OTHER, "sorry just saw this", 24 * 60 + 1),
        _msg(SELF, "no worries", 24 * 60 + 11),
        _msg(OTHER, "so what's new", 2 * 24 * 60 + 30),
    ]

    stats = compute_stats(messages)

    assert stats.other_side.avg_response_minutes is None
    assert stats.self_side.avg_response_minutes == pytest.approx(10.0)
    assert stats.response_time_ratio is None


def test_reply_of_exactly_a_day_counts():
    messages = [_msg(SELF, "hi", 0), _msg(OTHER, "hey", 24 * 60), _msg(SELF, "yo", 24 * 60 + 5)]

    stats = compute_stats(messages)

    assert stats.other_side.avg_response_minutes == pytest.approx(24 * 60)


def test_missing_timestamps_only_affect_latency():
    messages = [
        _msg(SELF, "one two", 0),
        _msg(OTHER, "three"),
        _msg(SELF, "four", 10),
        _msg(OTHER, "five six seven"),
    ]

    stats = compute_stats(messages)

    assert stats.self_side.avg_response_minutes is None
    assert stats.other_side.avg_response_minutes is None
    assert stats.response_time_ratio is None
    assert stats.self_side.words == 3
    assert stats.other_side.words == 4


def test_non_positive_deltas_are_skipped():
    messages = [
        _msg(SELF, "a", 10),
        _msg(OTHER, "b", 10),
        _msg(SELF, "c", 5),
        _msg(OTHER, "d", 8),
    ]

    stats = compute_stats(messages)

    assert stats.self_side.avg_response_minutes is None
    assert stats.other_side.avg_response_minutes == pytest.approx(3.0)


def test_asymmetric_ratio_fallback():
    """With nothing from the other side the self count stands in."""
    messages = [_msg(SELF, "one two"), _msg(SELF, "three?"), _msg(SELF, "four")]

    stats = compute_stats(messages)

    assert stats.message_ratio == 3.0
    assert stats.word_ratio == 4.0
    assert stats.question_ratio == 1.0


def test_true_ratios():
    messages = [_msg(SELF, "a b c d"), _msg(OTHER, "a b"), _msg(SELF, "x")]

    stats = compute_stats(messages)

    assert stats.message_ratio == pytest.approx(2.0)
    assert stats.word_ratio == pytest.approx(2.5)


def test_initiations():
    messages = [
        _msg(SELF, "morning", 0),
        _msg(OTHER, "hi", 3),
        _msg(OTHER, "back again", 3 + 180),
        _msg(SELF, "oh hey", 190),
        _msg(SELF, "later", 190 + 120),
    ]

    stats = compute_stats(messages)

    assert stats.self_side.initiations == 2
    assert stats.other_side.initiations == 1


def test_dataframe_preserves_order(sample_messages):
    df = messages_to_dataframe(sample_messages)

    assert list(df["side"]) == [SELF, OTHER, OTHER, SELF, OTHER]
    assert df["timestamp"].notna().all()


def test_late_night_share():
    late = BASE.replace(hour=23)
    messages = [
        Message.create("a", OTHER, late),
        Message.create("b", OTHER, late.replace(hour=2)),
        Message.create("c", OTHER, late.replace(hour=14)),
        Message.create("d", OTHER, None),
        Message.create("e", SELF, late),
    ]

    count, share = late_night_share(messages, OTHER)

    assert count == 3
    assert share == pytest.approx(2 / 3)


def test_late_night_share_without_timestamps():
    assert late_night_share([Message.create("a", OTHER)], OTHER) == (0, 0.0)
