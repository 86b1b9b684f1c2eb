"""
Tests for flag detector
"""

import pytest
from datetime import datetime, timedelta
from ratioed.chatstats import compute_stats
from ratioed.flags import (
    asks_questions,
    detect_patterns,
    longest_self_run,
    one_way_questions,
    question_imbalance,
    slow_to_respond,
    they_initiate,
    lengthy_responses,
    late_night_replies,
)
from ratioed.models import Message, SELF, OTHER


BASE = datetime(2024, 1, 15, 12, 0)


def _chat(*pairs, start=None, step=None):
    """Build messages from (side, text) pairs, optionally one step apart."""
    messages = []
    for i, (side, text) in enumerate(pairs):
        ts = start + step * i if start is not None else None
        messages.append(Message.create(text, side, ts))
    return messages


def _titles(patterns):
    return [p.title for p in patterns]


def test_short_responses_scenario():
    messages = _chat(
        (SELF, "hey how was your day"),
        (OTHER, "k"),
        (SELF, "what did you get up to"),
        (OTHER, "ok"),
        (SELF, "sounds like a long one"),
        (OTHER, "fine"),
        (SELF, "want to grab food later"),
        (OTHER, "sure"),
        (SELF, "great see you at seven"),
        (OTHER, "yea"),
    )
    patterns = detect_patterns(messages, compute_stats(messages))

    short = [p for p in patterns if p.title == "Short Responses"]
    assert len(short) == 1
    assert short[0].sentiment == "negative"


def test_short_responses_needs_more_than_three_messages():
    messages = _chat((SELF, "hi"), (OTHER, "k"), (SELF, "hello"), (OTHER, "ok"), (SELF, "yo"), (OTHER, "k"))
    assert "Short Responses" not in _titles(detect_patterns(messages, compute_stats(messages)))


def test_double_texting_scenario():
    messages = _chat((SELF, "hey"), (SELF, "you around"), (SELF, "hello"))
    patterns = detect_patterns(messages, compute_stats(messages))

    double = [p for p in patterns if p.title == "Double Texting"]
    assert len(double) == 1
    assert "3 messages in a row" in double[0].description
    assert double[0].sentiment == "negative"


def test_longest_self_run_resets_on_reply():
    messages = _chat((SELF, "a"), (SELF, "b"), (OTHER, "c"), (SELF, "d"), (SELF, "e"))
    assert longest_self_run(messages) == 2


def test_red_flags_precede_green():
    messages = _chat(
        (SELF, "one two three"),
        (SELF, "one two three"),
        (SELF, "one two three"),
        (OTHER, "one two three"),
        (OTHER, "one two three"),
        (OTHER, "one two three"),
        start=BASE,
        step=timedelta(minutes=1),
    )
    patterns = detect_patterns(messages, compute_stats(messages))

    assert _titles(patterns) == ["Double Texting", "Balanced Energy", "Quick Responses"]
    sentiments = [p.sentiment for p in patterns]
    last_negative = max(i for i, s in enumerate(sentiments) if s == "negative")
    first_positive = min(i for i, s in enumerate(sentiments) if s == "positive")
    assert last_negative < first_positive


def test_pattern_cap_keeps_highest_priority():
    pairs = []
    for _ in range(4):
        pairs += [(SELF, "you there?"), (SELF, "hello?"), (SELF, "why no reply?"), (OTHER, "k")]
    messages = _chat(*pairs, start=BASE.replace(hour=23), step=timedelta(minutes=1))

    patterns = detect_patterns(messages, compute_stats(messages))

    assert len(patterns) == 4
    assert _titles(patterns) == [
        "Double Texting",
        "Short Responses",
        "One-Way Questions",
        "One-Sided Effort",
    ]
    assert all(p.sentiment == "negative" for p in patterns)


def test_one_way_questions():
    messages = _chat((SELF, "how?"), (OTHER, "dunno"), (SELF, "why?"), (OTHER, "idk"), (SELF, "when?"))
    stats = compute_stats(messages)

    assert one_way_questions(messages, stats).title == "One-Way Questions"


@pytest.mark.parametrize("self_questions,other_questions,expected", [
    (2, 2, True),
    (1, 2, True),
    (4, 2, True),
    (5, 2, False),
    (0, 3, False),
    (1, 1, False),
])
def test_asks_questions(self_questions, other_questions, expected):
    messages = _chat(
        *([(SELF, "what about you?")] * self_questions
          + [(SELF, "cool")]
          + [(OTHER, "and you?")] * other_questions
          + [(OTHER, "nice")])
    )
    stats = compute_stats(messages)

    pattern = asks_questions(messages, stats)

    assert (pattern is not None) == expected
    if expected:
        assert pattern.sentiment == "positive"


def test_slow_to_respond():
    messages = [
        Message.create("hey", SELF, BASE),
        Message.create("hi", OTHER, BASE + timedelta(minutes=60)),
        Message.create("how's it going", SELF, BASE + timedelta(minutes=62)),
    ]
    stats = compute_stats(messages)
    pattern = slow_to_respond(messages, stats)

    assert pattern is not None
    assert pattern.description == "They take 1.0h to reply on average, you take 2m"


def test_slow_to_respond_needs_both_latencies():
    messages = _chat((SELF, "hey"), (OTHER, "hi"), (SELF, "yo"))
    assert slow_to_respond(messages, compute_stats(messages)) is None


def test_they_initiate():
    messages = _chat((OTHER, "hey"), (OTHER, "you up"), (SELF, "yes"), (OTHER, "cool"))
    stats = compute_stats(messages)

    pattern = they_initiate(messages, stats)
    assert pattern.sentiment == "positive"


def test_lengthy_responses():
    long_text = "this is a much longer reply with plenty of words in it"
    messages = _chat((SELF, "hi"), (OTHER, long_text), (SELF, "ok"), (OTHER, long_text), (OTHER, long_text))
    stats = compute_stats(messages)

    pattern = lengthy_responses(messages, stats)
    assert pattern.title == "Lengthy Responses"
    assert "12 words" in pattern.description


def test_late_night_replies():
    night = BASE.replace(hour=23)
    messages = [
        Message.create("hi", SELF, night),
        Message.create("hey", OTHER, night + timedelta(minutes=5)),
        Message.create("so", SELF, night + timedelta(minutes=30)),
        Message.create("yeah", OTHER, night + timedelta(minutes=40)),
        Message.create("ok", OTHER, night + timedelta(hours=2)),
    ]
    stats = compute_stats(messages)

    pattern = late_night_replies(messages, stats)
    assert pattern is not None
    assert pattern.description.startswith("100%")


def test_late_night_needs_three_timestamped_messages():
    night = BASE.replace(hour=23)
    messages = [
        Message.create("hi", SELF, night),
        Message.create("hey", OTHER, night),
        Message.create("yeah", OTHER, night),
        Message.create("ok", OTHER, None),
    ]
    assert late_night_replies(messages, compute_stats(messages)) is None


def test_question_imbalance_is_neutral():
    messages = _chat(
        (SELF, "a?"), (SELF, "b?"), (SELF, "c?"), (SELF, "d?"), (SELF, "e?"),
        (OTHER, "f?"), (OTHER, "g?"), (OTHER, "h"), (OTHER, "i"), (OTHER, "j"),
    )
    stats = compute_stats(messages)

    pattern = question_imbalance(messages, stats)
    assert pattern.sentiment == "neutral"


@pytest.mark.parametrize("n_self,n_other", [(1, 0), (0, 3), (2, 2), (10, 1), (1, 10)])
def test_pattern_cap_always_holds(n_self, n_other):
    messages = _chat(*([(SELF, "hey?")] * n_self + [(OTHER, "k")] * n_other))
    patterns = detect_patterns(messages, compute_stats(messages))
    assert len(patterns) <= 4
