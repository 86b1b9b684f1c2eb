"""
Flag detector for Ratioed
Rule set producing red, green and neutral behavioural patterns
"""

import logging
from typing import Callable, List, Optional, Sequence

from . import config
from .chatstats import late_night_share
from .insight_engine import format_response_time
from .models import Message, Pattern, Stats, SELF, OTHER

logger = logging.getLogger(__name__)

T = config.FLAG_THRESHOLDS

Rule = Callable[[Sequence[Message], Stats], Optional[Pattern]]


def _in_range(value: float, bounds) -> bool:
    low, high = bounds
    return low <= value <= high


def longest_self_run(messages: Sequence[Message]) -> int:
    """Longest streak of consecutive self messages."""
    run = longest = 0
    for msg in messages:
        if msg.side == SELF:
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return longest


# ============================================================================
# RED FLAGS
# ============================================================================

def double_texting(messages: Sequence[Message], stats: Stats) -> Optional[Pattern]:
    run = longest_self_run(messages)
    if run < T["double_text_run"]:
        return None
    return Pattern(
        title="Double Texting",
        description=f"You sent {run} messages in a row without a response",
        sentiment="negative",
    )


def short_responses(messages: Sequence[Message], stats: Stats) -> Optional[Pattern]:
    theirs = [m for m in messages if m.side == OTHER]
    if len(theirs) <= T["short_reply_min_messages"]:
        return None
    short = sum(1 for m in theirs if m.word_count <= T["short_reply_max_words"])
    if short / len(theirs) <= T["short_reply_share"]:
        return None
    return Pattern(
        title="Short Responses",
        description="They frequently reply with just a few words",
        sentiment="negative",
    )


def one_way_questions(messages: Sequence[Message], stats: Stats) -> Optional[Pattern]:
    if stats.self_side.questions < T["one_way_min_questions"] or stats.other_side.questions != 0:
        return None
    return Pattern(
        title="One-Way Questions",
        description="You're asking all the questions",
        sentiment="negative",
    )


def slow_to_respond(messages: Sequence[Message], stats: Stats) -> Optional[Pattern]:
    ratio = stats.response_time_ratio
    if ratio is None or ratio >= T["slow_response_ratio"]:
        return None
    theirs = format_response_time(stats.other_side.avg_response_minutes)
    mine = format_response_time(stats.self_side.avg_response_minutes)
    return Pattern(
        title="Slow to Respond",
        description=f"They take {theirs} to reply on average, you take {mine}",
        sentiment="negative",
    )


def one_sided_effort(messages: Sequence[Message], stats: Stats) -> Optional[Pattern]:
    if stats.message_ratio <= T["effort_message_ratio"]:
        return None
    return Pattern(
        title="One-Sided Effort",
        description=f"You're sending {stats.message_ratio:.1f}x as many messages as them",
        sentiment="negative",
    )


def late_night_replies(messages: Sequence[Message], stats: Stats) -> Optional[Pattern]:
    count, share = late_night_share(messages, OTHER)
    if count < T["late_night_min_messages"] or share < T["late_night_share"]:
        return None
    return Pattern(
        title="Late Night Replies",
        description=f"{round(share * 100)}% of their messages come in between 10pm and 5am",
        sentiment="negative",
    )


# ============================================================================
# GREEN FLAGS
# ============================================================================

def balanced_energy(messages: Sequence[Message], stats: Stats) -> Optional[Pattern]:
    if not (_in_range(stats.message_ratio, T["balanced_message_ratio"])
            and _in_range(stats.word_ratio, T["balanced_word_ratio"])):
        return None
    return Pattern(
        title="Balanced Energy",
        description="Both sides are putting in similar effort",
        sentiment="positive",
    )


def asks_questions(messages: Sequence[Message], stats: Stats) -> Optional[Pattern]:
    if (stats.other_side.questions < T["asks_questions_min"]
            or not _in_range(stats.question_ratio, T["asks_questions_ratio"])):
        return None
    return Pattern(
        title="Asks Questions",
        description="They're curious about you and ask questions back",
        sentiment="positive",
    )


def they_initiate(messages: Sequence[Message], stats: Stats) -> Optional[Pattern]:
    if stats.message_ratio >= T["they_initiate_ratio"]:
        return None
    return Pattern(
        title="They Initiate",
        description="They're sending more messages than you",
        sentiment="positive",
    )


def quick_responses(messages: Sequence[Message], stats: Stats) -> Optional[Pattern]:
    latency = stats.other_side.avg_response_minutes
    if latency is None or latency >= T["quick_response_minutes"]:
        return None
    return Pattern(
        title="Quick Responses",
        description=f"They usually reply within {format_response_time(latency)}",
        sentiment="positive",
    )


def lengthy_responses(messages: Sequence[Message], stats: Stats) -> Optional[Pattern]:
    other = stats.other_side
    if other.messages < T["lengthy_min_messages"] or other.avg_words < T["lengthy_avg_words"]:
        return None
    return Pattern(
        title="Lengthy Responses",
        description=f"They average {other.avg_words:.0f} words per message",
        sentiment="positive",
    )


# ============================================================================
# NEUTRAL
# ============================================================================

def question_imbalance(messages: Sequence[Message], stats: Stats) -> Optional[Pattern]:
    if stats.question_ratio <= T["question_imbalance_ratio"] or stats.other_side.questions == 0:
        return None
    return Pattern(
        title="Question Imbalance",
        description="You ask significantly more questions than them",
        sentiment="neutral",
    )


# Priority order within each bucket
RED_RULES: List[Rule] = [
    double_texting,
    short_responses,
    one_way_questions,
    slow_to_respond,
    one_sided_effort,
    late_night_replies,
]
GREEN_RULES: List[Rule] = [
    balanced_energy,
    asks_questions,
    they_initiate,
    quick_responses,
    lengthy_responses,
]
NEUTRAL_RULES: List[Rule] = [
    question_imbalance,
]


def _run(rules: Sequence[Rule], messages: Sequence[Message], stats: Stats) -> List[Pattern]:
    found = []
    for rule in rules:
        pattern = rule(messages, stats)
        if pattern is not None:
            found.append(pattern)
    return found


def detect_patterns(messages: Sequence[Message], stats: Stats) -> List[Pattern]:
    """
    Evaluate every rule and return the most important findings.

    Red flags always come first, then green, then neutral, capped at
    MAX_PATTERNS.
    """
    red = _run(RED_RULES, messages, stats)
    green = _run(GREEN_RULES, messages, stats)
    neutral = _run(NEUTRAL_RULES, messages, stats)

    logger.debug(f"Flags fired: {len(red)} red, {len(green)} green, {len(neutral)} neutral")
    return (red + green + neutral)[:config.MAX_PATTERNS]
