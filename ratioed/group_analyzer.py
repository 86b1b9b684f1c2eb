"""
Group chat analyzer for Ratioed
Per-member counters, tags, ranking and a plain-language summary
"""

import math
import logging
from typing import Dict, List, Sequence

import numpy as np

from . import config
from .models import GroupMemberAnalysis, GroupMemberStats, GroupMemberTag, ParsedMessage, count_words
from .text_features import count_emojis, count_media

logger = logging.getLogger(__name__)

T = config.GROUP_TAG_THRESHOLDS


def _tag(label: str) -> GroupMemberTag:
    emoji, description, sentiment = config.GROUP_TAGS[label]
    return GroupMemberTag(label=label, emoji=emoji, description=description, sentiment=sentiment)


def accumulate_member_stats(messages: Sequence[ParsedMessage]) -> Dict[str, GroupMemberStats]:
    """
    Build raw per-sender counters, keyed by sender name as written.

    Percentages and averages are filled in once all messages are counted.
    """
    members: Dict[str, GroupMemberStats] = {}

    for msg in messages:
        stats = members.get(msg.sender)
        if stats is None:
            stats = members[msg.sender] = GroupMemberStats(name=msg.sender)

        stats.message_count += 1
        stats.word_count += count_words(msg.text)
        stats.question_count += 1 if "?" in msg.text else 0
        stats.media_count += count_media(msg.text)
        stats.emoji_count += count_emojis(msg.text)

    for stats in members.values():
        if stats.message_count:
            stats.avg_words_per_message = _round_half_up(stats.word_count * 10 / stats.message_count) / 10

    shares = _shares_in_tenths([s.message_count for s in members.values()], len(messages))
    for stats, tenths in zip(members.values(), shares):
        stats.percentage = tenths / 10

    return members


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _shares_in_tenths(counts: Sequence[int], total: int) -> List[int]:
    """
    Split 1000 tenths of a percent across counts by largest remainder.

    The result always sums to 1000; spare tenths go to the largest
    remainders, earlier members first on ties.
    """
    if not total:
        return [0] * len(counts)

    floors = [count * 1000 // total for count in counts]
    remainders = [count * 1000 % total for count in counts]
    spare = 1000 - sum(floors)

    order = sorted(range(len(counts)), key=lambda i: remainders[i], reverse=True)
    for i in order[:spare]:
        floors[i] += 1
    return floors


def assign_member_tags(
    stats: GroupMemberStats,
    total_messages: int,
    cohort: Sequence[GroupMemberStats],
) -> List[GroupMemberTag]:
    """
    Tag a member from their own numbers and the cohort averages.

    At most three tags; Casual when nothing else applies.
    """
    size = len(cohort)
    percentage = stats.message_count * 100 / total_messages if total_messages else 0.0
    avg_words = stats.word_count / stats.message_count if stats.message_count else 0.0

    avg_media = float(np.mean([s.media_count for s in cohort]))
    avg_messages = total_messages / size
    avg_questions = float(np.mean([s.question_count for s in cohort]))

    tags: List[GroupMemberTag] = []

    if percentage > T["carrying_share"]:
        tags.append(_tag("Carrying"))

    if percentage < T["lurker_share"] and size > T["lurker_min_members"]:
        tags.append(_tag("Lurker"))

    if stats.media_count > avg_media * T["meme_multiplier"] and stats.media_count >= T["meme_min_media"]:
        tags.append(_tag("Meme Lord"))

    if avg_words < T["one_liner_avg_words"] and stats.message_count >= T["one_liner_min_messages"]:
        tags.append(_tag("One-liner"))

    if avg_words > T["essay_avg_words"] and stats.message_count >= T["essay_min_messages"]:
        tags.append(_tag("Essay Writer"))

    if (stats.question_count > avg_questions * T["curious_multiplier"]
            and stats.question_count >= T["curious_min_questions"]):
        tags.append(_tag("Curious"))

    if (stats.emoji_count > T["emoji_fan_min"]
            and stats.emoji_count / stats.message_count > T["emoji_fan_per_message"]):
        tags.append(_tag("Emoji Fan"))

    if stats.message_count < avg_messages * T["ghost_share_of_average"] and size > T["ghost_min_members"]:
        tags.append(_tag("Ghost"))

    low, high = T["active_share"]
    if low <= percentage <= high and not tags:
        tags.append(_tag("Active"))

    if not tags:
        tags.append(_tag("Casual"))

    return tags[:T["max_tags"]]


def generate_group_summary(members: List[GroupMemberAnalysis]) -> str:
    """One-line summary keyed to which tags are present."""
    top = members[0]
    bottom = members[-1]

    if len(members) == 2:
        diff = top.stats.percentage - bottom.stats.percentage
        if diff < T["pair_balanced_diff"]:
            return "Pretty balanced conversation between you two"
        return f"{top.name} is doing most of the talking"

    carrying = top.has_tag("Carrying")
    lurker_count = sum(1 for m in members if m.has_tag("Lurker", "Ghost"))

    if carrying and lurker_count > 1:
        return f"{top.name} is carrying while {lurker_count} people barely show up"

    if carrying:
        return f"{top.name} keeps this chat alive"

    if lurker_count >= len(members) / 2:
        return "Half the group is barely participating"

    top_three = sum(m.stats.percentage for m in members[:3])
    if top_three < T["distributed_top_three"] and len(members) > 3:
        return "The energy is pretty well distributed"

    return f"{top.name} leads the conversation"


def generate_highlights(members: List[GroupMemberAnalysis]) -> List[str]:
    highlights = []

    meme_lord = next((m for m in members if m.has_tag("Meme Lord")), None)
    if meme_lord:
        highlights.append(f"{meme_lord.name} is basically just here for the memes")

    essay_writer = next((m for m in members if m.has_tag("Essay Writer")), None)
    if essay_writer:
        highlights.append(f"{essay_writer.name} writes novels in the chat")

    ghosts = [m for m in members if m.has_tag("Ghost", "Lurker")]
    if len(ghosts) == 1:
        highlights.append(f"{ghosts[0].name} needs to step it up")
    elif len(ghosts) > 1:
        highlights.append(f"{' and '.join(g.name for g in ghosts)} are basically invisible")

    curious = next((m for m in members if m.has_tag("Curious")), None)
    if curious:
        highlights.append(f"{curious.name} keeps the conversation going with questions")

    top = members[0]
    if top.stats.percentage > T["highlight_top_share"]:
        highlights.append(f"{top.name} sends {_round_half_up(top.stats.percentage)}% of all messages")

    return highlights[:T["max_highlights"]]


def analyze_members(messages: Sequence[ParsedMessage]) -> List[GroupMemberAnalysis]:
    """Tag and rank every participant, most messages first."""
    member_stats = accumulate_member_stats(messages)
    cohort = list(member_stats.values())
    total = len(messages)

    members = [
        GroupMemberAnalysis(
            name=name,
            stats=stats,
            tags=assign_member_tags(stats, total, cohort),
        )
        for name, stats in member_stats.items()
    ]
    members.sort(key=lambda m: m.stats.message_count, reverse=True)
    for rank, member in enumerate(members, start=1):
        member.rank = rank

    return members
