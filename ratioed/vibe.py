"""
Vibe classifier for Ratioed
Scores the other side's tone across competing categories and picks one label
"""

import re
import logging
from typing import Dict, Sequence, Tuple

from . import config
from .models import Message, Stats, Vibe, OTHER

logger = logging.getLogger(__name__)

W = config.VIBE_WEIGHTS
T = config.VIBE_THRESHOLDS

_PUNCT_RE = re.compile(r"[^\w\s']")


def _count_emojis(text: str, emojis: Sequence[str]) -> int:
    return sum(text.count(e) for e in emojis)


def _count_phrases(text: str, phrases: Sequence[str]) -> int:
    """Count whole-word phrase occurrences (case-insensitive)."""
    low = text.lower()
    total = 0
    for phrase in phrases:
        if phrase.isalpha() or " " in phrase or "'" in phrase:
            total += len(re.findall(rf"\b{re.escape(phrase)}\b", low))
        else:
            total += low.count(phrase)
    return total


def _is_terse(text: str) -> bool:
    normalized = " ".join(_PUNCT_RE.sub("", text.lower()).split())
    return normalized in config.TERSE_REPLIES


def score_vibe_categories(messages: Sequence[Message], stats: Stats) -> Dict[str, float]:
    """
    Score flirty/engaged/dry/cold from the other side's messages only.
    """
    theirs = [m.text for m in messages if m.side == OTHER]
    other = stats.other_side
    scores = {category: 0.0 for category in config.VIBE_CATEGORY_ORDER}
    if not theirs:
        return scores

    cold_emoji = sum(_count_emojis(t, config.COLD_EMOJIS) for t in theirs)

    scores["flirty"] = (
        W["flirty_emoji"] * sum(_count_emojis(t, config.FLIRTY_EMOJIS) for t in theirs)
        + W["flirty_keyword"] * sum(_count_phrases(t, config.FLIRTY_KEYWORDS) for t in theirs)
    )

    scores["engaged"] = (
        W["happy_emoji"] * sum(_count_emojis(t, config.HAPPY_EMOJIS) for t in theirs)
        + W["engaged_phrase"] * sum(_count_phrases(t, config.ENGAGED_PHRASES) for t in theirs)
    )
    if other.avg_words > T["engaged_avg_words"]:
        scores["engaged"] += W["engaged_long_bonus"]

    terse_share = sum(1 for t in theirs if _is_terse(t)) / len(theirs)
    scores["dry"] = W["dry_terse_ratio"] * terse_share + W["dry_cold_emoji"] * cold_emoji
    if other.avg_words < T["dry_avg_words"]:
        scores["dry"] += W["dry_short_bonus"]

    scores["cold"] = W["cold_emoji"] * cold_emoji
    latency = other.avg_response_minutes
    if latency is not None and latency > T["cold_latency_minutes"]:
        scores["cold"] += W["cold_slow_bonus"]

    return scores


def _make_vibe(label: str) -> Vibe:
    emoji, description = config.VIBES[label]
    return Vibe(label=label, emoji=emoji, description=description)


def classify_vibe(messages: Sequence[Message], stats: Stats) -> Vibe:
    """
    Pick one tone label for the conversation.

    Low Energy wins when nothing scores and you send far more messages.
    Otherwise the top category wins if it clears its own threshold (ties go
    flirty, engaged, dry, cold). With no clear winner the label falls back
    to the message ratio.
    """
    vibe, _ = classify_vibe_with_scores(messages, stats)
    return vibe


def classify_vibe_with_scores(messages: Sequence[Message], stats: Stats) -> Tuple[Vibe, Dict[str, float]]:
    scores = score_vibe_categories(messages, stats)
    best = max(scores.values())
    ratio = stats.message_ratio

    if best < T["low_energy_max_score"] and ratio > T["low_energy_message_ratio"]:
        label = "Low Energy"
    else:
        label = None
        for category in config.VIBE_CATEGORY_ORDER:
            if scores[category] == best and scores[category] >= T[category]:
                label = category.capitalize()
                break

        if label is None:
            low, high = T["balanced_ratio"]
            if low <= ratio <= high:
                label = "Balanced"
            elif ratio < T["interested_ratio"]:
                label = "Interested"
            else:
                label = "Mixed"

    logger.debug(f"Vibe scores {scores} -> {label}")
    return _make_vibe(label), scores
