"""
Conversation statistics for Ratioed
Per-side counts, reply latency and initiations for a resolved 1-on-1 chat
"""

import logging
from typing import Dict, Optional, Sequence, Tuple

import pandas as pd

from . import config
from .models import Message, SideStats, Stats, SELF, OTHER

logger = logging.getLogger(__name__)


def messages_to_dataframe(messages: Sequence[Message]) -> pd.DataFrame:
    """Build a DataFrame with one row per message, in conversation order."""
    df = pd.DataFrame(
        {
            "side": [m.side for m in messages],
            "text": [m.text for m in messages],
            "word_count": [m.word_count for m in messages],
            "has_question": [m.has_question for m in messages],
            "timestamp": pd.to_datetime(pd.Series([m.timestamp for m in messages], dtype="object")),
        }
    )
    return df


def compute_stats(messages: Sequence[Message]) -> Stats:
    """
    Compute comparative statistics for self vs other.

    Counts are straight per-side tallies. Reply latency uses consecutive
    pairs where the side changes and both timestamps are known; deltas of
    zero or less, or longer than LATENCY_MAX_MINUTES, are not replies.
    """
    df = messages_to_dataframe(messages)
    latency = _calculate_response_times(df)
    initiations = _calculate_initiations(df)

    stats = Stats()
    for side, side_stats in ((SELF, stats.self_side), (OTHER, stats.other_side)):
        side_df = df[df["side"] == side]
        side_stats.messages = int(len(side_df))
        side_stats.words = int(side_df["word_count"].sum())
        side_stats.questions = int(side_df["has_question"].sum())
        side_stats.avg_response_minutes = latency.get(side)
        side_stats.initiations = initiations.get(side, 0)

    logger.info(
        f"Stats: messages {stats.self_side.messages}/{stats.other_side.messages}, "
        f"words {stats.self_side.words}/{stats.other_side.words}, "
        f"message ratio {stats.message_ratio:.2f}"
    )
    return stats


def _calculate_response_times(df: pd.DataFrame) -> Dict[str, Optional[float]]:
    """
    Average reply latency in minutes per replying side.

    Returns:
        {side: minutes}; sides with no qualifying reply are absent
    """
    if len(df) < 2:
        return {}

    deltas = df["timestamp"].diff().dt.total_seconds() / 60.0
    side_changed = df["side"] != df["side"].shift(1)
    valid = (
        side_changed
        & df["side"].shift(1).notna()
        & deltas.notna()
        & (deltas > 0)
        & (deltas <= config.LATENCY_MAX_MINUTES)
    )

    replies = deltas[valid].groupby(df.loc[valid, "side"]).mean()
    return {side: float(minutes) for side, minutes in replies.items()}


def _calculate_initiations(df: pd.DataFrame) -> Dict[str, int]:
    """
    Count conversation starts per side.

    The first message is a start, as is any message sent at least
    INITIATION_GAP_MINUTES after the previous one (both timestamps known).
    """
    if len(df) == 0:
        return {}

    gaps = df["timestamp"].diff().dt.total_seconds() / 60.0
    starts = gaps >= config.INITIATION_GAP_MINUTES
    starts.iloc[0] = True

    return {side: int(count) for side, count in df.loc[starts, "side"].value_counts().items()}


def late_night_share(messages: Sequence[Message], side: str = OTHER) -> Tuple[int, float]:
    """
    Share of a side's timestamped messages sent late at night.

    Returns:
        (number of timestamped messages, share in the late-night window)
    """
    start, end = config.LATE_NIGHT_HOURS
    hours = [m.timestamp.hour for m in messages if m.side == side and m.timestamp is not None]
    if not hours:
        return 0, 0.0
    late = sum(1 for h in hours if h >= start or h < end)
    return len(hours), late / len(hours)
