"""
Balance scoring for Ratioed
Turns message and word ratios into a 0-100 effort balance score
"""

import math
import logging

from . import config
from .models import Stats

logger = logging.getLogger(__name__)


def _balance(ratio: float) -> float:
    """min(ratio, 1/ratio); a zero ratio is fully unbalanced."""
    if ratio <= 0:
        return 0.0
    return min(ratio, 1.0 / ratio)


class BalanceScorer:
    """Compute the balance score and its label."""

    def __init__(
        self,
        message_weight: float = None,
        word_weight: float = None,
    ):
        """
        Initialize scorer with configurable weights.

        Args:
            Weights for message and word balance (default from config)
        """
        self.message_weight = message_weight if message_weight is not None else config.SCORE_WEIGHTS["message"]
        self.word_weight = word_weight if word_weight is not None else config.SCORE_WEIGHTS["word"]

    def compute_score(self, stats: Stats) -> int:
        """
        Compute balance score (0-100).

        Formula: score = round(clamp(100 * (
            message_weight * min(mr, 1/mr)
            + word_weight * min(wr, 1/wr)
        ), 0, 100))
        """
        raw = 100 * (
            self.message_weight * _balance(stats.message_ratio)
            + self.word_weight * _balance(stats.word_ratio)
        )
        clamped = max(0.0, min(100.0, raw))
        # round half up
        return int(math.floor(clamped + 0.5))

    def get_label(self, score: int) -> str:
        for threshold, label in config.SCORE_LABEL_THRESHOLDS:
            if score >= threshold:
                return label
        return config.SCORE_LABEL_THRESHOLDS[-1][1]


def calculate_score(stats: Stats) -> int:
    return BalanceScorer().compute_score(stats)


def get_score_label(score: int) -> str:
    return BalanceScorer().get_label(score)
