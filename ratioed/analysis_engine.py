"""
Unified analysis engine for Ratioed
Orchestrates the 1-on-1, transcript, group and compare analyses
"""

import logging
import concurrent.futures
from typing import Any, Dict, List, Optional, Sequence, Union

from . import config
from .chatstats import compute_stats
from .errors import InsufficientDataError
from .flags import detect_patterns
from .group_analyzer import analyze_members, generate_group_summary, generate_highlights
from .models import Message, Stats
from .parser import TranscriptParser
from .resolver import resolve_messages
from .scoring import BalanceScorer
from .tagline import TaglineClient, get_configured_client, resolve_tagline
from .vibe import classify_vibe

logger = logging.getLogger(__name__)

MessageInput = Union[str, Sequence[Union[Message, Dict[str, Any]]]]


def _build_breakdown(stats: Stats) -> Dict[str, Dict[str, Any]]:
    you, them = stats.self_side, stats.other_side
    return {
        "messages": {"you": you.messages, "them": them.messages},
        "words": {"you": you.words, "them": them.words},
        "questions": {"you": you.questions, "them": them.questions},
        "initiations": {"you": you.initiations, "them": them.initiations},
        "responseTimes": {
            "you": None if you.avg_response_minutes is None else round(you.avg_response_minutes, 1),
            "them": None if them.avg_response_minutes is None else round(them.avg_response_minutes, 1),
        },
    }


def _to_messages(records: Sequence[Union[Message, Dict[str, Any]]]) -> List[Message]:
    return [r if isinstance(r, Message) else Message.from_record(r) for r in records]


def _analyze_messages(
    messages: List[Message],
    tagline_client: Optional[TaglineClient] = None,
) -> Dict[str, Any]:
    """Run statistics, flags, vibe and score over resolved messages."""
    if len(messages) < config.MIN_MESSAGES_ONE_ON_ONE:
        raise InsufficientDataError(len(messages), config.MIN_MESSAGES_ONE_ON_ONE)

    logger.info("Step 1/4: Computing statistics")
    stats = compute_stats(messages)

    logger.info("Step 2/4: Detecting patterns and vibe")
    patterns = detect_patterns(messages, stats)
    vibe = classify_vibe(messages, stats)

    logger.info("Step 3/4: Scoring balance")
    scorer = BalanceScorer()
    score = scorer.compute_score(stats)
    label = scorer.get_label(score)

    logger.info("Step 4/4: Resolving tagline")
    client = tagline_client if tagline_client is not None else get_configured_client()
    summary = resolve_tagline(messages, stats, patterns, client)

    logger.info(
        f"Analysis complete: score {score} ({label}), vibe {vibe.label}, "
        f"{len(patterns)} patterns"
    )

    return {
        "score": score,
        "label": label,
        "summary": summary,
        "patterns": [p.to_dict() for p in patterns],
        "breakdown": _build_breakdown(stats),
        "vibe": vibe.to_dict(),
    }


def analyze_one_on_one(
    messages_or_transcript: MessageInput,
    tagline_client: Optional[TaglineClient] = None,
) -> Dict[str, Any]:
    """
    Analyze a 1-on-1 conversation.

    Args:
        messages_or_transcript: Exported transcript text, or already
            resolved messages (Message objects or OCR records)
        tagline_client: Optional collaborator that writes the summary line

    Returns:
        {score, label, summary, patterns, breakdown, vibe}

    Raises:
        InsufficientDataError: Fewer than MIN_MESSAGES_ONE_ON_ONE messages
    """
    if messages_or_transcript is None:
        raise TypeError("messages_or_transcript is required")

    if isinstance(messages_or_transcript, str):
        return analyze_transcript(messages_or_transcript, tagline_client)

    messages = _to_messages(messages_or_transcript)
    logger.info(f"Analyzing {len(messages)} pre-resolved messages")
    return _analyze_messages(messages, tagline_client)


def analyze_transcript(
    text: str,
    tagline_client: Optional[TaglineClient] = None,
) -> Dict[str, Any]:
    """
    Parse an exported 1-on-1 transcript and analyze it.

    Raises:
        InsufficientDataError: If too few messages could be parsed
    """
    parser = TranscriptParser()
    parsed = parser.parse_text(text)

    if len(parsed) < config.MIN_MESSAGES_ONE_ON_ONE:
        raise InsufficientDataError(len(parsed), config.MIN_MESSAGES_ONE_ON_ONE)

    messages = resolve_messages(parsed)
    return _analyze_messages(messages, tagline_client)


def analyze_group(text: str) -> Dict[str, Any]:
    """
    Parse an exported group chat and build the member leaderboard.

    Returns:
        {totalMessages, totalParticipants, members, summary, highlights}

    Raises:
        InsufficientDataError: Fewer than MIN_MESSAGES_GROUP messages
    """
    parser = TranscriptParser()
    parsed = parser.parse_text(text)

    if len(parsed) < config.MIN_MESSAGES_GROUP:
        raise InsufficientDataError(len(parsed), config.MIN_MESSAGES_GROUP, mode="group")

    members = analyze_members(parsed)
    summary = generate_group_summary(members)
    highlights = generate_highlights(members)

    logger.info(f"Group analysis complete: {len(parsed)} messages, {len(members)} members")

    return {
        "totalMessages": len(parsed),
        "totalParticipants": len(members),
        "members": [m.to_dict() for m in members],
        "summary": summary,
        "highlights": highlights,
    }


def compare_conversations(
    conversation_a: MessageInput,
    conversation_b: MessageInput,
    label_a: str = "Person A",
    label_b: str = "Person B",
    tagline_client: Optional[TaglineClient] = None,
) -> Dict[str, Any]:
    """
    Analyze two conversations side by side.

    The two runs are independent and execute concurrently. The winner is
    the more balanced conversation, by more than COMPARE_TIE_MARGIN points.

    Returns:
        {personA, personB, comparison: {winner: "A" | "B" | "tie", summary}}
    """
    with concurrent.futures.ThreadPoolExecutor(max_workers=2) as executor:
        future_a = executor.submit(analyze_one_on_one, conversation_a, tagline_client)
        future_b = executor.submit(analyze_one_on_one, conversation_b, tagline_client)
        result_a = future_a.result()
        result_b = future_b.result()

    margin = config.COMPARE_TIE_MARGIN
    if result_a["score"] > result_b["score"] + margin:
        winner = "A"
        summary = f"{label_a}'s conversation is more balanced"
    elif result_b["score"] > result_a["score"] + margin:
        winner = "B"
        summary = f"{label_b}'s conversation is more balanced"
    else:
        winner = "tie"
        summary = "Both conversations have similar energy"

    logger.info(f"Compare: {label_a}={result_a['score']} vs {label_b}={result_b['score']} -> {winner}")

    return {
        "personA": {"chatLabel": label_a, **result_a},
        "personB": {"chatLabel": label_b, **result_b},
        "comparison": {"winner": winner, "summary": summary},
    }


def validate_analysis_result(result: Dict[str, Any]) -> tuple[bool, str]:
    """
    Validate the structure of a 1-on-1 analysis result.

    Returns:
        (is_valid, error_message)
    """
    required_keys = ["score", "label", "summary", "patterns", "breakdown", "vibe"]

    for key in required_keys:
        if key not in result:
            return False, f"Missing required key: {key}"

    if not 0 <= result["score"] <= 100:
        return False, f"Score out of range: {result['score']}"

    if len(result["patterns"]) > config.MAX_PATTERNS:
        return False, f"Too many patterns: {len(result['patterns'])}"

    for key in ["messages", "words", "questions"]:
        if key not in result["breakdown"]:
            return False, f"breakdown missing required key: {key}"

    return True, "Valid"
