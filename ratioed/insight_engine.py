"""
Ratioed Insight Engine
Plain-language explanations for detected patterns and display helpers

Style: Warm, smart friend analyzing - not clinical or therapeutic
"""

from typing import Dict, Optional


# Keyed by pattern title
PATTERN_EXPLANATIONS: Dict[str, Dict[str, str]] = {
    # Effort
    "One-Sided Effort": {
        "whatItMeans": "One person is sending significantly more messages than the other, creating an unbalanced conversation.",
        "whyItMatters": "Healthy conversations usually have a natural back-and-forth. If you're always carrying the conversation, it might point to lower interest on their side.",
        "tip": "Try pulling back a bit and see if they start initiating more. Quality over quantity.",
    },
    "Double Texting": {
        "whatItMeans": "Sending multiple messages in a row without getting a response.",
        "whyItMatters": "Occasional follow-ups are fine, but frequent double or triple texting can come across as anxious or over-eager.",
        "tip": "Wait for a response before sending follow-ups unless it's truly urgent.",
    },
    "Short Responses": {
        "whatItMeans": "They consistently send brief, one-word or minimal replies.",
        "whyItMatters": "Some people are naturally brief texters, but consistently short responses often signal low engagement.",
        "tip": "Look at the context - are they busy, or is this their default?",
    },
    "Lengthy Responses": {
        "whatItMeans": "They write detailed, thoughtful messages.",
        "whyItMatters": "Long messages often show genuine interest and investment in the conversation.",
    },
    "Balanced Energy": {
        "whatItMeans": "Both people put in similar effort and enthusiasm.",
        "whyItMatters": "Matched energy is a great sign of compatibility and mutual interest.",
    },
    "They Initiate": {
        "whatItMeans": "They send more messages than you do.",
        "whyItMatters": "When someone keeps the conversation going, they're usually invested in it.",
    },

    # Questions
    "One-Way Questions": {
        "whatItMeans": "You ask questions but they never ask any back.",
        "whyItMatters": "Questions show interest. If someone never asks about you, they might be self-focused or not invested.",
        "tip": "Notice if they ever ask follow-up questions about things you share.",
    },
    "Question Imbalance": {
        "whatItMeans": "You ask most of the questions while they rarely reciprocate.",
        "whyItMatters": "Balanced curiosity is a sign of mutual interest. One-sided questioning can feel like an interview.",
    },
    "Asks Questions": {
        "whatItMeans": "They actively show curiosity by asking questions.",
        "whyItMatters": "Questions are a sign of genuine interest in getting to know you better.",
    },

    # Timing
    "Slow to Respond": {
        "whatItMeans": "They take much longer to reply than you do.",
        "whyItMatters": "Everyone has different texting habits, but consistently slow responses might indicate lower priority.",
        "tip": "Consider their lifestyle - are they just busy, or is it a pattern?",
    },
    "Quick Responses": {
        "whatItMeans": "They typically respond within minutes.",
        "whyItMatters": "Quick responses often show enthusiasm and that the conversation is a priority.",
    },
    "Late Night Replies": {
        "whatItMeans": "Most of their messages arrive between 10pm and 5am.",
        "whyItMatters": "Conversations that only come alive late at night can mean you fit around their schedule rather than into it.",
        "tip": "See whether they reach out during the day too.",
    },
}

GENERIC_EXPLANATION = {
    "whatItMeans": "This pattern was detected in your conversation.",
    "whyItMatters": "Patterns help you understand the dynamics of your communication.",
}


def explain_pattern(title: str) -> Dict[str, str]:
    """
    Look up the explanation for a pattern title.

    Tries an exact match, then case-insensitive, then partial; unknown
    titles get a generic explanation.
    """
    if title in PATTERN_EXPLANATIONS:
        return {"title": title, **PATTERN_EXPLANATIONS[title]}

    lower_title = title.lower()
    for key, value in PATTERN_EXPLANATIONS.items():
        if key.lower() == lower_title:
            return {"title": key, **value}

    for key, value in PATTERN_EXPLANATIONS.items():
        if lower_title and (key.lower() in lower_title or lower_title in key.lower()):
            return {"title": key, **value}

    return {"title": title, **GENERIC_EXPLANATION}


def format_response_time(minutes: Optional[float]) -> str:
    """Render a latency in minutes as <1m, 12m, 1.5h or 2d."""
    if minutes is None:
        return "—"
    if minutes < 1:
        return "<1m"
    if minutes < 60:
        return f"{round(minutes)}m"
    hours = minutes / 60
    if hours < 24:
        return f"{hours:.1f}h"
    return f"{round(hours / 24)}d"
