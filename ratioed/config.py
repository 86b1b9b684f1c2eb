"""
Configuration module for Ratioed
Loads environment variables and holds every heuristic threshold in one place
"""

import os
from typing import Dict, Any
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Tagline collaborator (optional, 1-on-1 only)
USE_TAGLINE_API = os.getenv("USE_TAGLINE_API", "False").lower() == "true"
TAGLINE_API_URL = os.getenv("TAGLINE_API_URL", "")
TAGLINE_API_TOKEN = os.getenv("TAGLINE_API_TOKEN", "")
TAGLINE_TIMEOUT = float(os.getenv("TAGLINE_TIMEOUT", "10"))

# Minimum message counts
MIN_MESSAGES_ONE_ON_ONE = int(os.getenv("MIN_MESSAGES_ONE_ON_ONE", "3"))
MIN_MESSAGES_GROUP = int(os.getenv("MIN_MESSAGES_GROUP", "5"))
MIN_DIALECT_MESSAGES = int(os.getenv("MIN_DIALECT_MESSAGES", "2"))  # dialect must yield more than this

# Web server
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "5"))
API_PORT = int(os.getenv("API_PORT", "5000"))
DEV_USE_RELOADER = os.getenv("DEV_USE_RELOADER", "False").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# ============================================================================
# Statistics
# ============================================================================

# Replies slower than this are a new conversation, not a reply
LATENCY_MAX_MINUTES = 24 * 60

# A message after this much silence counts as starting the conversation
INITIATION_GAP_MINUTES = 120

# Late night window: hour >= start or hour < end
LATE_NIGHT_HOURS = (22, 5)

# ============================================================================
# Flag detector
# ============================================================================

FLAG_THRESHOLDS = {
    # red
    "double_text_run": 3,
    "short_reply_max_words": 2,
    "short_reply_min_messages": 3,    # other must have more than this
    "short_reply_share": 0.5,         # more than this share is short
    "one_way_min_questions": 3,
    "slow_response_ratio": 0.3,       # self latency / other latency below this
    "effort_message_ratio": 2.5,
    "late_night_min_messages": 3,
    "late_night_share": 0.7,
    # green
    "balanced_message_ratio": (0.8, 1.2),
    "balanced_word_ratio": (0.7, 1.4),
    "asks_questions_min": 2,
    "asks_questions_ratio": (0.5, 2.0),
    "they_initiate_ratio": 0.7,
    "quick_response_minutes": 10,
    "lengthy_avg_words": 8,
    "lengthy_min_messages": 3,
    # neutral
    "question_imbalance_ratio": 2.0,
}

MAX_PATTERNS = 4

# ============================================================================
# Vibe classifier
# ============================================================================

VIBE_WEIGHTS = {
    "flirty_emoji": 1.0,
    "flirty_keyword": 1.5,
    "happy_emoji": 1.0,
    "engaged_phrase": 1.0,
    "engaged_long_bonus": 2.0,
    "dry_terse_ratio": 5.0,   # multiplied by share of terse replies
    "dry_cold_emoji": 1.0,
    "dry_short_bonus": 2.0,
    "cold_emoji": 1.0,
    "cold_slow_bonus": 3.0,
}

VIBE_THRESHOLDS = {
    "flirty": 3,
    "engaged": 3,
    "dry": 4,
    "cold": 3,
    "engaged_avg_words": 6,
    "dry_avg_words": 3,
    "cold_latency_minutes": 60,
    "low_energy_max_score": 2,
    "low_energy_message_ratio": 1.5,
    "balanced_ratio": (0.8, 1.2),
    "interested_ratio": 0.8,
}

# Checked in this order when scores tie
VIBE_CATEGORY_ORDER = ("flirty", "engaged", "dry", "cold")

FLIRTY_EMOJIS = ["😍", "😘", "🥰", "😏", "😉", "❤️", "❤", "💕", "💖", "💋", "😻", "🔥", "🫦", "😈"]
FLIRTY_KEYWORDS = [
    "cute", "babe", "baby", "miss you", "miss u", "handsome", "beautiful",
    "gorgeous", "sexy", "hot", "date", "kiss", "cuddle", "wyd", "thinking of you",
    "thinking about you", "love",
]
HAPPY_EMOJIS = ["😂", "🤣", "😊", "😄", "😁", "😃", "🥳", "🎉", "✨", "😆", "👍", "🙌", "💯", "😎", "🤩"]
ENGAGED_PHRASES = [
    "haha", "lol", "lmao", "omg", "tell me", "what about you", "how about you",
    "and you", "wbu", "hbu", "same", "no way", "that's awesome", "thats awesome",
    "sounds fun", "love that", "for real", "wait what", "!!",
]
COLD_EMOJIS = ["🙄", "😐", "😑", "😒", "🙃", "😶", "🥱", "👍🏻"]
TERSE_REPLIES = {
    "ok", "okay", "k", "kk", "fine", "sure", "yea", "yeah", "ya", "yep",
    "yup", "cool", "nice", "hm", "hmm", "mhm", "idk", "np", "lol", "ok cool",
    "no", "yes", "nah", "maybe", "whatever", "true",
}

VIBES = {
    "Flirty": ("😏", "Their messages have a playful, flirty edge"),
    "Engaged": ("🤩", "They're into this conversation and it shows"),
    "Dry": ("🏜️", "Short, low-effort replies from their side"),
    "Cold": ("🧊", "Distant and slow to warm up"),
    "Low Energy": ("🪫", "You're bringing most of the energy here"),
    "Balanced": ("⚖️", "Both sides are matching each other's energy"),
    "Interested": ("👀", "They're putting in a bit more than you"),
    "Mixed": ("🤷", "Hard to read, the signals go both ways"),
}

# ============================================================================
# Balance score
# ============================================================================

SCORE_WEIGHTS = {
    "message": 0.6,
    "word": 0.4,
}

# Checked top-down, first match wins
SCORE_LABEL_THRESHOLDS = [
    (60, "BALANCED"),
    (40, "MIXED"),
    (0, "ONE-SIDED"),
]

# (lower bound on message ratio, bound inclusive, tagline), checked top-down
TAGLINE_BANDS = [
    (3.0, False, "You're carrying this conversation"),
    (2.0, False, "You're doing most of the heavy lifting"),
    (1.5, False, "The energy isn't quite matched"),
    (1.2, False, "Slightly uneven, but not too bad"),
    (0.8, True, "The conversation looks balanced"),
    (0.67, True, "They're slightly more invested"),
    (0.5, True, "They're putting in more effort"),
    (0.33, True, "They're really carrying this one"),
]
TAGLINE_FLOOR = "They're doing all the work here"

# Comparing two conversations: scores within this margin are a tie
COMPARE_TIE_MARGIN = 5

# ============================================================================
# Participant resolver
# ============================================================================

SELF_INDICATORS = {"me", "you", "i", "myself"}
SELF_MARKERS = ("(you)", "(me)")

# ============================================================================
# Group analyzer
# ============================================================================

GROUP_TAG_THRESHOLDS = {
    "carrying_share": 30.0,
    "lurker_share": 5.0,
    "lurker_min_members": 3,        # cohort must be larger than this
    "meme_multiplier": 2.0,
    "meme_min_media": 3,
    "one_liner_avg_words": 4,
    "one_liner_min_messages": 5,
    "essay_avg_words": 20,
    "essay_min_messages": 3,
    "curious_multiplier": 2.0,
    "curious_min_questions": 3,
    "emoji_fan_min": 10,
    "emoji_fan_per_message": 1.0,
    "ghost_share_of_average": 0.2,
    "ghost_min_members": 2,         # cohort must be larger than this
    "active_share": (15.0, 30.0),
    "max_tags": 3,
    "max_highlights": 4,
    "pair_balanced_diff": 20.0,
    "distributed_top_three": 70.0,
    "highlight_top_share": 40.0,
}

GROUP_TAGS = {
    "Carrying": ("💪", "Does most of the talking", "positive"),
    "Lurker": ("👀", "Barely participates", "negative"),
    "Meme Lord": ("🎭", "Mostly sends media/links", "neutral"),
    "One-liner": ("💬", "Keeps it short", "neutral"),
    "Essay Writer": ("📝", "Writes long messages", "neutral"),
    "Curious": ("❓", "Asks lots of questions", "positive"),
    "Emoji Fan": ("😂", "Loves their emojis", "neutral"),
    "Ghost": ("👻", "Rarely shows up", "negative"),
    "Active": ("✨", "Consistently engaged", "positive"),
    "Casual": ("👋", "Chimes in occasionally", "neutral"),
}

# Media placeholders (WhatsApp / iMessage exports)
MEDIA_SNIPPETS = [
    "<Media omitted>", "image omitted", "video omitted",
    "audio omitted", "document omitted", "GIF omitted",
    "sticker omitted", "[image]", "[video]", "[gif]", "[sticker]",
]
MEDIA_EXTENSIONS = ["jpg", "jpeg", "png", "gif", "mp4", "mov", "webp", "webm"]

# WhatsApp system notices (never counted as messages)
SYSTEM_SNIPPETS = [
    "Messages and calls are end-to-end encrypted",
    "This message was deleted",
    "You deleted this message",
    "security code changed",
    "created group",
    "changed the subject",
    "changed this group",
    "changed the group description",
    "joined using this group's invite link",
    "added you",
    "Missed voice call",
    "Missed video call",
]


def get_config_summary() -> Dict[str, Any]:
    """Return a summary of current configuration."""
    return {
        "tagline": {
            "enabled": USE_TAGLINE_API,
            "url": TAGLINE_API_URL,
            "timeout": TAGLINE_TIMEOUT,
        },
        "minimums": {
            "one_on_one": MIN_MESSAGES_ONE_ON_ONE,
            "group": MIN_MESSAGES_GROUP,
            "dialect": MIN_DIALECT_MESSAGES,
        },
        "scoring": dict(SCORE_WEIGHTS),
        "server": {
            "max_upload_mb": MAX_UPLOAD_MB,
            "log_level": LOG_LEVEL,
        },
    }


def validate_config() -> tuple[bool, str]:
    """Validate configuration. Returns (is_valid, message)."""
    if USE_TAGLINE_API and not TAGLINE_API_URL:
        return False, "TAGLINE_API_URL not set in .env file (required when USE_TAGLINE_API=True)"

    total_weight = sum(SCORE_WEIGHTS.values())
    if abs(total_weight - 1.0) > 0.01:
        return False, f"Score weights sum to {total_weight:.2f}, should be ~1.0"

    if MIN_MESSAGES_ONE_ON_ONE < 1 or MIN_MESSAGES_GROUP < 1:
        return False, "Minimum message counts must be positive"

    return True, "Configuration valid"


if __name__ == "__main__":
    # Print config summary for debugging
    import json
    print("Ratioed Configuration:")
    print(json.dumps(get_config_summary(), indent=2))
    print()
    valid, msg = validate_config()
    print(f"Validation: {msg}")
