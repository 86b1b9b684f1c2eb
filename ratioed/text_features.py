"""
Text feature extraction for Ratioed
Emoji and media detection shared by the group analyzer
"""

import re
import logging
from typing import List

import emoji

from . import config

logger = logging.getLogger(__name__)

URL_RE = re.compile(r"https?://[^\s]+", re.IGNORECASE)
EXTENSION_RE = re.compile(rf"\.({'|'.join(config.MEDIA_EXTENSIONS)})\b", re.IGNORECASE)


def extract_emojis(text: str) -> List[str]:
    """Extract all emojis from text."""
    # Use emoji library to extract
    return [char for char in text if char in emoji.EMOJI_DATA]


def count_emojis(text: str) -> int:
    return len(extract_emojis(text))


def count_media(text: str) -> int:
    """
    Count media mentions: links, export placeholders and file names.
    """
    count = len(URL_RE.findall(text))
    count += len(EXTENSION_RE.findall(text))

    lower = text.lower()
    for snippet in config.MEDIA_SNIPPETS:
        count += lower.count(snippet.lower())
    return count

