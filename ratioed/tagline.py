"""
Tagline collaborator for Ratioed
Optional remote one-line summary with a deterministic fallback table
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from . import config
from .models import Message, Pattern, Stats, SELF

logger = logging.getLogger(__name__)


def get_default_tagline(stats: Stats) -> str:
    """Pick a tagline from the message-ratio bands."""
    ratio = stats.message_ratio
    for bound, inclusive, tagline in config.TAGLINE_BANDS:
        if ratio > bound or (inclusive and ratio == bound):
            return tagline
    return config.TAGLINE_FLOOR


class TaglineClient:
    """
    Client for the pattern-interpretation endpoint that writes taglines.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or config.TAGLINE_API_URL
        if not self.url:
            raise ValueError("TAGLINE_API_URL not set - add to .env file or pass as argument")

        self.token = token if token is not None else config.TAGLINE_API_TOKEN
        self.timeout = timeout or config.TAGLINE_TIMEOUT
        self.session = session or requests.Session()

        logger.info(f"TaglineClient initialized (url={self.url}, timeout={self.timeout}s)")

    def _build_payload(
        self,
        messages: Sequence[Message],
        stats: Stats,
        pattern_titles: Sequence[str],
    ) -> Dict[str, Any]:
        return {
            "messages": [
                {"text": m.text, "sender": "user" if m.side == SELF else "them"}
                for m in messages
            ],
            "stats": stats.to_dict(),
            "patterns": [{"name": title} for title in pattern_titles],
        }

    def get_tagline(
        self,
        messages: Sequence[Message],
        stats: Stats,
        pattern_titles: Sequence[str],
    ) -> Optional[str]:
        """
        Ask the endpoint for a tagline.

        Returns:
            The tagline, or None when the response carries none

        Raises:
            requests.RequestException: On transport or HTTP errors
            ValueError: If the response body is not JSON
        """
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = self.session.post(
            self.url,
            json=self._build_payload(messages, stats, pattern_titles),
            headers=headers,
            timeout=self.timeout,
        )
        response.raise_for_status()

        data = response.json()
        tagline = data.get("tagline") if isinstance(data, dict) else None
        return tagline.strip() if isinstance(tagline, str) and tagline.strip() else None


def get_configured_client() -> Optional[TaglineClient]:
    """Return a client when the tagline API is enabled in config."""
    if not config.USE_TAGLINE_API or not config.TAGLINE_API_URL:
        return None
    return TaglineClient()


def resolve_tagline(
    messages: Sequence[Message],
    stats: Stats,
    patterns: List[Pattern],
    client: Optional[TaglineClient] = None,
) -> str:
    """
    Tagline from the collaborator if it answers, otherwise the default.

    Collaborator failures never propagate.
    """
    tagline = get_default_tagline(stats)
    if client is None:
        return tagline

    try:
        remote = client.get_tagline(messages, stats, [p.title for p in patterns])
        if remote:
            tagline = remote
    except Exception as e:
        logger.warning(f"Tagline interpretation failed, using default tagline: {e}")

    return tagline
