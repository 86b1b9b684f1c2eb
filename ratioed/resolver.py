"""
Participant resolver for Ratioed
Maps raw sender names onto the self/other sides of a 1-on-1 chat
"""

import logging
from collections import Counter
from typing import List, Sequence, Tuple

from . import config
from .models import Message, ParsedMessage, SELF, OTHER
from .parser import parse_timestamp

logger = logging.getLogger(__name__)


def _normalize_name(name: str) -> str:
    return name.strip().lower()


def _is_self_indicator(name: str) -> bool:
    return name in config.SELF_INDICATORS or any(marker in name for marker in config.SELF_MARKERS)


def identify_participants(messages: Sequence[ParsedMessage]) -> Tuple[List[str], List[str]]:
    """
    Decide which lowercased sender names are "self" and which are "other".

    A sender called me/you/i/myself, or tagged "(you)"/"(me)", is self.
    Without such a marker the most frequent sender is taken to be the other
    person and the second most frequent to be self, since the uploader is
    usually checking on the more active party. A lone sender is other.
    """
    counts = Counter(_normalize_name(m.sender) for m in messages)
    # most_common keeps first-seen order for equal counts
    senders = [name for name, _ in counts.most_common()]

    self_names = [s for s in senders if _is_self_indicator(s)]
    other_names = [s for s in senders if s not in self_names]

    if not self_names and len(senders) >= 2:
        self_names = [senders[1]]
        other_names = [s for s in senders if s != senders[1]]
        logger.debug(f"No self marker found; assuming '{senders[1]}' is self")
    elif not self_names and len(senders) == 1:
        logger.debug(f"Single sender '{senders[0]}' treated as other")

    return self_names, other_names


def resolve_messages(messages: Sequence[ParsedMessage]) -> List[Message]:
    """Attribute parsed transcript messages to self or other."""
    self_names, _ = identify_participants(messages)
    selves = set(self_names)

    resolved = [
        Message.create(
            text=pm.text,
            side=SELF if _normalize_name(pm.sender) in selves else OTHER,
            timestamp=parse_timestamp(pm.timestamp),
        )
        for pm in messages
    ]

    n_self = sum(1 for m in resolved if m.side == SELF)
    logger.info(f"Resolved {len(resolved)} messages ({n_self} self, {len(resolved) - n_self} other)")
    return resolved
