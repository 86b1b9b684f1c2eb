"""
Transcript parser for Ratioed
Turns exported chat text into ordered (sender, text, timestamp) records,
trying known export dialects in priority order
"""

import re
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Tuple, Union

from . import config
from .models import ParsedMessage

logger = logging.getLogger(__name__)

# Unicode quirks
NBSP = "\u00A0"
NNBSP = "\u202F"
ZWSP = "\u200B"
LRM = "\u200E"
RLM = "\u200F"
BOM = "\ufeff"

# [1/15/24, 3:45 PM] Name: message  /  1/15/24, 3:45 PM - Name: message
WHATSAPP_RE = re.compile(
    r"""^\[?
    (?P<timestamp>\d{1,2}/\d{1,2}/\d{2,4},?\s+\d{1,2}:\d{2}(?::\d{2})?(?:\s*[AaPp][Mm])?)
    \]?\s*[-\u2013\u2014]?\s*
    (?P<sender>[^:]+):
    \s*
    (?P<message>.+)
    $""",
    re.VERBOSE,
)

# Timestamped line with no `sender:` label, e.g. "Alice added Bob"
WHATSAPP_NOTICE_RE = re.compile(
    r"^\[?\d{1,2}/\d{1,2}/\d{2,4},?\s+\d{1,2}:\d{2}(?::\d{2})?(?:\s*[AaPp][Mm])?\]?\s*[-\u2013\u2014]?\s*[^:]*$"
)

# Name: message
SHORT_NAME_RE = re.compile(r"^(?P<sender>[^:]+):\s*(?P<message>.+)$")
MAX_SENDER_LENGTH = 50

# iMessage style exports
MARKER_RE = re.compile(r"^(?P<marker>From|To|Me|You):\s*(?P<message>.+)?$", re.IGNORECASE)
IMESSAGE_TS_RE = re.compile(
    r"""^(?P<timestamp>\d{1,2}/\d{1,2}/\d{2,4}\s+\d{1,2}:\d{2}(?::\d{2})?\s*(?:AM|PM)?)
    \s*[-\u2013]?\s*
    (?P<sender>[^:]+):
    \s*
    (?P<message>.+)
    $""",
    re.VERBOSE | re.IGNORECASE,
)
DATE_LIKE_RE = re.compile(r"^\d{1,2}[/\-]")

URL_HINT = "http"

DATE_FORMATS = ["%m/%d/%y", "%m/%d/%Y", "%d/%m/%y", "%d/%m/%Y"]
TIME_FORMATS = ["%I:%M %p", "%I:%M:%S %p", "%H:%M", "%H:%M:%S"]


def _strip_weird_unicode(s: str) -> str:
    """Normalize export quirks: remove invisible chars, unify spaces."""
    if not s:
        return s
    s = s.replace(BOM, "")
    s = s.replace(LRM, "").replace(RLM, "")
    s = s.replace(ZWSP, " ")  # Replace with space, not remove
    s = s.replace(NBSP, " ").replace(NNBSP, " ")
    s = re.sub(r"[ \t]+", " ", s)
    return s.strip()


def _looks_like_system(line: str) -> bool:
    """Check if line is a system notice rather than a message."""
    low = line.lower()
    return any(snippet.lower() in low for snippet in config.SYSTEM_SNIPPETS)


def _match_short_name(line: str) -> Optional[ParsedMessage]:
    """Match `name: text` where the name is short and the line has no URL."""
    m = SHORT_NAME_RE.match(line)
    if not m or URL_HINT in line or len(m.group("sender")) >= MAX_SENDER_LENGTH:
        return None
    text = m.group("message").strip()
    if not text:
        return None
    return ParsedMessage(sender=m.group("sender").strip(), text=text)


def _clean_lines(text: str) -> List[str]:
    lines = []
    for raw in text.splitlines():
        line = _strip_weird_unicode(raw)
        if line and not _looks_like_system(line):
            lines.append(line)
    return lines


# ============================================================================
# DIALECTS
# ============================================================================

def parse_whatsapp(text: str) -> List[ParsedMessage]:
    """
    Label-delimited lines with an optional bracketed timestamp.

    Lines without a timestamp fall back to the short-name rule. Timestamped
    lines with no sender label are group notices and are dropped. A line
    that matches neither rule right after a timestamped message continues it.
    """
    messages: List[ParsedMessage] = []
    continuable = False

    for line in _clean_lines(text):
        m = WHATSAPP_RE.match(line)
        if m and m.group("message").strip():
            messages.append(ParsedMessage(
                sender=m.group("sender").strip(),
                text=m.group("message").strip(),
                timestamp=m.group("timestamp"),
            ))
            continuable = True
            continue

        if WHATSAPP_NOTICE_RE.match(line):
            logger.debug(f"Skipping group notice: {line[:80]}")
            continuable = False
            continue

        short = _match_short_name(line)
        if short and not DATE_LIKE_RE.match(short.sender):
            messages.append(short)
            continuable = False
            continue

        if continuable:
            last = messages[-1]
            messages[-1] = replace(last, text=f"{last.text}\n{line}")
        else:
            logger.debug(f"Orphaned line: {line[:80]}")

    return messages


def parse_imessage(text: str) -> List[ParsedMessage]:
    """
    Sender markers (From:, To:, Me:, You:) followed by freeform lines.

    Plain lines belong to the most recent marker; lines that start like a
    date are skipped.
    """
    messages: List[ParsedMessage] = []
    current_sender = ""

    for line in _clean_lines(text):
        marker = MARKER_RE.match(line)
        if marker:
            current_sender = marker.group("marker")
            inline = (marker.group("message") or "").strip()
            if inline:
                messages.append(ParsedMessage(sender=current_sender, text=inline))
            continue

        ts = IMESSAGE_TS_RE.match(line)
        if ts and ts.group("message").strip():
            messages.append(ParsedMessage(
                sender=ts.group("sender").strip(),
                text=ts.group("message").strip(),
                timestamp=ts.group("timestamp"),
            ))
            continue

        if current_sender and not DATE_LIKE_RE.match(line):
            messages.append(ParsedMessage(sender=current_sender, text=line))

    return messages


def parse_generic(text: str) -> List[ParsedMessage]:
    """Any `shortname: text` line."""
    messages = []
    for line in _clean_lines(text):
        short = _match_short_name(line)
        if short:
            messages.append(short)
    return messages


Dialect = Tuple[str, Callable[[str], List[ParsedMessage]]]

# Priority order; the first dialect yielding enough messages wins
DIALECTS: Tuple[Dialect, ...] = (
    ("whatsapp", parse_whatsapp),
    ("imessage", parse_imessage),
    ("generic", parse_generic),
)


def detect_dialect(
    text: str,
    dialects: Sequence[Dialect] = DIALECTS,
) -> Tuple[Optional[str], List[ParsedMessage]]:
    """
    Try each dialect in order and return (name, messages) for the first
    one that yields more than MIN_DIALECT_MESSAGES messages.

    When none qualifies the name is None and the messages are whatever the
    last dialect produced.
    """
    messages: List[ParsedMessage] = []
    for name, matcher in dialects:
        messages = matcher(text)
        if len(messages) > config.MIN_DIALECT_MESSAGES:
            logger.debug(f"Transcript matched {name} dialect ({len(messages)} messages)")
            return name, messages
    return None, messages


def parse_chat_export(text: str) -> List[ParsedMessage]:
    """Parse transcript text into ParsedMessage records."""
    _, messages = detect_dialect(text)
    return messages


# ============================================================================
# TIMESTAMPS
# ============================================================================

def _naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse an export or OCR timestamp.

    Accepts WhatsApp-style dates (US order first, then day-first), 12h or
    24h times with optional seconds, bare times and ISO 8601. Returns None
    for anything unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _naive_utc(value)
    if not isinstance(value, str):
        return None

    s = _strip_weird_unicode(value).strip("[]").strip()
    if not s:
        return None

    try:
        return _naive_utc(datetime.fromisoformat(s.replace("Z", "+00:00")))
    except ValueError:
        pass

    s = re.sub(r",?\s+", " ", s)
    s = re.sub(r"(\d)\s*([AaPp])\.?[Mm]\.?$", lambda m: f"{m.group(1)} {m.group(2).upper()}M", s)

    candidates = [f"{d} {t}" for d in DATE_FORMATS for t in TIME_FORMATS] + TIME_FORMATS
    for fmt in candidates:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue

    logger.debug(f"Unrecognized timestamp: {value!r}")
    return None


class TranscriptParser:
    """Parse exported chat transcripts into ParsedMessage records."""

    def __init__(self, dialects: Optional[Sequence[Dialect]] = None):
        self.dialects = tuple(dialects) if dialects else DIALECTS
        self.last_dialect: Optional[str] = None

    def parse_file(self, file_path: str) -> List[ParsedMessage]:
        """Parse a transcript file from disk."""
        encodings = ["utf-8", "utf-8-sig", "cp1252", "latin1"]
        last_err: Optional[Exception] = None

        for enc in encodings:
            try:
                with open(file_path, "r", encoding=enc) as f:
                    text = f.read()
                return self.parse_text(text)
            except (OSError, UnicodeError) as e:
                last_err = e
                continue

        raise ValueError(f"Failed to read/parse file {file_path}: {last_err}")

    def parse_text(self, text: str) -> List[ParsedMessage]:
        """Parse transcript text already loaded in memory."""
        if text is None:
            raise TypeError("Transcript text is required")

        self.last_dialect, messages = detect_dialect(text, self.dialects)
        senders = {m.sender.lower() for m in messages}
        logger.info(
            f"Parsed {len(messages)} messages from {len(senders)} senders "
            f"(dialect={self.last_dialect or 'none'})"
        )
        return messages


def validate_format(file_path: str) -> Tuple[bool, str]:
    """
    Check whether a file looks like a supported chat export.
    Returns (is_valid, reason).
    """
    try:
        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            text = f.read()
    except OSError as e:
        return False, f"Could not read file: {e}"

    name, messages = detect_dialect(text)
    if name is None:
        return False, "Not enough lines match a supported chat export format"
    return True, f"Format appears valid ({name}, {len(messages)} messages)"
