"""
Data model for Ratioed
Plain dataclasses for parsed messages, statistics and findings
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

SELF = "self"
OTHER = "other"

# Side names used by the OCR collaborator
SIDE_ALIASES = {
    "self": SELF,
    "person1": SELF,
    "user": SELF,
    "me": SELF,
    "you": SELF,
    "other": OTHER,
    "person2": OTHER,
    "them": OTHER,
}


def count_words(text: str) -> int:
    """Count whitespace-delimited non-empty tokens."""
    return len(text.split())


@dataclass(frozen=True)
class ParsedMessage:
    """A single message recovered from an exported transcript."""
    sender: str
    text: str
    timestamp: Optional[str] = None


@dataclass(frozen=True)
class Message:
    """A message attributed to a side of the conversation."""
    text: str
    side: str
    has_question: bool
    timestamp: Optional[datetime]
    word_count: int

    @classmethod
    def create(cls, text: str, side: str, timestamp: Optional[datetime] = None) -> "Message":
        return cls(
            text=text,
            side=side,
            has_question="?" in text,
            timestamp=timestamp,
            word_count=count_words(text),
        )

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Message":
        """
        Build a Message from an OCR record.

        Accepts ``{text, side | sender, hasQuestion?, timestamp?, wordCount?}``.
        A missing or zero ``wordCount`` is recomputed from the text.
        """
        from .parser import parse_timestamp

        text = record["text"]
        raw_side = str(record.get("side", record.get("sender", ""))).strip().lower()
        if raw_side not in SIDE_ALIASES:
            raise ValueError(f"Unknown message side: {raw_side!r}")

        has_question = record.get("hasQuestion")
        if has_question is None:
            has_question = "?" in text

        return cls(
            text=text,
            side=SIDE_ALIASES[raw_side],
            has_question=bool(has_question),
            timestamp=parse_timestamp(record.get("timestamp")),
            word_count=record.get("wordCount") or count_words(text),
        )


@dataclass
class SideStats:
    """Aggregates for one side of a 1-on-1 conversation."""
    messages: int = 0
    words: int = 0
    questions: int = 0
    avg_response_minutes: Optional[float] = None
    initiations: int = 0

    @property
    def avg_words(self) -> float:
        return self.words / self.messages if self.messages else 0.0


def _ratio(mine: float, theirs: float) -> float:
    # Self count stands in for the ratio when the other side has none
    return mine / theirs if theirs > 0 else float(mine)


@dataclass
class Stats:
    """Comparative statistics for self vs other."""
    self_side: SideStats = field(default_factory=SideStats)
    other_side: SideStats = field(default_factory=SideStats)

    @property
    def message_ratio(self) -> float:
        return _ratio(self.self_side.messages, self.other_side.messages)

    @property
    def word_ratio(self) -> float:
        return _ratio(self.self_side.words, self.other_side.words)

    @property
    def question_ratio(self) -> float:
        return _ratio(self.self_side.questions, self.other_side.questions)

    @property
    def response_time_ratio(self) -> Optional[float]:
        """Self latency over other latency; None unless both are known."""
        mine = self.self_side.avg_response_minutes
        theirs = self.other_side.avg_response_minutes
        if mine is None or theirs is None or theirs <= 0:
            return None
        return mine / theirs

    @property
    def total_messages(self) -> int:
        return self.self_side.messages + self.other_side.messages

    def to_dict(self) -> Dict[str, Any]:
        return {
            "messageRatio": self.message_ratio,
            "wordRatio": self.word_ratio,
            "questionRatio": self.question_ratio,
            "userMessageCount": self.self_side.messages,
            "themMessageCount": self.other_side.messages,
            "userWordCount": self.self_side.words,
            "themWordCount": self.other_side.words,
            "userQuestionCount": self.self_side.questions,
            "themQuestionCount": self.other_side.questions,
            "userResponseMinutes": self.self_side.avg_response_minutes,
            "themResponseMinutes": self.other_side.avg_response_minutes,
        }


@dataclass(frozen=True)
class Pattern:
    """A behavioural finding surfaced to the user."""
    title: str
    description: str
    sentiment: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "title": self.title,
            "description": self.description,
            "sentiment": self.sentiment,
        }


@dataclass(frozen=True)
class Vibe:
    label: str
    emoji: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "label": self.label,
            "emoji": self.emoji,
            "description": self.description,
        }


@dataclass
class GroupMemberStats:
    """Per-participant counters in a group chat."""
    name: str
    message_count: int = 0
    word_count: int = 0
    question_count: int = 0
    media_count: int = 0
    emoji_count: int = 0
    avg_words_per_message: float = 0.0
    percentage: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "messageCount": self.message_count,
            "wordCount": self.word_count,
            "questionCount": self.question_count,
            "avgWordsPerMessage": self.avg_words_per_message,
            "mediaCount": self.media_count,
            "emojiCount": self.emoji_count,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class GroupMemberTag:
    label: str
    emoji: str
    description: str
    sentiment: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "label": self.label,
            "emoji": self.emoji,
            "description": self.description,
            "sentiment": self.sentiment,
        }


@dataclass
class GroupMemberAnalysis:
    name: str
    stats: GroupMemberStats
    tags: List[GroupMemberTag]
    rank: int = 0

    def has_tag(self, *labels: str) -> bool:
        return any(tag.label in labels for tag in self.tags)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "stats": self.stats.to_dict(),
            "tags": [tag.to_dict() for tag in self.tags],
            "rank": self.rank,
        }
