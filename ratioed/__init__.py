"""
Ratioed - Conversation Effort Balance Analyzer

Measures who is putting effort into a conversation: message and word
balance, questions, response latency, behavioural flags and the overall
vibe, plus a leaderboard for group chats.
"""

__version__ = "1.0.0"
__author__ = "Ratioed Team"

from . import config
from . import parser
from . import resolver
from . import chatstats
from . import flags
from . import vibe
from . import scoring
from . import group_analyzer
from . import analysis_engine

from .errors import InsufficientDataError
from .analysis_engine import analyze_one_on_one, analyze_transcript, analyze_group

__all__ = [
    "config",
    "parser",
    "resolver",
    "chatstats",
    "flags",
    "vibe",
    "scoring",
    "group_analyzer",
    "analysis_engine",
    "InsufficientDataError",
    "analyze_one_on_one",
    "analyze_transcript",
    "analyze_group",
]
