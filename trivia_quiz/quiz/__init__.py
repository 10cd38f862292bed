"""Question loading and quiz progression for the trivia app."""

from .engine import CelebrationTier, Phase, QuizSession, celebration_tier
from .ingest import IngestionFault, QuestionBank
from .loaders import SourceLoadError, Table, load_raw_lines, load_structured
from .parser import ParseResult, Question, parse_lines, parse_table
from .scheduler import AsyncioScheduler, TickScheduler
from .utils import clean_field

__all__ = [
    "AsyncioScheduler",
    "CelebrationTier",
    "IngestionFault",
    "ParseResult",
    "Phase",
    "Question",
    "QuestionBank",
    "QuizSession",
    "SourceLoadError",
    "Table",
    "TickScheduler",
    "celebration_tier",
    "clean_field",
    "load_raw_lines",
    "load_structured",
    "parse_lines",
    "parse_table",
]
