"""Spaced-repetition study core: scheduling, chapter windows and study sessions."""

from .answers import is_match, normalize_answer
from .chapters import build_windows, chapter_cards, extract_number
from .errors import DrillError, EmptyAnswer, EmptySelection, InvalidGrade, NoIncorrectResults, SessionNotActive
from .models import Card, ChapterWindow, MasteryLevel, PartOfSpeech, ResultEntry, ReviewState, SessionSummary
from .session import SessionState, StudyInputMode, StudySession
from .session_builder import SelectionCriteria, build_queue, select_cards, start_session
from .srs import due_cards, next_state

__all__ = [
    "Card",
    "ChapterWindow",
    "DrillError",
    "EmptyAnswer",
    "EmptySelection",
    "InvalidGrade",
    "MasteryLevel",
    "NoIncorrectResults",
    "PartOfSpeech",
    "ResultEntry",
    "ReviewState",
    "SelectionCriteria",
    "SessionNotActive",
    "SessionState",
    "SessionSummary",
    "StudyInputMode",
    "StudySession",
    "build_queue",
    "build_windows",
    "chapter_cards",
    "due_cards",
    "extract_number",
    "is_match",
    "next_state",
    "normalize_answer",
    "select_cards",
    "start_session",
]
