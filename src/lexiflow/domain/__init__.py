# Domain Package
from .errors import InsufficientFundsError, ItemNotFoundError, LexiflowError, LibraryFileError
from .models import (
    DailyProgress,
    Grade,
    IntervalPreview,
    MemoryState,
    SessionResult,
    SessionSummary,
    StudyMode,
    VocabularyItem,
)
from .ports import Clock, LibraryRepository

__all__ = [
    "Clock",
    "DailyProgress",
    "Grade",
    "InsufficientFundsError",
    "IntervalPreview",
    "ItemNotFoundError",
    "LexiflowError",
    "LibraryFileError",
    "LibraryRepository",
    "MemoryState",
    "SessionResult",
    "SessionSummary",
    "StudyMode",
    "VocabularyItem",
]
