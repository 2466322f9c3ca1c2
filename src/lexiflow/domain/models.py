"""
Domain models for vocabulary items, memory state and learner progress.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from .constants import (
    DEFAULT_DAILY_TARGET,
    DEFAULT_EASE,
    DEFAULT_INTERVAL,
    DEFAULT_LEAGUE,
    DEFAULT_STREAK,
)


class Grade(str, Enum):
    """The four learner responses to a review, weakest recall first."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @property
    def is_correct(self) -> bool:
        return self is not Grade.AGAIN


class StudyMode(str, Enum):
    """Interaction modes used to test an item. AUTO defers to the selector."""

    MEANING = "meaning"
    TRANSLATION = "translation"
    CONTEXT = "context"
    WRITING = "writing"
    SPEAKING = "speaking"
    AUTO = "auto"


@dataclass(frozen=True)
class MemoryState:
    """
    Spaced-repetition state of one item.

    Attributes:
        next_review_at: The item is due once this moment has passed.
        interval_days: Current interval in days (0 = new or relearning).
        ease_factor: Interval growth multiplier, never below 1.3.
        streak: Consecutive non-failing grades.
    """

    next_review_at: datetime
    interval_days: float = DEFAULT_INTERVAL
    ease_factor: float = DEFAULT_EASE
    streak: int = DEFAULT_STREAK

    def is_due(self, now: datetime) -> bool:
        return self.next_review_at <= now

    @property
    def is_new(self) -> bool:
        return self.interval_days < 1


@dataclass(frozen=True)
class VocabularyItem:
    """
    A word in the learner's library.

    Content fields come from an external content source and are never
    changed by the core. Only `memory` is replaced after a review.
    """

    id: str
    term: str
    memory: MemoryState
    date_added: datetime
    translation: str = ""
    definition: str = ""
    example_sentence: str = ""
    pronunciation: str = ""
    phonetic_spelling: str = ""
    part_of_speech: str = ""
    mnemonic: str | None = None


@dataclass(frozen=True)
class SessionResult:
    """One graded item inside a study session."""

    item_id: str
    term: str
    is_correct: bool
    grade: Grade


@dataclass(frozen=True)
class DailyProgress:
    """
    Learner progress block: daily counters, streaks and the XP balance.

    Attributes:
        words_studied_today: Items graded on `last_study_date`.
        last_study_date: Calendar day of the last update, None if never studied.
        streak: Consecutive study days.
        longest_streak: Best streak ever reached.
        streak_freeze: Tokens that forgive one missed day each.
        xp: Experience points balance.
        daily_target: Words-per-day goal.
        league: Leaderboard tier label, carried as-is.
    """

    words_studied_today: int = 0
    last_study_date: date | None = None
    streak: int = 0
    longest_streak: int = 0
    streak_freeze: int = 0
    xp: int = 0
    daily_target: int = DEFAULT_DAILY_TARGET
    league: str = DEFAULT_LEAGUE


@dataclass(frozen=True)
class IntervalPreview:
    """Human-readable next-review durations for each grade button."""

    again: str
    hard: str
    good: str
    easy: str

    def as_dict(self) -> dict[str, str]:
        return {"again": self.again, "hard": self.hard, "good": self.good, "easy": self.easy}


@dataclass
class SessionSummary:
    """End-of-session statistics."""

    completed: int
    correct: int
    incorrect: int
    accuracy: int  # percent, rounded
    grade_counts: dict[Grade, int] = field(default_factory=dict)
    reviewed_ids: list[str] = field(default_factory=list)
