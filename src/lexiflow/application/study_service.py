"""
Study Service: application layer orchestrator.

Wires the queue builder, mode selector, scheduler, session ledger and
progress economy together over a LibraryRepository and an injected clock.
"""

import logging
import random
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from lexiflow.domain.constants import GENERATION_XP_PER_WORD, STORY_XP_REWARD
from lexiflow.domain.errors import ItemNotFoundError
from lexiflow.domain.models import (
    DailyProgress,
    Grade,
    IntervalPreview,
    SessionSummary,
    StudyMode,
    VocabularyItem,
)
from lexiflow.domain.ports import Clock, LibraryRepository

from . import progress as economy
from .library import new_item
from .mode_selector import choose_mode
from .pronunciation import PronunciationResult, evaluate
from .queue_builder import due_queue, next_item, weak_queue
from .scheduler import apply_grade, preview_intervals, xp_for_grade
from .session import SessionLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewOutcome:
    """Everything that changed as a result of grading one item."""

    item: VocabularyItem
    grade: Grade
    xp_gained: int
    progress: DailyProgress
    session_progress: float


class StudyService:
    """
    Application service running study sessions for one learner.

    Follows Dependency Inversion: depends on the LibraryRepository and Clock
    abstractions, not on concrete storage or wall-clock time.
    """

    def __init__(
        self,
        repo: LibraryRepository,
        clock: Clock,
        rng: random.Random | None = None,
        override: StudyMode = StudyMode.AUTO,
    ):
        """
        Args:
            repo: Storage for items and the progress block.
            clock: Source of the current time and study day.
            rng: Random source for mode selection; a fresh one if not provided.
            override: Manual study mode applied to every item, AUTO to adapt.
        """
        self._repo = repo
        self._clock = clock
        self._rng = rng or random.Random()
        self.override = StudyMode(override)
        self.ledger = SessionLedger()

    # ---------- Queues ----------

    def _weak_pool(self, items: list[VocabularyItem]) -> list[VocabularyItem]:
        # Items already practiced this session are not offered again as weak
        # fallback, otherwise a "good" answer would keep them in the pool forever.
        return weak_queue(items, exclude=self.ledger.reviewed_ids)

    def queue_counts(self) -> tuple[int, int]:
        """Current (due, weak) queue lengths."""
        items = self._repo.list_items()
        return len(due_queue(items, self._clock.now())), len(self._weak_pool(items))

    def start_session(self) -> SessionLedger:
        self.ledger = SessionLedger()
        items = self._repo.list_items()
        due = due_queue(items, self._clock.now())
        weak = weak_queue(items)
        self.ledger.start(len(due), len(weak), started_at=self._clock.now())
        logger.info(f"Study session started with {self.ledger.initial_queue_size} items")
        return self.ledger

    def next_item(self) -> VocabularyItem | None:
        return next_item(
            self._repo.list_items(),
            self._clock.now(),
            exclude=self.ledger.reviewed_ids,
        )

    def is_complete(self) -> bool:
        return self.ledger.is_complete(*self.queue_counts())

    def summary(self) -> SessionSummary:
        return self.ledger.summary()

    # ---------- Items ----------

    def now(self) -> datetime:
        return self._clock.now()

    def today(self) -> date:
        return self._clock.today()

    def items(self) -> list[VocabularyItem]:
        return self._repo.list_items()

    def get_item(self, item_id: str) -> VocabularyItem:
        item = self._repo.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def add_item(self, term: str, **content: str | None) -> VocabularyItem:
        """Add one item; see `add_items`."""
        return self.add_items([{"term": term, **content}])[0]

    def add_items(self, entries: Iterable[Mapping[str, Any]]) -> list[VocabularyItem]:
        """
        Add a batch of new items, due immediately.

        Adding words is a study event for the day: it counts the words toward
        the daily goal, earns GENERATION_XP_PER_WORD each and rolls the streak.

        Args:
            entries: Mappings with a "term" and optional content fields
                (translation, definition, example_sentence, ...).

        Raises:
            ValueError: If any entry has a blank term. Nothing is saved then.
        """
        now = self._clock.now()
        items = []
        for entry in entries:
            content = {k: v for k, v in entry.items() if k != "term"}
            items.append(new_item(entry["term"], now, **content))
        if not items:
            return []

        for item in items:
            self._repo.save_item(item)
            logger.info(f"Added '{item.term}' ({item.id})")

        count = len(items)
        progress = economy.record_study(
            self._repo.load_progress(), count, count * GENERATION_XP_PER_WORD, self._clock.today()
        )
        self._repo.save_progress(progress)
        return items

    def mode_for(self, item: VocabularyItem) -> StudyMode:
        return choose_mode(item, self.override, self._rng)

    def preview(self, item_id: str) -> IntervalPreview:
        return preview_intervals(self.get_item(item_id))

    # ---------- Grading ----------

    def submit(self, item_id: str, grade: Grade) -> ReviewOutcome:
        """
        Grade an item, persist it, and record the review in the session
        ledger and the learner's daily progress.
        """
        grade = Grade(grade)
        item = self.get_item(item_id)
        updated = apply_grade(item, grade, self._clock.now())
        self._repo.save_item(updated)

        self.ledger.record(updated.id, updated.term, grade)

        xp = xp_for_grade(grade)
        progress = economy.record_study(self._repo.load_progress(), 1, xp, self._clock.today())
        self._repo.save_progress(progress)

        logger.info(
            f"'{updated.term}' graded {grade.value}; next review "
            f"{updated.memory.next_review_at.isoformat()} (+{xp} XP)"
        )
        return ReviewOutcome(
            item=updated,
            grade=grade,
            xp_gained=xp,
            progress=progress,
            session_progress=self.ledger.progress_percent(),
        )

    def submit_pronunciation(
        self, item_id: str, transcript: str | None
    ) -> tuple[PronunciationResult, ReviewOutcome]:
        """Score a speaking attempt against the item's term and grade it accordingly."""
        item = self.get_item(item_id)
        result = evaluate(item.term, transcript)
        logger.debug(f"Pronunciation of '{item.term}' scored {result.score}")
        return result, self.submit(item_id, result.grade)

    # ---------- Economy ----------

    def progress(self) -> DailyProgress:
        return self._repo.load_progress()

    def award_xp(self, amount: int) -> DailyProgress:
        progress = economy.award_xp(self._repo.load_progress(), amount, self._clock.today())
        self._repo.save_progress(progress)
        return progress

    def complete_story(self) -> DailyProgress:
        """Reward a finished reading story with STORY_XP_REWARD."""
        return self.award_xp(STORY_XP_REWARD)

    def buy_streak_freeze(self) -> DailyProgress:
        progress = economy.buy_streak_freeze(self._repo.load_progress())
        self._repo.save_progress(progress)
        return progress
