"""
Session ledger: progress through a single study session.

The ledger lives only as long as the session. Grades applied to items are
durable on their own; discarding the ledger loses nothing but the summary.
"""

import logging
from collections import Counter
from datetime import datetime

from lexiflow.domain.models import Grade, SessionResult, SessionSummary

logger = logging.getLogger(__name__)


class SessionLedger:
    """
    Tracks counters and per-item results for one study session.

    Completion is queue-driven: the session is over only when nothing is left
    to review, even if items became due after it started.
    """

    def __init__(self) -> None:
        self.initial_queue_size = 0
        self.completed_count = 0
        self.results: list[SessionResult] = []
        self.started_at: datetime | None = None

    def start(self, due_count: int, weak_count: int, started_at: datetime | None = None) -> None:
        """
        Reset the ledger for a new session.

        The due and weak queues are alternatives (weak items only surface once
        nothing is due), so the progress denominator is their max, not their sum.
        """
        self.initial_queue_size = max(due_count, weak_count)
        self.completed_count = 0
        self.results = []
        self.started_at = started_at
        logger.debug(
            f"Session started: {due_count} due, {weak_count} weak, "
            f"{self.initial_queue_size} planned"
        )

    def record(self, item_id: str, term: str, grade: Grade) -> SessionResult:
        grade = Grade(grade)
        result = SessionResult(item_id=item_id, term=term, is_correct=grade.is_correct, grade=grade)
        self.results.append(result)
        self.completed_count += 1
        return result

    def progress_percent(self) -> float:
        if self.initial_queue_size == 0:
            return 0
        return min(100, self.completed_count / self.initial_queue_size * 100)

    def is_complete(self, due_count: int, weak_count: int) -> bool:
        return due_count == 0 and weak_count == 0

    @property
    def reviewed_ids(self) -> list[str]:
        """Ids of items graded this session, first review order, no duplicates."""
        return list(dict.fromkeys(result.item_id for result in self.results))

    def summary(self) -> SessionSummary:
        correct = sum(1 for result in self.results if result.is_correct)
        counts = Counter(result.grade for result in self.results)
        accuracy = round(correct / self.completed_count * 100) if self.completed_count else 0
        return SessionSummary(
            completed=self.completed_count,
            correct=correct,
            incorrect=self.completed_count - correct,
            accuracy=accuracy,
            grade_counts={g: counts.get(g, 0) for g in Grade},
            reviewed_ids=self.reviewed_ids,
        )
