"""
Queue builder for study sessions.

Builds ordered review queues by:
1. Selecting due items, earliest-overdue first
2. Falling back to weak items (low ease, at least one success), weakest first
3. Picking the head of whichever queue is non-empty

Queues are derived from the full item set on every call; nothing is cached.
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Literal

from lexiflow.domain.constants import MASTERED_STREAK, WEAK_EASE_THRESHOLD, WEAK_QUEUE_LIMIT
from lexiflow.domain.models import VocabularyItem

logger = logging.getLogger(__name__)

LibraryStatus = Literal["all", "new", "learning", "mastered"]


def due_queue(items: Iterable[VocabularyItem], now: datetime) -> list[VocabularyItem]:
    """
    Return items whose next review time has passed, earliest first.

    Ties are broken by item id so the order is deterministic.
    """
    due = [item for item in items if item.memory.is_due(now)]
    due.sort(key=lambda item: (item.memory.next_review_at, item.id))
    return due


def is_weak(item: VocabularyItem) -> bool:
    """An item is weak if it has been recalled before but its ease stays low."""
    return item.memory.ease_factor < WEAK_EASE_THRESHOLD and item.memory.streak > 0


def weak_queue(
    items: Iterable[VocabularyItem],
    limit: int = WEAK_QUEUE_LIMIT,
    exclude: Iterable[str] = (),
) -> list[VocabularyItem]:
    """
    Return the weakest retained items, lowest ease first, capped at `limit`.

    Args:
        items: The learner's library.
        limit: Maximum queue length (default: 10).
        exclude: Item ids to leave out, e.g. items already practiced this session.
    """
    skip = set(exclude)
    weak = [item for item in items if is_weak(item) and item.id not in skip]
    weak.sort(key=lambda item: (item.memory.ease_factor, item.id))
    return weak[:limit]


def next_item(
    items: Iterable[VocabularyItem],
    now: datetime,
    exclude: Iterable[str] = (),
) -> VocabularyItem | None:
    """
    Pick the next item to present: due items first, weak items as fallback.

    `exclude` only applies to the weak fallback; a due item is always eligible.
    """
    items = list(items)
    due = due_queue(items, now)
    if due:
        return due[0]

    weak = weak_queue(items, exclude=exclude)
    if weak:
        logger.debug(f"No due items; falling back to weak item {weak[0].id}")
        return weak[0]
    return None


# ---------- Library views ----------


def item_status(item: VocabularyItem) -> LibraryStatus:
    streak = item.memory.streak
    if streak == 0:
        return "new"
    if streak <= MASTERED_STREAK:
        return "learning"
    return "mastered"


def filter_library(
    items: Iterable[VocabularyItem], status: LibraryStatus = "all"
) -> list[VocabularyItem]:
    """Filter the library by learning status: new, learning, mastered or all."""
    if status == "all":
        return list(items)
    return [item for item in items if item_status(item) == status]


def mastery_percent(items: Iterable[VocabularyItem]) -> int:
    """Share of mastered items as a rounded percentage (0 for an empty library)."""
    items = list(items)
    if not items:
        return 0
    mastered = sum(1 for item in items if item_status(item) == "mastered")
    return round(mastered / len(items) * 100)
