"""
SM-2 style scheduler for vocabulary items.

This is a pure computation module with no I/O: every function takes the
current memory state (and the current time) and returns a new value.
"""

import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any

from lexiflow.domain.constants import (
    AGAIN_EASE_PENALTY,
    DAYS_PER_MONTH,
    DEFAULT_EASE,
    DEFAULT_INTERVAL,
    DEFAULT_STREAK,
    EASY_BONUS,
    EASY_EASE_BONUS,
    EASY_FIRST_INTERVAL,
    GOOD_FIRST_INTERVAL,
    HARD_EASE_PENALTY,
    HARD_INTERVAL_MULTIPLIER,
    HARD_MIN_INTERVAL,
    MIN_EASE,
    NEW_ITEM_PREVIEW,
    PREVIEW_EASY_BONUS,
    RELEARN_DELAY,
    XP_PER_GRADE,
)
from lexiflow.domain.models import Grade, IntervalPreview, MemoryState, VocabularyItem

logger = logging.getLogger(__name__)

# Latest representable review time; very long intervals are parked here.
FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)


def _memory_of(target: MemoryState | VocabularyItem) -> MemoryState:
    return target.memory if isinstance(target, VocabularyItem) else target


def _schedule(now: datetime, days: float) -> datetime:
    try:
        return now + timedelta(days=days)
    except OverflowError:
        logger.debug(f"Interval of {days:g} days is past the calendar; capping review time")
        return FAR_FUTURE


def grade(target: MemoryState | VocabularyItem, rating: Grade, now: datetime) -> MemoryState:
    """
    Apply a learner's grade and return the updated memory state.

    Args:
        target: The item (or its memory state) being reviewed.
        rating: The learner's response.
        now: Review time; the next review is scheduled relative to it.

    Returns:
        A new MemoryState. The input is never mutated.
    """
    memory = _memory_of(target)
    rating = Grade(rating)
    interval = memory.interval_days
    ease = memory.ease_factor
    streak = memory.streak

    if rating is Grade.AGAIN:
        # Relearning: no day-scale interval, back in the queue after a minute.
        new_state = MemoryState(
            next_review_at=now + RELEARN_DELAY,
            interval_days=0.0,
            ease_factor=max(MIN_EASE, ease - AGAIN_EASE_PENALTY),
            streak=0,
        )
    else:
        if rating is Grade.HARD:
            streak = 0
            interval = max(HARD_MIN_INTERVAL, interval * HARD_INTERVAL_MULTIPLIER)
            ease = max(MIN_EASE, ease - HARD_EASE_PENALTY)
        elif rating is Grade.GOOD:
            streak += 1
            interval = GOOD_FIRST_INTERVAL if streak == 1 else interval * ease
        else:
            streak += 1
            interval = EASY_FIRST_INTERVAL if streak == 1 else interval * ease * EASY_BONUS
            ease = ease + EASY_EASE_BONUS

        new_state = MemoryState(
            next_review_at=_schedule(now, interval),
            interval_days=max(0.0, interval),
            ease_factor=max(MIN_EASE, ease),
            streak=streak,
        )

    logger.debug(
        f"Graded {rating.value}: interval {memory.interval_days:g} -> {new_state.interval_days:g}, "
        f"ease {memory.ease_factor:g} -> {new_state.ease_factor:g}, "
        f"streak {memory.streak} -> {new_state.streak}"
    )
    return new_state


def apply_grade(item: VocabularyItem, rating: Grade, now: datetime) -> VocabularyItem:
    """Return a copy of `item` carrying the memory state produced by `grade`."""
    return replace(item, memory=grade(item, rating, now))


def format_days(days: float) -> str:
    """Format a day-scale duration, switching to months from 30 days on."""
    if days >= DAYS_PER_MONTH:
        months = max(1, round(days / DAYS_PER_MONTH))
        return "1 month" if months == 1 else f"{months} months"
    whole = max(1, round(days))
    return "1 day" if whole == 1 else f"{whole} days"


def preview_intervals(target: MemoryState | VocabularyItem) -> IntervalPreview:
    """
    Preview what each grade would schedule, for display on the answer buttons.

    New items (interval below one day) get fixed short durations because the
    formula is unstable near zero.
    """
    memory = _memory_of(target)
    if memory.is_new:
        return IntervalPreview(**NEW_ITEM_PREVIEW)

    interval = memory.interval_days
    ease = memory.ease_factor
    return IntervalPreview(
        again=NEW_ITEM_PREVIEW["again"],
        hard=format_days(interval * HARD_INTERVAL_MULTIPLIER),
        good=format_days(interval * ease),
        easy=format_days(interval * ease * PREVIEW_EASY_BONUS),
    )


def xp_for_grade(rating: Grade) -> int:
    """XP earned for reviewing an item with the given grade."""
    return XP_PER_GRADE[Grade(rating).value]


def default_memory(now: datetime) -> MemoryState:
    """Memory state of a brand-new item, due immediately."""
    return MemoryState(
        next_review_at=now,
        interval_days=DEFAULT_INTERVAL,
        ease_factor=DEFAULT_EASE,
        streak=DEFAULT_STREAK,
    )


# ---------- Normalization of stored records ----------


def _coerce_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def coerce_datetime(value: Any) -> datetime | None:
    """
    Read a stored timestamp: a datetime, an ISO-8601 string or epoch
    milliseconds. Naive values are taken as UTC. Returns None if unreadable.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        # Stored as epoch milliseconds
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def normalize_memory(raw: Any, now: datetime) -> MemoryState:
    """
    Build a valid MemoryState from a possibly malformed stored record.

    Missing blocks, missing keys, wrong types and out-of-range values are
    replaced by the defaults of a new item. Never raises.

    Accepted keys: next_review / next_review_at / nextReview, interval /
    interval_days, ease_factor / easeFactor / ease, streak.
    """
    if not isinstance(raw, dict):
        if raw is not None:
            logger.debug(f"Discarding non-mapping memory record: {raw!r}")
        return default_memory(now)

    def pick(*keys: str) -> Any:
        for key in keys:
            if key in raw:
                return raw[key]
        return None

    next_review = coerce_datetime(pick("next_review", "next_review_at", "nextReview"))
    if next_review is None:
        logger.debug("Memory record has no usable next review time; due now.")
        next_review = now

    interval = _coerce_float(pick("interval", "interval_days"))
    if interval is None or interval < 0:
        interval = DEFAULT_INTERVAL

    ease = _coerce_float(pick("ease_factor", "easeFactor", "ease"))
    if ease is None:
        ease = DEFAULT_EASE
    ease = max(MIN_EASE, ease)

    streak_raw = _coerce_float(pick("streak"))
    streak = int(streak_raw) if streak_raw is not None and streak_raw >= 0 else DEFAULT_STREAK

    return MemoryState(
        next_review_at=next_review,
        interval_days=interval,
        ease_factor=ease,
        streak=streak,
    )
