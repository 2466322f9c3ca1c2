"""
Daily progress and streak economy.

Progress is an immutable value: every operation returns a new DailyProgress
and leaves persistence and ordering to the caller. A "day" is whatever
calendar date the caller passes in; this module never reads a clock.
"""

import logging
from dataclasses import replace
from datetime import date, timedelta

from lexiflow.domain.constants import STREAK_FREEZE_COST
from lexiflow.domain.errors import InsufficientFundsError
from lexiflow.domain.models import DailyProgress

logger = logging.getLogger(__name__)


def _rolled_streak(progress: DailyProgress, today: date) -> tuple[int, int]:
    """Return (streak, streak_freeze) after crossing into `today`."""
    yesterday = today - timedelta(days=1)

    if progress.last_study_date == yesterday:
        logger.info(f"Streak extended to {progress.streak + 1} days")
        return progress.streak + 1, progress.streak_freeze

    if progress.streak_freeze > 0:
        logger.info(
            f"Missed day(s) since {progress.last_study_date}; "
            f"streak freeze used ({progress.streak_freeze - 1} left)"
        )
        return progress.streak, progress.streak_freeze - 1

    if progress.streak > 0:
        logger.info(f"Streak of {progress.streak} days broken; restarting at 1")
    return 1, progress.streak_freeze


def record_study(
    progress: DailyProgress,
    word_count: int,
    xp_gained: int,
    today: date,
) -> DailyProgress:
    """
    Record study activity for `today` and return the updated progress.

    Steps:
    1. A new study day starts when `last_study_date` differs from `today`.
    2. On a new day the streak grows if the last study day was yesterday;
       otherwise a streak freeze is consumed if available, else it restarts at 1.
    3. The daily word count is replaced on a new day, accumulated otherwise.
    4. XP is added, the study date updated and the longest streak kept.
    """
    is_new_day = progress.last_study_date != today

    streak, streak_freeze = progress.streak, progress.streak_freeze
    if is_new_day:
        streak, streak_freeze = _rolled_streak(progress, today)

    words_today = word_count if is_new_day else progress.words_studied_today + word_count

    return replace(
        progress,
        words_studied_today=words_today,
        last_study_date=today,
        streak=streak,
        streak_freeze=streak_freeze,
        xp=progress.xp + xp_gained,
        longest_streak=max(progress.longest_streak, streak),
    )


def award_xp(progress: DailyProgress, amount: int, today: date) -> DailyProgress:
    """
    Grant XP for an activity that is not an item review (chat, games, stories).

    Runs the same day-rollover logic as a review, so it can extend or reset
    the streak on its own.
    """
    if amount < 0:
        raise ValueError(f"XP awards must be non-negative, got {amount}")
    return record_study(progress, 0, amount, today)


def buy_streak_freeze(progress: DailyProgress) -> DailyProgress:
    """Spend XP on one streak freeze. Raises InsufficientFundsError if unaffordable."""
    if progress.xp < STREAK_FREEZE_COST:
        raise InsufficientFundsError(required=STREAK_FREEZE_COST, available=progress.xp)

    logger.info(f"Bought a streak freeze for {STREAK_FREEZE_COST} XP")
    return replace(
        progress,
        xp=progress.xp - STREAK_FREEZE_COST,
        streak_freeze=progress.streak_freeze + 1,
    )


def daily_goal_percent(progress: DailyProgress, today: date | None = None) -> float:
    """
    Progress toward the daily word target, capped at 100.

    When `today` is given and differs from the last study day, nothing has
    been studied yet today.
    """
    if today is not None and progress.last_study_date != today:
        return 0
    target = max(1, progress.daily_target)
    return min(100, progress.words_studied_today / target * 100)


def is_daily_goal_met(progress: DailyProgress, today: date | None = None) -> bool:
    return daily_goal_percent(progress, today) >= 100
