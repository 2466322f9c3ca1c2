"""
Adaptive study-mode selection.

Items progress from recognition to production as their streak grows:
meaning -> translation -> context -> writing -> speaking. Items with a low
ease factor stay on recall and writing instead of escalating.
"""

import random

from lexiflow.domain.constants import (
    HARD_ITEM_EASE,
    HARD_ITEM_WRITING_STREAK,
    SPEAKING_ROLL_THRESHOLD,
)
from lexiflow.domain.models import MemoryState, StudyMode, VocabularyItem


_default_rng = random.Random()


def choose_mode(
    item: VocabularyItem | MemoryState,
    override: StudyMode = StudyMode.AUTO,
    rng: random.Random | None = None,
) -> StudyMode:
    """
    Choose how to present an item.

    Args:
        item: The item (or its memory state) about to be reviewed.
        override: A manual mode choice; anything but AUTO is returned as-is.
        rng: Random source for the writing/speaking mix on long streaks.

    Returns:
        A concrete StudyMode, never AUTO.
    """
    override = StudyMode(override)
    if override is not StudyMode.AUTO:
        return override

    memory = item.memory if isinstance(item, VocabularyItem) else item
    streak = memory.streak

    if memory.ease_factor < HARD_ITEM_EASE:
        return StudyMode.WRITING if streak > HARD_ITEM_WRITING_STREAK else StudyMode.MEANING

    if streak <= 1:
        return StudyMode.MEANING
    if streak == 2:
        return StudyMode.TRANSLATION
    if streak <= 4:
        return StudyMode.CONTEXT
    if streak <= 6:
        return StudyMode.WRITING

    roll = (rng or _default_rng).random()
    return StudyMode.SPEAKING if roll > SPEAKING_ROLL_THRESHOLD else StudyMode.WRITING
