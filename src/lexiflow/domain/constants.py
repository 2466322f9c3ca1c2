"""Centralized constants for the lexiflow core.

All magic numbers of the scheduler, the queues and the XP economy live here
so every layer imports from a single source of truth.
"""

from datetime import timedelta

# ---------- Memory defaults ----------
DEFAULT_EASE = 2.5
MIN_EASE = 1.3
DEFAULT_INTERVAL = 0.0
DEFAULT_STREAK = 0

# ---------- Grading ----------
RELEARN_DELAY = timedelta(minutes=1)
AGAIN_EASE_PENALTY = 0.2
HARD_EASE_PENALTY = 0.15
HARD_INTERVAL_MULTIPLIER = 1.2
HARD_MIN_INTERVAL = 0.5  # days
GOOD_FIRST_INTERVAL = 1.0  # days
EASY_FIRST_INTERVAL = 4.0  # days
EASY_BONUS = 1.3
EASY_EASE_BONUS = 0.15

# ---------- Interval preview ----------
PREVIEW_EASY_BONUS = 1.5
NEW_ITEM_PREVIEW = {
    "again": "1 minute",
    "hard": "6 minutes",
    "good": "10 minutes",
    "easy": "1 day",
}
DAYS_PER_MONTH = 30

# ---------- Queues ----------
WEAK_EASE_THRESHOLD = 2.3
WEAK_QUEUE_LIMIT = 10

# ---------- Library views ----------
MASTERED_STREAK = 4  # streak strictly above this counts as mastered

# ---------- Mode selection ----------
HARD_ITEM_EASE = 2.0
HARD_ITEM_WRITING_STREAK = 4
SPEAKING_ROLL_THRESHOLD = 0.7  # roll above this picks speaking (p = 0.3)

# ---------- Pronunciation ----------
PRONUNCIATION_PASS_SCORE = 85
PRONUNCIATION_HARD_SCORE = 50

# ---------- XP economy ----------
XP_PER_GRADE = {
    "again": 5,
    "hard": 10,
    "good": 20,
    "easy": 30,
}
GENERATION_XP_PER_WORD = 10  # adding words counts as study for the day
STORY_XP_REWARD = 50
STREAK_FREEZE_COST = 200
DEFAULT_DAILY_TARGET = 10
DEFAULT_LEAGUE = "Bronze"
