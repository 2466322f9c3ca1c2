# Application Package
from .mode_selector import choose_mode
from .progress import award_xp, buy_streak_freeze, daily_goal_percent, record_study
from .pronunciation import PronunciationResult, evaluate, score
from .queue_builder import due_queue, filter_library, mastery_percent, next_item, weak_queue
from .scheduler import apply_grade, grade, normalize_memory, preview_intervals, xp_for_grade
from .session import SessionLedger
from .study_service import ReviewOutcome, StudyService

__all__ = [
    "PronunciationResult",
    "ReviewOutcome",
    "SessionLedger",
    "StudyService",
    "apply_grade",
    "award_xp",
    "buy_streak_freeze",
    "choose_mode",
    "daily_goal_percent",
    "due_queue",
    "evaluate",
    "filter_library",
    "grade",
    "mastery_percent",
    "next_item",
    "normalize_memory",
    "preview_intervals",
    "record_study",
    "score",
    "weak_queue",
    "xp_for_grade",
]
