"""
Pronunciation matching for the speaking mode.

Scores a transcript against the target term with Levenshtein distance and
turns that continuous score into a grade.
"""

import re
import unicodedata
from dataclasses import dataclass

from lexiflow.domain.constants import PRONUNCIATION_HARD_SCORE, PRONUNCIATION_PASS_SCORE
from lexiflow.domain.models import Grade

# ASCII symbols that are not Unicode punctuation but are still ignored
SYMBOL_RE = re.compile(r"[$%^=`~]")


@dataclass(frozen=True)
class PronunciationResult:
    score: int
    display_score: int
    passed: bool
    grade: Grade


def normalize_text(text: str | None) -> str:
    """Lowercase, drop punctuation (any script) and trim surrounding whitespace."""
    if not text:
        return ""
    text = SYMBOL_RE.sub("", text.lower())
    return "".join(ch for ch in text if not unicodedata.category(ch).startswith("P")).strip()


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings (insert, delete, substitute)."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def score(target: str, spoken: str | None) -> int:
    """
    Similarity between the target and a spoken attempt, 0..100.

    A missing transcript is treated as the empty string and scores 0.
    """
    clean_target = normalize_text(target)
    clean_spoken = normalize_text(spoken)

    if clean_target == clean_spoken:
        return 100
    if not clean_spoken:
        return 0

    distance = levenshtein(clean_target, clean_spoken)
    max_len = max(len(clean_target), len(clean_spoken))
    return round(max(0.0, (max_len - distance) / max_len) * 100)


def grade_for_score(value: int) -> Grade:
    if value >= PRONUNCIATION_PASS_SCORE:
        return Grade.GOOD
    if value >= PRONUNCIATION_HARD_SCORE:
        return Grade.HARD
    return Grade.AGAIN


def evaluate(target: str, spoken: str | None) -> PronunciationResult:
    """Score an attempt and map it to a grade. Passing scores display as 100."""
    value = score(target, spoken)
    passed = value >= PRONUNCIATION_PASS_SCORE
    return PronunciationResult(
        score=value,
        display_score=100 if passed else value,
        passed=passed,
        grade=grade_for_score(value),
    )
