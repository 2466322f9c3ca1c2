from dataclasses import FrozenInstanceError
from datetime import timedelta

import pytest

from lexiflow.domain.errors import InsufficientFundsError, LexiflowError
from lexiflow.domain.models import DailyProgress, Grade, StudyMode


def test_grade_order_and_correctness():
    assert [g.value for g in Grade] == ["again", "hard", "good", "easy"]
    assert Grade.AGAIN.is_correct is False
    assert all(g.is_correct for g in (Grade.HARD, Grade.GOOD, Grade.EASY))


def test_study_mode_values():
    assert StudyMode("context") is StudyMode.CONTEXT
    assert StudyMode.AUTO.value == "auto"


def test_memory_state_due(make_item, now):
    memory = make_item(due_in=timedelta(seconds=1)).memory
    assert not memory.is_due(now)
    assert memory.is_due(now + timedelta(seconds=1))


def test_items_are_immutable(make_item):
    item = make_item()
    with pytest.raises(FrozenInstanceError):
        item.term = "other"  # type: ignore[misc]


def test_progress_defaults():
    p = DailyProgress()
    assert p.last_study_date is None
    assert p.daily_target == 10
    assert p.league == "Bronze"


def test_insufficient_funds_is_lexiflow_error():
    err = InsufficientFundsError(required=200, available=50)
    assert isinstance(err, LexiflowError)
    assert "200" in str(err)
