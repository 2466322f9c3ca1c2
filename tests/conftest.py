from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from lexiflow.domain.models import MemoryState, VocabularyItem
from lexiflow.infrastructure.clock import FixedClock
from lexiflow.infrastructure.yaml_store import YamlLibraryRepository

NOW = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def make_item():
    """Factory for items with a given memory state, due now unless told otherwise."""

    def _make(
        item_id: str = "w1",
        term: str = "resilient",
        interval: float = 0.0,
        ease: float = 2.5,
        streak: int = 0,
        due_in: timedelta = timedelta(0),
        **content,
    ) -> VocabularyItem:
        memory = MemoryState(
            next_review_at=NOW + due_in,
            interval_days=interval,
            ease_factor=ease,
            streak=streak,
        )
        item = VocabularyItem(id=item_id, term=term, memory=memory, date_added=NOW)
        return replace(item, **content) if content else item

    return _make


@pytest.fixture
def library_path(tmp_path):
    return tmp_path / "library.yaml"


@pytest.fixture
def repo(library_path, clock):
    return YamlLibraryRepository(library_path, clock)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config
    monkeypatch.setenv("HOME", str(home))
    for key in ("LEXIFLOW_LIBRARY_PATH", "LEXIFLOW_SEED", "LEXIFLOW_DEFAULT_MODE"):
        monkeypatch.delenv(key, raising=False)
    return home
