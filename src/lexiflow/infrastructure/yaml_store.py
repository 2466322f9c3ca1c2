"""
YAML file repository.

The whole library lives in one YAML document:

    progress:
      xp: 120
      streak: 3
      last_study_date: '2026-10-18'
      ...
    items:
      - id: word_01J...
        term: resilient
        translation: dayanikli
        srs:
          next_review: '2026-10-19T08:00:00+00:00'
          interval: 1.0
          ease_factor: 2.5
          streak: 1
        date_added: '2026-10-12T08:00:00+00:00'

Records written by other tools may be incomplete; they are repaired on load
rather than rejected.
"""

import logging
import os
import tempfile
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from lexiflow.application.scheduler import coerce_datetime, normalize_memory
from lexiflow.domain.constants import DEFAULT_DAILY_TARGET, DEFAULT_LEAGUE
from lexiflow.domain.errors import LibraryFileError
from lexiflow.domain.models import DailyProgress, MemoryState, VocabularyItem
from lexiflow.domain.ports import Clock, LibraryRepository
from lexiflow.infrastructure.clock import SystemClock

logger = logging.getLogger(__name__)

# Stored key -> model attribute. camelCase keys come from records exported by
# the mobile app.
CONTENT_FIELDS = {
    "translation": "translation",
    "definition": "definition",
    "example_sentence": "example_sentence",
    "exampleSentence": "example_sentence",
    "pronunciation": "pronunciation",
    "phonetic_spelling": "phonetic_spelling",
    "phoneticSpelling": "phonetic_spelling",
    "part_of_speech": "part_of_speech",
    "type": "part_of_speech",
}


def _as_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            logger.warning(f"Ignoring unreadable last_study_date: {value!r}")
    return None


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        result = int(value)
    except (TypeError, ValueError):
        return default
    return result if result >= 0 else default


def item_from_record(record: dict[str, Any], now: datetime) -> VocabularyItem | None:
    """Build an item from a stored mapping, or None if it has no id or term."""
    item_id = record.get("id")
    term = record.get("term")
    if not item_id or not term:
        logger.warning(f"Skipping library record without id or term: {record!r}")
        return None

    content = {}
    for key, attr in CONTENT_FIELDS.items():
        value = record.get(key)
        if value is not None and attr not in content:
            content[attr] = str(value)

    mnemonic = record.get("mnemonic")
    return VocabularyItem(
        id=str(item_id),
        term=str(term),
        memory=normalize_memory(record.get("srs"), now),
        date_added=coerce_datetime(record.get("date_added", record.get("dateAdded"))) or now,
        mnemonic=str(mnemonic) if mnemonic is not None else None,
        **content,
    )


def item_to_record(item: VocabularyItem) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": item.id,
        "term": item.term,
        "translation": item.translation,
        "definition": item.definition,
        "example_sentence": item.example_sentence,
        "pronunciation": item.pronunciation,
        "phonetic_spelling": item.phonetic_spelling,
        "part_of_speech": item.part_of_speech,
    }
    if item.mnemonic is not None:
        record["mnemonic"] = item.mnemonic
    record["srs"] = memory_to_record(item.memory)
    record["date_added"] = item.date_added.isoformat()
    return record


def memory_to_record(memory: MemoryState) -> dict[str, Any]:
    return {
        "next_review": memory.next_review_at.isoformat(),
        "interval": float(memory.interval_days),
        "ease_factor": float(memory.ease_factor),
        "streak": memory.streak,
    }


def progress_from_record(record: Any) -> DailyProgress:
    if not isinstance(record, dict):
        return DailyProgress()
    return DailyProgress(
        words_studied_today=_as_int(record.get("words_studied_today"), 0),
        last_study_date=_as_date(record.get("last_study_date")),
        streak=_as_int(record.get("streak"), 0),
        longest_streak=_as_int(record.get("longest_streak"), 0),
        streak_freeze=_as_int(record.get("streak_freeze"), 0),
        xp=_as_int(record.get("xp"), 0),
        daily_target=_as_int(record.get("daily_target"), DEFAULT_DAILY_TARGET) or 1,
        league=str(record.get("league") or DEFAULT_LEAGUE),
    )


def progress_to_record(progress: DailyProgress) -> dict[str, Any]:
    return {
        "words_studied_today": progress.words_studied_today,
        "last_study_date": (
            progress.last_study_date.isoformat() if progress.last_study_date else None
        ),
        "streak": progress.streak,
        "longest_streak": progress.longest_streak,
        "streak_freeze": progress.streak_freeze,
        "xp": progress.xp,
        "daily_target": progress.daily_target,
        "league": progress.league,
    }


class YamlLibraryRepository(LibraryRepository):
    """
    LibraryRepository backed by a single YAML file.

    The file is read once on first access and rewritten in full on every save.
    A missing file is an empty library.

    When `daily_target` is given it replaces the stored goal on load, so a
    changed configuration applies to existing libraries too.
    """

    def __init__(
        self,
        path: Path,
        clock: Clock | None = None,
        daily_target: int | None = None,
    ):
        self.path = Path(path)
        self._clock = clock or SystemClock()
        self._daily_target = daily_target
        self._items: dict[str, VocabularyItem] | None = None
        self._progress: DailyProgress | None = None

    def _load(self) -> None:
        if self._items is not None:
            return

        self._items = {}
        if not self.path.exists():
            logger.debug(f"No library at {self.path}; starting empty")
            self._progress = self._with_target(DailyProgress())
            return

        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            self._items = None
            raise LibraryFileError(f"Could not parse library file {self.path}: {e}") from e

        if not isinstance(data, dict):
            self._items = None
            raise LibraryFileError(f"Library file {self.path} must contain a mapping")

        now = self._clock.now()
        records = data.get("items") or []
        if not isinstance(records, list):
            logger.warning(f"'items' in {self.path} is not a list; ignoring it")
            records = []

        for record in records:
            if not isinstance(record, dict):
                continue
            item = item_from_record(record, now)
            if item is not None:
                self._items[item.id] = item

        self._progress = self._with_target(progress_from_record(data.get("progress")))
        logger.debug(f"Loaded {len(self._items)} items from {self.path}")

    def _with_target(self, progress: DailyProgress) -> DailyProgress:
        if self._daily_target is None or self._daily_target == progress.daily_target:
            return progress
        return replace(progress, daily_target=max(1, self._daily_target))

    def _flush(self) -> None:
        assert self._items is not None and self._progress is not None
        document = {
            "progress": progress_to_record(self._progress),
            "items": [item_to_record(item) for item in self._items.values()],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write a sibling file and swap it in, so an interrupted save never
        # leaves a truncated library behind.
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(document, f, sort_keys=False, allow_unicode=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug(f"Saved {len(self._items)} items to {self.path}")

    def list_items(self) -> list[VocabularyItem]:
        self._load()
        assert self._items is not None
        return list(self._items.values())

    def get_item(self, item_id: str) -> VocabularyItem | None:
        self._load()
        assert self._items is not None
        return self._items.get(item_id)

    def save_item(self, item: VocabularyItem) -> None:
        self._load()
        assert self._items is not None
        self._items[item.id] = item
        self._flush()

    def load_progress(self) -> DailyProgress:
        self._load()
        assert self._progress is not None
        return self._progress

    def save_progress(self, progress: DailyProgress) -> None:
        self._load()
        self._progress = progress
        self._flush()
