"""Tests for the YAML library repository."""

from dataclasses import replace
from datetime import date, timedelta
from unittest.mock import patch

import pytest
import yaml

from lexiflow.application.scheduler import FAR_FUTURE
from lexiflow.domain.errors import LibraryFileError
from lexiflow.domain.models import DailyProgress
from lexiflow.infrastructure.yaml_store import YamlLibraryRepository


def test_missing_file_is_empty_library(repo, library_path):
    assert repo.list_items() == []
    assert repo.load_progress() == DailyProgress()
    assert not library_path.exists()


def test_save_and_reload(repo, library_path, clock, make_item):
    item = make_item("w1", interval=3.25, ease=2.65, streak=2, due_in=timedelta(days=3))
    repo.save_item(item)
    repo.save_progress(DailyProgress(xp=90, streak=3, last_study_date=date(2026, 10, 19)))

    reloaded = YamlLibraryRepository(library_path, clock)

    assert reloaded.get_item("w1") == item
    progress = reloaded.load_progress()
    assert progress.xp == 90
    assert progress.streak == 3
    assert progress.last_study_date == date(2026, 10, 19)


def test_save_replaces_item_by_id(repo, make_item):
    repo.save_item(make_item("w1", streak=0))
    repo.save_item(make_item("w1", streak=4))

    items = repo.list_items()
    assert len(items) == 1
    assert items[0].memory.streak == 4


def test_file_layout(repo, library_path, make_item):
    repo.save_item(make_item("w1", term="candid", translation="samimi"))

    data = yaml.safe_load(library_path.read_text(encoding="utf-8"))

    assert set(data) == {"progress", "items"}
    record = data["items"][0]
    assert record["term"] == "candid"
    assert record["translation"] == "samimi"
    assert set(record["srs"]) == {"next_review", "interval", "ease_factor", "streak"}


def test_malformed_records_are_repaired(library_path, clock, now):
    library_path.write_text(
        """
progress:
  xp: -5
  streak: abc
  last_study_date: 2026-10-18
items:
  - id: w1
    term: candid
  - id: w2
    term: brisk
    exampleSentence: A brisk walk.
    type: adjective
    srs:
      interval: -2
      easeFactor: 1.1
      streak: 3
      nextReview: 1792400400000
  - term: no id here
  - just a string
""",
        encoding="utf-8",
    )

    repo = YamlLibraryRepository(library_path, clock)
    items = {item.id: item for item in repo.list_items()}

    assert set(items) == {"w1", "w2"}
    assert items["w1"].memory.next_review_at == now
    assert items["w1"].memory.ease_factor == 2.5

    brisk = items["w2"]
    assert brisk.example_sentence == "A brisk walk."
    assert brisk.part_of_speech == "adjective"
    assert brisk.memory.interval_days == 0
    assert brisk.memory.ease_factor == 1.3
    assert brisk.memory.streak == 3

    progress = repo.load_progress()
    assert progress.xp == 0
    assert progress.streak == 0
    assert progress.last_study_date == date(2026, 10, 18)


def test_unparseable_file(library_path, clock):
    library_path.write_text("items: [unclosed", encoding="utf-8")

    with pytest.raises(LibraryFileError):
        YamlLibraryRepository(library_path, clock).list_items()


def test_non_mapping_document(library_path, clock):
    library_path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(LibraryFileError):
        YamlLibraryRepository(library_path, clock).load_progress()


def test_daily_target_for_new_library(library_path, clock):
    repo = YamlLibraryRepository(library_path, clock, daily_target=25)
    assert repo.load_progress().daily_target == 25


def test_configured_daily_target_overrides_stored(repo, library_path, clock):
    repo.save_progress(DailyProgress(xp=90, daily_target=10))

    assert YamlLibraryRepository(library_path, clock).load_progress().daily_target == 10
    progress = YamlLibraryRepository(library_path, clock, daily_target=30).load_progress()
    assert progress.daily_target == 30
    assert progress.xp == 90


def test_far_future_review_round_trips(repo, library_path, clock, make_item):
    item = make_item("w1", interval=1e12, streak=20)
    item = replace(item, memory=replace(item.memory, next_review_at=FAR_FUTURE))
    repo.save_item(item)

    assert YamlLibraryRepository(library_path, clock).get_item("w1") == item


def test_save_leaves_no_temp_files(repo, library_path, make_item):
    repo.save_item(make_item("w1"))
    repo.save_item(make_item("w2"))

    assert [p.name for p in library_path.parent.iterdir()] == [library_path.name]


def test_failed_save_keeps_previous_file(repo, library_path, clock, make_item):
    repo.save_item(make_item("w1", term="candid"))
    before = library_path.read_text(encoding="utf-8")

    dump = "lexiflow.infrastructure.yaml_store.yaml.safe_dump"
    with patch(dump, side_effect=RuntimeError("disk full")), pytest.raises(RuntimeError):
        repo.save_item(make_item("w2", term="brisk"))

    assert library_path.read_text(encoding="utf-8") == before
    assert [p.name for p in library_path.parent.iterdir()] == [library_path.name]
    assert [i.id for i in YamlLibraryRepository(library_path, clock).list_items()] == ["w1"]
