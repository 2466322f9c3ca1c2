"""Tests for CLI commands: help, library, review, study session, progress and config."""

import json
import random
from datetime import date, timedelta
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from lexiflow.application.study_service import StudyService
from lexiflow.domain.models import DailyProgress, StudyMode
from lexiflow.interface.cli import app

runner = CliRunner()


@pytest.fixture
def service(mock_home, repo, clock):
    svc = StudyService(repo, clock, rng=random.Random(0))
    with patch("lexiflow.interface.cli.build_service", return_value=svc):
        yield svc


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "lexiflow: Adaptive spaced-repetition vocabulary trainer" in result.stdout
    assert "study" in result.stdout
    assert "buy-freeze" in result.stdout


# --- Library ---


def test_add_command(service, repo):
    result = runner.invoke(app, ["add", "candid", "--translation", "samimi", "--pos", "adjective"])

    assert result.exit_code == 0
    assert "Added 'candid'" in result.stdout
    (item,) = repo.list_items()
    assert item.translation == "samimi"
    assert item.part_of_speech == "adjective"
    assert "+10 XP  Today: 1/10 words" in result.stdout
    assert repo.load_progress().xp == 10


def test_due_and_weak(service, repo, make_item):
    repo.save_item(make_item("a", term="candid", due_in=timedelta(hours=-3)))
    repo.save_item(make_item("b", term="brisk", ease=1.7, streak=2, due_in=timedelta(days=1)))

    result = runner.invoke(app, ["due"])
    assert result.exit_code == 0
    assert "Due items: 1" in result.stdout
    assert "candid" in result.stdout
    assert "3h ago" in result.stdout

    result = runner.invoke(app, ["weak"])
    assert result.exit_code == 0
    assert "Weak items: 1" in result.stdout
    assert "brisk" in result.stdout


def test_due_when_empty(service):
    result = runner.invoke(app, ["due"])
    assert result.exit_code == 0
    assert "Nothing due" in result.stdout


def test_library_filter(service, repo, make_item):
    repo.save_item(make_item("a", term="candid", streak=6))
    repo.save_item(make_item("b", term="brisk", streak=0))

    result = runner.invoke(app, ["library", "--status", "mastered"])

    assert result.exit_code == 0
    assert "Mastered: 50%" in result.stdout
    assert "candid" in result.stdout
    assert "brisk" not in result.stdout


def test_library_unknown_status(service):
    result = runner.invoke(app, ["library", "--status", "forgotten"])
    assert result.exit_code == 2


# --- Review ---


def test_preview_command(service, repo, make_item):
    repo.save_item(make_item("a", interval=10, ease=2.5, streak=3))

    result = runner.invoke(app, ["preview", "a"])

    assert result.exit_code == 0
    assert "hard   12 days" in result.stdout
    assert "good   25 days" in result.stdout


def test_preview_unknown_item(service):
    result = runner.invoke(app, ["preview", "nope"])
    assert result.exit_code == 1
    assert "No vocabulary item with id 'nope'" in result.output


def test_mode_command(service, repo, make_item):
    repo.save_item(make_item("a", ease=2.5, streak=3))

    result = runner.invoke(app, ["mode", "a"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "context"


def test_grade_command(service, repo, make_item):
    repo.save_item(make_item("a", term="candid"))

    result = runner.invoke(app, ["grade", "a", "easy"])

    assert result.exit_code == 0
    assert "'candid' -> easy" in result.stdout
    assert "(+30 XP)" in result.stdout
    assert repo.get_item("a").memory.interval_days == 4
    assert repo.load_progress().xp == 30


def test_grade_rejects_unknown_grade(service, repo, make_item):
    repo.save_item(make_item("a"))
    result = runner.invoke(app, ["grade", "a", "perfect"])
    assert result.exit_code == 2


def test_score_command():
    result = runner.invoke(app, ["score", "resilient", "resiliant"])
    assert result.exit_code == 0
    assert "score=89 display=100 pass grade=good" in result.stdout


# --- Study session ---


def test_study_session(service, repo, make_item):
    repo.save_item(make_item("a", term="candid", translation="samimi", due_in=timedelta(hours=-1)))
    repo.save_item(make_item("b", term="brisk", due_in=timedelta(minutes=-5)))

    result = runner.invoke(app, ["study"], input="\ngood\n\nagain\n")

    assert result.exit_code == 0, result.output
    assert "Session: 2 items" in result.stdout
    assert "[meaning] candid" in result.stdout
    assert "samimi" in result.stdout
    assert "Progress: 100%" in result.stdout
    assert "Reviewed 2: 1 correct, 1 again (50% accuracy)" in result.stdout
    assert repo.get_item("a").memory.streak == 1
    assert repo.get_item("b").memory.interval_days == 0


def test_study_reprompts_on_bad_grade(service, repo, make_item):
    repo.save_item(make_item("a", term="candid"))

    result = runner.invoke(app, ["study"], input="\nmaybe\nhard\n")

    assert result.exit_code == 0, result.output
    assert "Please answer again, hard, good or easy." in result.stdout
    assert repo.get_item("a").memory.interval_days == 0.5


def test_study_speaking_mode(service, repo, make_item):
    repo.save_item(make_item("a", term="resilient"))
    service.override = StudyMode.SPEAKING

    result = runner.invoke(app, ["study"], input="resilient\n")

    assert result.exit_code == 0, result.output
    assert "[speaking] resilient" in result.stdout
    assert "Pronunciation: 100%" in result.stdout
    assert repo.get_item("a").memory.streak == 1


def test_study_nothing_to_review(service):
    result = runner.invoke(app, ["study"])
    assert result.exit_code == 0
    assert "Nothing to review right now." in result.stdout


def test_study_limit(service, repo, make_item):
    for n in range(3):
        repo.save_item(make_item(f"w{n}", term=f"word{n}"))

    result = runner.invoke(app, ["study", "--limit", "1"], input="\ngood\n")

    assert result.exit_code == 0, result.output
    assert "Reviewed 1:" in result.stdout


# --- Progress ---


def test_progress_command(service, repo):
    repo.save_progress(
        DailyProgress(words_studied_today=5, last_study_date=date(2026, 10, 19), streak=3, xp=40)
    )

    result = runner.invoke(app, ["progress"])

    assert result.exit_code == 0
    assert "Streak: 3 days" in result.stdout
    assert "XP: 40" in result.stdout
    assert "Today: 5/10 words (50%)" in result.stdout


def test_award_command(service, repo):
    result = runner.invoke(app, ["award", "50"])
    assert result.exit_code == 0
    assert "XP: 50" in result.stdout
    assert repo.load_progress().streak == 1


def test_story_command(service, repo):
    result = runner.invoke(app, ["story"])

    assert result.exit_code == 0
    assert "+50 XP  XP: 50  Streak: 1" in result.stdout
    assert repo.load_progress().xp == 50


def test_buy_freeze_insufficient(service, repo):
    repo.save_progress(DailyProgress(xp=120))

    result = runner.invoke(app, ["buy-freeze"])

    assert result.exit_code == 1
    assert "Not enough XP" in result.output
    assert repo.load_progress().xp == 120


def test_buy_freeze(service, repo):
    repo.save_progress(DailyProgress(xp=320))

    result = runner.invoke(app, ["buy-freeze"])

    assert result.exit_code == 0
    assert "Freezes: 1  XP: 120" in result.stdout


# --- Config ---


def test_config_show(mock_home, monkeypatch):
    monkeypatch.setenv("LEXIFLOW_SEED", "11")

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["seed"] == 11
    assert data["default_mode"] == "auto"
    assert data["library_path"].endswith("library.yaml")


def test_library_option_reaches_config(mock_home, tmp_path):
    path = tmp_path / "custom.yaml"
    with patch("lexiflow.interface.cli.build_service") as mock_build:
        runner.invoke(app, ["--library", str(path), "due"])

    config = mock_build.call_args.args[0]
    assert config.library_path == path
