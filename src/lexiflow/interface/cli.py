"""lexiflow CLI: study sessions, queue inspection and progress commands."""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer

from lexiflow.application.config import resolve_config
from lexiflow.application.progress import daily_goal_percent
from lexiflow.application.pronunciation import evaluate
from lexiflow.application.queue_builder import (
    due_queue,
    filter_library,
    mastery_percent,
    weak_queue,
)
from lexiflow.application.scheduler import preview_intervals
from lexiflow.application.study_service import ReviewOutcome, StudyService
from lexiflow.domain.constants import GENERATION_XP_PER_WORD, STORY_XP_REWARD
from lexiflow.domain.errors import LexiflowError
from lexiflow.domain.models import Grade, StudyMode, VocabularyItem
from lexiflow.interface._common import build_service, fail, resolve_with_overrides

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="lexiflow: Adaptive spaced-repetition vocabulary trainer.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage lexiflow configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    library: Annotated[
        Path | None,
        typer.Option("--library", "-l", help="Library YAML file. Defaults to config."),
    ] = None,
):
    """Global settings for lexiflow."""
    ctx.ensure_object(dict)
    ctx.obj["library"] = library
    if verbose >= 2:
        logging.getLogger("lexiflow").setLevel(logging.DEBUG)
    elif verbose == 1:
        logging.getLogger("lexiflow").setLevel(logging.INFO)


def _service(ctx: typer.Context, mode: StudyMode | None = None) -> StudyService:
    return build_service(resolve_with_overrides(ctx, default_mode=mode))


def _format_when(moment: datetime, now: datetime) -> str:
    delta = moment - now
    minutes = int(abs(delta.total_seconds()) // 60)
    if minutes < 60:
        span = f"{minutes}m"
    elif minutes < 60 * 24:
        span = f"{minutes // 60}h"
    else:
        span = f"{minutes // (60 * 24)}d"
    return f"in {span}" if delta.total_seconds() > 0 else f"{span} ago"


def _print_items(items: list[VocabularyItem], now: datetime) -> None:
    for item in items:
        m = item.memory
        typer.echo(
            f"{item.id}  {item.term:<20} ease={m.ease_factor:.2f} streak={m.streak} "
            f"interval={m.interval_days:g}d due {_format_when(m.next_review_at, now)}"
        )


# ---------------------------------------------------------------------------
# Library commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    term: Annotated[str, typer.Argument(help="The word or phrase to learn.")],
    translation: Annotated[str, typer.Option(help="Translation into your language.")] = "",
    definition: Annotated[str, typer.Option(help="Definition in the target language.")] = "",
    example: Annotated[str, typer.Option(help="Example sentence.")] = "",
    pronunciation: Annotated[str, typer.Option(help="IPA pronunciation.")] = "",
    phonetic: Annotated[str, typer.Option(help="Simple phonetic spelling.")] = "",
    pos: Annotated[str, typer.Option(help="Part of speech.")] = "",
    mnemonic: Annotated[str | None, typer.Option(help="Memory hook.")] = None,
):
    """[bold green]Add[/bold green] a word to your library."""
    service = _service(ctx)
    try:
        item = service.add_item(
            term,
            translation=translation,
            definition=definition,
            example_sentence=example,
            pronunciation=pronunciation,
            phonetic_spelling=phonetic,
            part_of_speech=pos,
            mnemonic=mnemonic,
        )
    except (LexiflowError, ValueError) as e:
        raise fail(e) from e
    typer.secho(f"Added '{item.term}' ({item.id})", fg="green")
    p = service.progress()
    typer.echo(
        f"+{GENERATION_XP_PER_WORD} XP  Today: {p.words_studied_today}/{p.daily_target} words"
    )


@app.command()
def due(ctx: typer.Context):
    """List items due for review, most overdue first."""
    service = _service(ctx)
    try:
        items = service.items()
    except LexiflowError as e:
        raise fail(e) from e
    now = service.now()
    queue = due_queue(items, now)
    if not queue:
        typer.secho("Nothing due. Well done!", fg="green")
        return
    typer.echo(f"Due items: {len(queue)}")
    _print_items(queue, now)


@app.command()
def weak(ctx: typer.Context):
    """List the weakest retained items (practice pool when nothing is due)."""
    service = _service(ctx)
    try:
        items = service.items()
    except LexiflowError as e:
        raise fail(e) from e
    queue = weak_queue(items)
    if not queue:
        typer.secho("No weak items.", fg="green")
        return
    typer.echo(f"Weak items: {len(queue)}")
    _print_items(queue, service.now())


@app.command()
def library(
    ctx: typer.Context,
    status: Annotated[
        str, typer.Option(help="Filter: all, new, learning or mastered.")
    ] = "all",
):
    """Show your library and mastery rate."""
    if status not in ("all", "new", "learning", "mastered"):
        typer.secho(f"Unknown status '{status}'.", fg="red", err=True)
        raise typer.Exit(2)

    service = _service(ctx)
    try:
        items = service.items()
    except LexiflowError as e:
        raise fail(e) from e
    selected = filter_library(items, status)  # type: ignore[arg-type]
    typer.echo(f"Words: {len(items)}  Mastered: {mastery_percent(items)}%")
    _print_items(selected, service.now())


# ---------------------------------------------------------------------------
# Review commands
# ---------------------------------------------------------------------------


@app.command()
def preview(ctx: typer.Context, item_id: Annotated[str, typer.Argument(help="Item id.")]):
    """Show what each grade would schedule for an item."""
    service = _service(ctx)
    try:
        intervals = service.preview(item_id)
    except LexiflowError as e:
        raise fail(e) from e
    for name, label in intervals.as_dict().items():
        typer.echo(f"{name:<6} {label}")


@app.command()
def mode(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Item id.")],
    override: Annotated[
        StudyMode | None, typer.Option(help="Force a study mode instead of adapting.")
    ] = None,
):
    """Show which study mode an item would be presented in."""
    service = _service(ctx, override)
    try:
        item = service.get_item(item_id)
    except LexiflowError as e:
        raise fail(e) from e
    typer.echo(service.mode_for(item).value)


def _report(outcome: ReviewOutcome, now: datetime) -> None:
    item = outcome.item
    typer.echo(
        f"'{item.term}' -> {outcome.grade.value}: next review "
        f"{_format_when(item.memory.next_review_at, now)} (+{outcome.xp_gained} XP)"
    )


@app.command("grade")
def grade_item(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Item id.")],
    grade: Annotated[Grade, typer.Argument(help="again, hard, good or easy.")],
):
    """Grade a single item outside of a study session."""
    service = _service(ctx)
    try:
        outcome = service.submit(item_id, grade)
    except LexiflowError as e:
        raise fail(e) from e
    _report(outcome, service.now())


@app.command()
def score(
    target: Annotated[str, typer.Argument(help="The expected word or phrase.")],
    spoken: Annotated[str, typer.Argument(help="What was said (speech transcript).")] = "",
):
    """Score a pronunciation attempt against a target."""
    result = evaluate(target, spoken)
    verdict = "pass" if result.passed else "fail"
    typer.echo(f"score={result.score} display={result.display_score} {verdict} grade={result.grade.value}")


def _ask_grade(item: VocabularyItem) -> Grade:
    intervals = preview_intervals(item).as_dict()
    choices = "  ".join(f"{g.value} ({intervals[g.value]})" for g in Grade)
    typer.echo(choices)
    while True:
        answer = typer.prompt("Grade").strip().lower()
        try:
            return Grade(answer)
        except ValueError:
            typer.secho("Please answer again, hard, good or easy.", fg="yellow")


@app.command()
def study(
    ctx: typer.Context,
    mode: Annotated[
        StudyMode | None, typer.Option("--mode", help="Force a study mode for the session.")
    ] = None,
    limit: Annotated[int, typer.Option(help="Stop after this many reviews (0 = no limit).")] = 0,
):
    """[bold green]Study[/bold green] due items, then weak items, until done."""
    service = _service(ctx, mode)
    try:
        ledger = service.start_session()
    except LexiflowError as e:
        raise fail(e) from e

    if service.is_complete():
        typer.secho("Nothing to review right now.", fg="green")
        return

    typer.echo(f"Session: {ledger.initial_queue_size} items")
    while not service.is_complete():
        if limit and ledger.completed_count >= limit:
            break
        item = service.next_item()
        if item is None:
            break

        study_mode = service.mode_for(item)
        typer.secho(f"\n[{study_mode.value}] {item.term}", bold=True)

        if study_mode is StudyMode.SPEAKING:
            transcript = typer.prompt("Say it (type the transcript)", default="", show_default=False)
            result, outcome = service.submit_pronunciation(item.id, transcript)
            typer.echo(f"Pronunciation: {result.display_score}%")
        else:
            typer.prompt("Press Enter to reveal", default="", show_default=False)
            typer.echo(f"{item.translation}  {item.definition}".strip())
            if item.example_sentence:
                typer.echo(f"  e.g. {item.example_sentence}")
            outcome = service.submit(item.id, _ask_grade(item))

        _report(outcome, service.now())
        typer.echo(f"Progress: {round(outcome.session_progress)}%")

    summary = service.summary()
    typer.secho("\nSession complete", fg="green", bold=True)
    typer.echo(
        f"Reviewed {summary.completed}: {summary.correct} correct, "
        f"{summary.incorrect} again ({summary.accuracy}% accuracy)"
    )


# ---------------------------------------------------------------------------
# Progress commands
# ---------------------------------------------------------------------------


@app.command()
def progress(ctx: typer.Context):
    """Show streak, XP and today's progress."""
    service = _service(ctx)
    try:
        p = service.progress()
    except LexiflowError as e:
        raise fail(e) from e
    today = service.today()
    typer.echo(f"Streak: {p.streak} days (best {p.longest_streak})")
    typer.echo(f"Freezes: {p.streak_freeze}")
    typer.echo(f"XP: {p.xp}  League: {p.league}")
    studied = p.words_studied_today if p.last_study_date == today else 0
    typer.echo(
        f"Today: {studied}/{p.daily_target} words ({round(daily_goal_percent(p, today))}%)"
    )


@app.command()
def award(
    ctx: typer.Context,
    amount: Annotated[int, typer.Argument(help="XP to grant.", min=0)],
):
    """Grant XP for an activity outside reviews (chat, games, stories)."""
    service = _service(ctx)
    try:
        p = service.award_xp(amount)
    except (LexiflowError, ValueError) as e:
        raise fail(e) from e
    typer.echo(f"XP: {p.xp}  Streak: {p.streak}")


@app.command()
def story(ctx: typer.Context):
    """Record a finished reading story (earns story XP)."""
    service = _service(ctx)
    try:
        p = service.complete_story()
    except LexiflowError as e:
        raise fail(e) from e
    typer.echo(f"+{STORY_XP_REWARD} XP  XP: {p.xp}  Streak: {p.streak}")


@app.command("buy-freeze")
def buy_freeze(ctx: typer.Context):
    """Spend XP on a streak freeze."""
    service = _service(ctx)
    try:
        p = service.buy_streak_freeze()
    except LexiflowError as e:
        raise fail(e) from e
    typer.secho(f"Streak freeze bought. Freezes: {p.streak_freeze}  XP: {p.xp}", fg="green")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))
