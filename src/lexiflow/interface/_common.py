"""Shared helpers for CLI commands."""

import logging
import random
from pathlib import Path
from typing import Any

import typer

from lexiflow.application.config import LexiflowConfig, resolve_config
from lexiflow.application.study_service import StudyService
from lexiflow.domain.errors import LexiflowError
from lexiflow.infrastructure.clock import SystemClock
from lexiflow.infrastructure.yaml_store import YamlLibraryRepository

logger = logging.getLogger(__name__)


def resolve_with_overrides(ctx: typer.Context, **overrides: Any) -> LexiflowConfig:
    """Resolve config, layering the global --library option and command overrides on top."""
    obj = ctx.obj or {}
    library: Path | None = obj.get("library")
    merged = {"library_path": library, **overrides}
    return resolve_config(merged)


def build_service(config: LexiflowConfig) -> StudyService:
    clock = SystemClock(config.timezone)
    repo = YamlLibraryRepository(config.library_path, clock, daily_target=config.daily_target)
    rng = random.Random(config.seed) if config.seed is not None else random.Random()
    logger.debug(f"Using library {config.library_path}")
    return StudyService(repo, clock, rng=rng, override=config.default_mode)


def fail(error: LexiflowError | ValueError) -> typer.Exit:
    """Print a recoverable error in red and return the exit to raise."""
    typer.secho(str(error), fg="red", err=True)
    return typer.Exit(1)
