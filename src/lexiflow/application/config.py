from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from lexiflow.domain.models import StudyMode


class LexiflowConfig(BaseSettings):
    """
    Configuration model for lexiflow.
    Supports loading from:
    1. Environment variables (LEXIFLOW_*)
    2. Config file (~/.config/lexiflow/config.toml or ~/.lexiflow.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="LEXIFLOW_",
        extra="ignore",
    )

    # Paths
    library_path: Path = Field(
        default_factory=lambda: Path.home() / ".config/lexiflow/library.yaml"
    )

    # Study Settings
    default_mode: StudyMode = StudyMode.AUTO
    daily_target: int | None = Field(default=None, ge=1)  # Overrides the stored goal when set
    seed: int | None = None  # Fixes the speaking/writing mix when set
    timezone: str | None = None  # IANA name; local time when unset

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins; overrides beat env, env beats file
        toml_file = next((f for f in _config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("library_path", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path:
        return Path(v).expanduser()

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str | None) -> str | None:
        if v is None:
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v


def _config_files() -> list[Path]:
    # Recomputed so a patched HOME is honoured
    return [
        Path.home() / ".config/lexiflow/config.toml",
        Path.home() / ".lexiflow.toml",
    ]


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> LexiflowConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in LexiflowConfig
    2. ~/.config/lexiflow/config.toml (if exists)
    3. Environment variables (LEXIFLOW_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return LexiflowConfig(**overrides)
