"""Application configuration for disk burn-in runs."""

from __future__ import annotations

import json
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LOG_DIR = "."
DEFAULT_BAD_BLOCKS_DIR = "."
DEFAULT_LOG_ERROR_ENABLED = True
DEFAULT_LOG_WARNING_ENABLED = True
DEFAULT_LOG_INFO_ENABLED = True
DEFAULT_LOG_DEBUG_ENABLED = False
DEFAULT_POLL_INTERVAL_SECONDS = 15.0
DEFAULT_POLL_TIMEOUT_HOURS = 4.0
DEFAULT_SMARTCTL_PATH = "smartctl"
DEFAULT_BADBLOCKS_PATH = "badblocks"
DEFAULT_BADBLOCKS_BLOCK_SIZE = 4096
DEFAULT_BADBLOCKS_MAX_ERRORS = 1


class RunMode(str, Enum):
    """Whether state-changing actions are performed or only announced."""

    SIMULATE = "simulate"
    EXECUTE = "execute"


class StageKind(str, Enum):
    """Stages that can appear in a burn-in plan."""

    SHORT = "short"
    BADBLOCKS = "badblocks"
    EXTENDED = "extended"


DEFAULT_PLAN = (StageKind.SHORT, StageKind.BADBLOCKS, StageKind.EXTENDED)


class AppSettings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BURNIN_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    log_dir: Path = Field(default=Path(DEFAULT_LOG_DIR), description="Directory receiving the run log.")
    bad_blocks_dir: Path = Field(
        default=Path(DEFAULT_BAD_BLOCKS_DIR),
        description="Directory receiving the badblocks report file.",
    )
    dry_run: bool = Field(default=False, description="Announce every action instead of performing it.")
    plan: list[StageKind] | str = Field(
        default_factory=lambda: list(DEFAULT_PLAN),
        description="Ordered stages to run. Stages may repeat.",
    )
    poll_interval_seconds: float = Field(
        default=DEFAULT_POLL_INTERVAL_SECONDS,
        gt=0.0,
        description="Delay between self-test completion polls.",
    )
    poll_timeout_hours: float = Field(
        default=DEFAULT_POLL_TIMEOUT_HOURS,
        gt=0.0,
        description="Upper bound on how long a self-test is polled after the initial wait.",
    )
    smartctl_path: str = Field(default=DEFAULT_SMARTCTL_PATH, description="smartctl executable.")
    badblocks_path: str = Field(default=DEFAULT_BADBLOCKS_PATH, description="badblocks executable.")
    badblocks_block_size: int = Field(
        default=DEFAULT_BADBLOCKS_BLOCK_SIZE,
        gt=0,
        description="Block size (bytes) passed to badblocks -b.",
    )
    badblocks_max_errors: int = Field(
        default=DEFAULT_BADBLOCKS_MAX_ERRORS,
        ge=0,
        description="Bad block count after which badblocks exits (-e). Zero scans the whole device.",
    )
    full_report_enabled: bool = Field(
        default=True,
        description="Append full 'smartctl -x' output once all stages finish.",
    )
    clean_log_enabled: bool = Field(
        default=True,
        description="Strip smartctl banner and section noise from the finished log.",
    )
    log_error_enabled: bool = Field(
        default=DEFAULT_LOG_ERROR_ENABLED,
        description="Emit error-level log records.",
    )
    log_warning_enabled: bool = Field(
        default=DEFAULT_LOG_WARNING_ENABLED,
        description="Emit warning-level log records.",
    )
    log_info_enabled: bool = Field(
        default=DEFAULT_LOG_INFO_ENABLED,
        description="Emit information-level log records.",
    )
    log_debug_enabled: bool = Field(
        default=DEFAULT_LOG_DEBUG_ENABLED,
        description="Emit debug-level log records.",
    )
    diagnostic_log_path: Path | None = Field(
        default=None,
        description="Optional file that also receives diagnostic log records. Never the run log.",
    )

    @field_validator("plan", mode="before")
    @classmethod
    def _parse_plan(cls, value: Any) -> list[StageKind]:
        """Accept comma/space-separated names or a JSON array for the stage plan."""

        if value is None or value == "":
            raise ValueError("Burn-in plan must contain at least one stage.")
        if isinstance(value, str):
            raw = value.strip()
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError:
                parsed = [token for token in raw.replace(",", " ").split() if token]
            value = parsed if isinstance(parsed, list) else [parsed]
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"Unsupported plan specification: {value!r}")
        stages: list[StageKind] = []
        for item in value:
            try:
                stages.append(StageKind(item.strip().lower() if isinstance(item, str) else item))
            except ValueError as exc:
                choices = ", ".join(kind.value for kind in StageKind)
                raise ValueError(f"Unknown stage {item!r}; expected one of: {choices}") from exc
        if not stages:
            raise ValueError("Burn-in plan must contain at least one stage.")
        return stages

    @property
    def poll_timeout_seconds(self) -> float:
        return self.poll_timeout_hours * 60 * 60

    @property
    def run_mode(self) -> RunMode:
        return RunMode.SIMULATE if self.dry_run else RunMode.EXECUTE


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return the process settings, loading them from the environment once."""

    return AppSettings()


def reload_settings() -> AppSettings:
    """Discard the cached settings and load them again."""

    get_settings.cache_clear()
    return get_settings()


def settings_with_overrides(**changes: Any) -> AppSettings:
    """Return settings with explicit overrides applied on top of the environment.

    Overrides are validated like environment values; ``None`` entries are
    ignored so optional CLI flags can be passed straight through.
    """

    changes = {key: value for key, value in changes.items() if value is not None}
    if not changes:
        return get_settings()
    return AppSettings(**changes)
