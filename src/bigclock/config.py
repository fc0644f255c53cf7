"""Configuration from environment variables and an optional .env file."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

CONFIG_DIR = Path.home() / ".config" / "bigclock"
CACHE_DIR = Path.home() / ".cache" / "bigclock"
DEFAULT_LOG_FILE = CACHE_DIR / "bigclock.log"

ENV_PREFIX = "BIGCLOCK_"
TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ClockConfig:
    """Settings for a run. CLI options override these via ``with_overrides``."""

    notify: bool = True
    sound: bool = True
    sound_file: Optional[Path] = None
    log_file: Path = DEFAULT_LOG_FILE
    time_color: str = "red"
    date_color: str = "blue"
    bar_color: str = "blue"

    def with_overrides(self, **overrides) -> ClockConfig:
        """Copy with every override that is not None applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ValueError(f"Expected a boolean, got {value!r}")


def load_dotenv_files() -> None:
    """Load .env from the config dir, then the working directory.

    Variables already set in the environment win.
    """
    load_dotenv(CONFIG_DIR / ".env")
    load_dotenv(Path.cwd() / ".env")


def load_config(environ: Mapping[str, str] | None = None) -> ClockConfig:
    """Build a config from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    defaults = ClockConfig()

    sound_file = env.get(f"{ENV_PREFIX}SOUND_FILE")
    log_file = env.get(f"{ENV_PREFIX}LOG_FILE")

    return ClockConfig(
        notify=_env_bool(env.get(f"{ENV_PREFIX}NOTIFY"), defaults.notify),
        sound=_env_bool(env.get(f"{ENV_PREFIX}SOUND"), defaults.sound),
        sound_file=Path(sound_file).expanduser() if sound_file else None,
        log_file=Path(log_file).expanduser() if log_file else defaults.log_file,
        time_color=env.get(f"{ENV_PREFIX}TIME_COLOR", defaults.time_color),
        date_color=env.get(f"{ENV_PREFIX}DATE_COLOR", defaults.date_color),
        bar_color=env.get(f"{ENV_PREFIX}BAR_COLOR", defaults.bar_color),
    )
