from __future__ import annotations

"""Application configuration.

Defaults mirror the cadences the clock was tuned for; every field can be
overridden through an ``ATMOSPHERIC_CLOCK_<FIELD>`` environment variable.
"""

from dataclasses import dataclass, field, fields
import os
from pathlib import Path
from typing import Mapping, Optional

from .logging_setup import resolve_level

ENV_PREFIX = "ATMOSPHERIC_CLOCK_"

ALARM_SCHEMES = ("daily", "weekly")
ALARM_BACKENDS = ("poll", "calendar")


class ConfigError(ValueError):
    pass


def _default_data_dir() -> Path:
    return Path.home() / ".atmospheric_clock"


@dataclass(slots=True)
class AppConfig:
    data_dir: Path = field(default_factory=_default_data_dir)
    db_filename: str = "atmospheric_clock.sqlite"
    alarm_scheme: str = "weekly"
    alarm_backend: str = "poll"
    alarm_poll_interval_ms: int = 30_000
    stopwatch_refresh_ms: int = 20
    theme_refresh_ms: int = 60_000
    theme_transition_ms: int = 2_000
    default_countdown_seconds: int = 300
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.alarm_scheme not in ALARM_SCHEMES:
            raise ConfigError(f"alarm_scheme must be one of {ALARM_SCHEMES}, got {self.alarm_scheme!r}")
        if self.alarm_backend not in ALARM_BACKENDS:
            raise ConfigError(f"alarm_backend must be one of {ALARM_BACKENDS}, got {self.alarm_backend!r}")
        for name in ("alarm_poll_interval_ms", "stopwatch_refresh_ms", "theme_refresh_ms", "default_countdown_seconds"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive")
        if self.theme_transition_ms < 0:
            raise ConfigError("theme_transition_ms must not be negative")
        try:
            resolve_level(self.log_level)
        except ValueError as e:
            raise ConfigError(str(e)) from e

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_filename

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw == "":
                continue
            if f.name == "data_dir":
                kwargs[f.name] = Path(raw).expanduser()
            elif f.name.endswith(("_ms", "_seconds")):
                try:
                    kwargs[f.name] = int(raw)
                except ValueError as e:
                    raise ConfigError(f"{ENV_PREFIX}{f.name.upper()} must be an integer") from e
            elif f.name in ("alarm_scheme", "alarm_backend"):
                kwargs[f.name] = raw.strip().lower()
            else:
                kwargs[f.name] = raw
        return cls(**kwargs)  # type: ignore[arg-type]


__all__ = ["AppConfig", "ConfigError", "ALARM_SCHEMES", "ALARM_BACKENDS"]
