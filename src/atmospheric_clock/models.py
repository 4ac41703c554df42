from __future__ import annotations

"""Dataclass models shared by the time engine and the Qt shell."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional


class RecurrenceClass(str, Enum):
    DAILY = "daily"
    WEEKDAY = "weekday"
    WEEKEND = "weekend"


class CountdownPhase(str, Enum):
    IDLE = "idle"  # paused at full duration
    RUNNING = "running"
    PAUSED = "paused"
    EXPIRED = "expired"


def _is_whole(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_valid_time_of_day(hour: int, minute: int) -> bool:
    if not (_is_whole(hour) and _is_whole(minute)):
        return False
    return 0 <= hour <= 23 and 0 <= minute <= 59


@dataclass(slots=True)
class AlarmPreset:
    recurrence: RecurrenceClass
    hour: int
    minute: int
    enabled: bool = False

    @property
    def time_str(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    @property
    def target_minutes(self) -> int:
        return self.hour * 60 + self.minute


DEFAULT_PRESETS: dict[RecurrenceClass, tuple[int, int, bool]] = {
    RecurrenceClass.DAILY: (7, 0, False),
    RecurrenceClass.WEEKDAY: (7, 0, True),
    RecurrenceClass.WEEKEND: (9, 0, True),
}


def default_preset(recurrence: RecurrenceClass) -> AlarmPreset:
    hour, minute, enabled = DEFAULT_PRESETS[recurrence]
    return AlarmPreset(recurrence=recurrence, hour=hour, minute=minute, enabled=enabled)


@dataclass(slots=True)
class AlarmFireRecord:
    last_fired: Optional[datetime] = None

    @property
    def last_fired_epoch_ms(self) -> int:
        if self.last_fired is None:
            return 0
        return int(self.last_fired.timestamp() * 1000)


@dataclass(slots=True, frozen=True)
class FireDecision:
    fire: bool
    recurrence: Optional[RecurrenceClass] = None
    title: str = ""
    body: str = ""


NO_FIRE = FireDecision(fire=False)


@dataclass(slots=True, frozen=True)
class TriggerRule:
    identifier: str
    weekday: Optional[int]  # 0=Mon .. 6=Sun, None = every day
    hour: int
    minute: int
    title: str
    body: str
    repeats: bool = True


@dataclass(slots=True)
class CountdownState:
    total_seconds: int = 300
    remaining_seconds: int = 300
    phase: CountdownPhase = CountdownPhase.IDLE


@dataclass(slots=True)
class StopwatchState:
    start_reference: Optional[datetime] = None
    lap_reference: Optional[datetime] = None
    laps: List[timedelta] = field(default_factory=list)  # most recent first

    @property
    def running(self) -> bool:
        return self.start_reference is not None


__all__ = [
    "RecurrenceClass",
    "CountdownPhase",
    "AlarmPreset",
    "AlarmFireRecord",
    "FireDecision",
    "NO_FIRE",
    "TriggerRule",
    "CountdownState",
    "StopwatchState",
    "DEFAULT_PRESETS",
    "default_preset",
    "is_valid_time_of_day",
]
