from __future__ import annotations

"""Recurring alarm rules and the fire decision.

Design:
 - One preset per recurrence class (daily / weekday / weekend), edited only
   through ``AlarmScheduler.set_preset`` which validates, persists and
   regenerates the complete trigger rule set.
 - ``decide`` is the poll-and-compare path: a preset matches when the current
   minute is within one minute of its target and its class accepts today's
   weekday. A two minute debounce stops a 30s poll from firing repeatedly
   inside that tolerance window.
 - ``build_rules`` / ``next_occurrence`` are the calendar-trigger path: exact
   minute, weekday-enumerated, repeating rules.
 - The active scheme selects which presets participate: ``daily`` uses the
   daily preset only, ``weekly`` uses weekday + weekend.
"""

from datetime import datetime, timedelta
import logging
from typing import Callable, Iterable, Optional, Protocol

from .models import (
    AlarmFireRecord,
    AlarmPreset,
    FireDecision,
    NO_FIRE,
    RecurrenceClass,
    TriggerRule,
    default_preset,
    is_valid_time_of_day,
)

logger = logging.getLogger(__name__)

DEBOUNCE_WINDOW = timedelta(minutes=2)
MATCH_TOLERANCE_MINUTES = 1

WEEKDAYS = (0, 1, 2, 3, 4)
WEEKEND_DAYS = (5, 6)

SCHEMES: dict[str, tuple[RecurrenceClass, ...]] = {
    "daily": (RecurrenceClass.DAILY,),
    "weekly": (RecurrenceClass.WEEKDAY, RecurrenceClass.WEEKEND),
}

NOTIFICATION_CONTENT: dict[RecurrenceClass, tuple[str, str]] = {
    RecurrenceClass.DAILY: ("Alarm", "Time to get up!"),
    RecurrenceClass.WEEKDAY: ("Weekday Alarm", "Time to get up!"),
    RecurrenceClass.WEEKEND: ("Weekend Alarm", "Time to get up! Enjoy your weekend."),
}


class AlarmSchemeError(ValueError):
    pass


class PresetRepository(Protocol):
    def load(self, recurrence: RecurrenceClass) -> Optional[AlarmPreset]: ...

    def save(self, preset: AlarmPreset) -> None: ...


class AlarmBackend(Protocol):
    def reschedule(self, rules: list[TriggerRule]) -> None: ...


# --- Pure rules -------------------------------------------------------------

def accepts_weekday(recurrence: RecurrenceClass, weekday: int) -> bool:
    if recurrence is RecurrenceClass.DAILY:
        return True
    if recurrence is RecurrenceClass.WEEKDAY:
        return weekday in WEEKDAYS
    return weekday in WEEKEND_DAYS


def is_candidate(preset: AlarmPreset, now: datetime) -> bool:
    if not preset.enabled:
        return False
    now_minutes = now.hour * 60 + now.minute
    if abs(now_minutes - preset.target_minutes) > MATCH_TOLERANCE_MINUTES:
        return False
    return accepts_weekday(preset.recurrence, now.weekday())


def decide(now: datetime, presets: Iterable[AlarmPreset], fire_record: AlarmFireRecord) -> FireDecision:
    """Return the fire decision for ``now`` and stamp ``fire_record`` on a fire.

    Fires only when exactly one enabled preset matches and the last fire is at
    least ``DEBOUNCE_WINDOW`` old.
    """
    candidates = [p for p in presets if is_candidate(p, now)]
    if len(candidates) != 1:
        if len(candidates) > 1:
            logger.warning(
                "ambiguous alarm match; skipping",
                extra={"_json_candidates": [c.recurrence.value for c in candidates]},
            )
        return NO_FIRE
    last = fire_record.last_fired
    if last is not None and now - last < DEBOUNCE_WINDOW:
        return NO_FIRE
    preset = candidates[0]
    title, body = NOTIFICATION_CONTENT[preset.recurrence]
    fire_record.last_fired = now
    logger.info("alarm fired", extra={"_json_recurrence": preset.recurrence.value})
    return FireDecision(fire=True, recurrence=preset.recurrence, title=title, body=body)


def trigger_rules(preset: AlarmPreset) -> list[TriggerRule]:
    if not preset.enabled:
        return []
    title, body = NOTIFICATION_CONTENT[preset.recurrence]
    if preset.recurrence is RecurrenceClass.DAILY:
        days: tuple[Optional[int], ...] = (None,)
    elif preset.recurrence is RecurrenceClass.WEEKDAY:
        days = WEEKDAYS
    else:
        days = WEEKEND_DAYS
    rules = []
    for day in days:
        suffix = "all" if day is None else str(day)
        rules.append(
            TriggerRule(
                identifier=f"alarm.{preset.recurrence.value}.{suffix}",
                weekday=day,
                hour=preset.hour,
                minute=preset.minute,
                title=title,
                body=body,
            )
        )
    return rules


def build_rules(presets: Iterable[AlarmPreset]) -> list[TriggerRule]:
    rules: list[TriggerRule] = []
    for preset in presets:
        rules.extend(trigger_rules(preset))
    return rules


def next_occurrence(rule: TriggerRule, after: datetime) -> datetime:
    """Earliest datetime strictly after ``after`` at which ``rule`` triggers."""
    candidate = after.replace(hour=rule.hour, minute=rule.minute, second=0, microsecond=0)
    if candidate <= after:
        candidate += timedelta(days=1)
    if rule.weekday is not None:
        candidate += timedelta(days=(rule.weekday - candidate.weekday()) % 7)
    return candidate


# --- Stateful owner ---------------------------------------------------------

class AlarmScheduler:
    """Owns the presets and the fire record; one instance per process."""

    def __init__(
        self,
        repository: PresetRepository,
        backend: Optional[AlarmBackend] = None,
        scheme: str = "weekly",
        time_provider: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if scheme not in SCHEMES:
            raise AlarmSchemeError(f"Unknown alarm scheme: {scheme!r}")
        self._repository = repository
        self._backend = backend
        self._scheme = scheme
        self._time_provider = time_provider or datetime.now
        self._fire_record = AlarmFireRecord()
        self._presets: dict[RecurrenceClass, AlarmPreset] = {}
        for recurrence in RecurrenceClass:
            stored = repository.load(recurrence)
            self._presets[recurrence] = stored or default_preset(recurrence)
        self._push_rules()

    # --- Access ---------------------------------------------------------
    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def fire_record(self) -> AlarmFireRecord:
        return self._fire_record

    def preset(self, recurrence: RecurrenceClass) -> AlarmPreset:
        p = self._presets[recurrence]
        return AlarmPreset(p.recurrence, p.hour, p.minute, p.enabled)

    def active_presets(self) -> list[AlarmPreset]:
        return [self.preset(r) for r in SCHEMES[self._scheme]]

    def rules(self) -> list[TriggerRule]:
        return build_rules(self.active_presets())

    # --- Commands -------------------------------------------------------
    def attach_backend(self, backend: AlarmBackend) -> None:
        self._backend = backend
        self._push_rules()

    def set_preset(self, recurrence: RecurrenceClass, hour: int, minute: int, enabled: bool) -> bool:
        if not is_valid_time_of_day(hour, minute) or not isinstance(enabled, bool):
            logger.warning(
                "rejected alarm preset %r:%r enabled=%r for %s", hour, minute, enabled, recurrence.value
            )
            return False
        preset = AlarmPreset(recurrence=recurrence, hour=hour, minute=minute, enabled=enabled)
        # Persist first so a failed save leaves the in-memory preset untouched
        self._repository.save(preset)
        self._presets[recurrence] = preset
        self._push_rules()
        logger.info(
            "alarm preset updated",
            extra={"_json_recurrence": recurrence.value, "_json_time": preset.time_str, "_json_enabled": enabled},
        )
        return True

    def set_time(self, recurrence: RecurrenceClass, hour: int, minute: int) -> bool:
        return self.set_preset(recurrence, hour, minute, self._presets[recurrence].enabled)

    def set_enabled(self, recurrence: RecurrenceClass, enabled: bool) -> bool:
        p = self._presets[recurrence]
        return self.set_preset(recurrence, p.hour, p.minute, enabled)

    def poll(self, now: Optional[datetime] = None) -> FireDecision:
        now = now or self._time_provider()
        return decide(now, self.active_presets(), self._fire_record)

    # --- Internal -------------------------------------------------------
    def _push_rules(self) -> None:
        if self._backend is not None:
            self._backend.reschedule(self.rules())


__all__ = [
    "AlarmScheduler",
    "AlarmSchemeError",
    "AlarmBackend",
    "PresetRepository",
    "DEBOUNCE_WINDOW",
    "NOTIFICATION_CONTENT",
    "SCHEMES",
    "accepts_weekday",
    "is_candidate",
    "decide",
    "trigger_rules",
    "build_rules",
    "next_occurrence",
]
