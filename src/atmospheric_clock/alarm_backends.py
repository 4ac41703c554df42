from __future__ import annotations

"""Two interchangeable ways of turning alarm presets into notifications.

PollingAlarmBackend
    A QTimer polls every ~30 s and asks ``AlarmScheduler.poll`` for a fire
    decision (±1 minute match, 2 minute debounce).

CalendarAlarmBackend
    Keeps the exact-minute, weekday-enumerated rule set produced by the
    scheduler and arms a single-shot QTimer for the earliest next occurrence.
    On expiry every due rule fires, each is advanced to its following
    occurrence, and the timer is re-armed. ``reschedule`` always replaces the
    whole rule set so edits never leave a stale trigger behind.

Both expose ``start`` / ``stop`` / ``reschedule`` and call ``notify(title,
body)`` to fire.
"""

from datetime import datetime
import logging
from typing import Callable, List, Optional, Tuple

from PyQt6.QtCore import QObject, Qt, QTimer, pyqtSignal

from .alarm_scheduler import AlarmScheduler, next_occurrence
from .models import TriggerRule

_log = logging.getLogger(__name__)

TimeProvider = Callable[[], datetime]
Notify = Callable[[str, str], None]


class PollingAlarmBackend(QObject):
    fired = pyqtSignal(str)  # recurrence class

    def __init__(
        self,
        scheduler: AlarmScheduler,
        notify: Notify,
        time_provider: Optional[TimeProvider] = None,
        interval_ms: int = 30_000,
    ) -> None:
        super().__init__()
        self._scheduler = scheduler
        self._notify = notify
        self._time_provider: TimeProvider = time_provider or datetime.now
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.check)

    @property
    def active(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        self._timer.start()
        self.check()

    def stop(self) -> None:
        self._timer.stop()

    def reschedule(self, rules: List[TriggerRule]) -> None:
        # Presets are read live on every poll; nothing to re-arm.
        _log.debug("poll backend sees %d rules", len(rules))

    def check(self) -> None:
        decision = self._scheduler.poll(self._time_provider())
        if not decision.fire:
            return
        self._notify(decision.title, decision.body)
        if decision.recurrence is not None:
            self.fired.emit(decision.recurrence.value)


class CalendarAlarmBackend(QObject):
    fired = pyqtSignal(str)  # rule identifier
    armed = pyqtSignal(object)  # datetime of next trigger, or None

    def __init__(self, notify: Notify, time_provider: Optional[TimeProvider] = None) -> None:
        super().__init__()
        self._notify = notify
        self._time_provider: TimeProvider = time_provider or datetime.now
        self._pending: List[Tuple[datetime, TriggerRule]] = []
        self._running = False
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self.process_due)

    # --- Public API ----------------------------------------------------
    def pending(self) -> List[Tuple[datetime, TriggerRule]]:
        return list(self._pending)

    def start(self) -> None:
        self._running = True
        self._arm()

    def stop(self) -> None:
        self._running = False
        self._timer.stop()

    def reschedule(self, rules: List[TriggerRule]) -> None:
        now = self._time_provider()
        self._pending = sorted(
            ((next_occurrence(rule, now), rule) for rule in rules),
            key=lambda item: (item[0], item[1].identifier),
        )
        _log.info("calendar triggers rebuilt", extra={"_json_rules": [r.identifier for _, r in self._pending]})
        self._arm()

    def process_due(self) -> None:
        now = self._time_provider()
        remaining: List[Tuple[datetime, TriggerRule]] = []
        for when, rule in self._pending:
            if when > now:
                remaining.append((when, rule))
                continue
            self._notify(rule.title, rule.body)
            self.fired.emit(rule.identifier)
            if rule.repeats:
                remaining.append((next_occurrence(rule, now), rule))
        remaining.sort(key=lambda item: (item[0], item[1].identifier))
        self._pending = remaining
        self._arm()

    # --- Internal ------------------------------------------------------
    def _arm(self) -> None:
        self._timer.stop()
        if not self._running or not self._pending:
            self.armed.emit(None)
            return
        when = self._pending[0][0]
        delta_ms = max(0, int((when - self._time_provider()).total_seconds() * 1000))
        self._timer.start(delta_ms)
        self.armed.emit(when)


__all__ = ["PollingAlarmBackend", "CalendarAlarmBackend"]
