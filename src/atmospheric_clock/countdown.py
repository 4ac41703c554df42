from __future__ import annotations

"""Countdown timer state machine.

idle (paused at full) -> running -> paused -> running ... -> expired.
Driven by discrete ``tick`` calls, one per second; the tick source lives in
``countdown_service``. All durations are whole seconds.
"""

import logging
import math
from typing import Optional

from .models import CountdownPhase, CountdownState

logger = logging.getLogger(__name__)

MIN_DURATION = 1
MAX_DURATION = 120 * 60
DEFAULT_DURATION = 300


class CountdownTimer:
    def __init__(self, total_seconds: int = DEFAULT_DURATION) -> None:
        whole = _whole_number(total_seconds)
        total = _clamp(DEFAULT_DURATION if whole is None else whole, MIN_DURATION, MAX_DURATION)
        self._state = CountdownState(total_seconds=total, remaining_seconds=total)

    # --- Properties -----------------------------------------------------
    @property
    def state(self) -> CountdownState:
        s = self._state
        return CountdownState(s.total_seconds, s.remaining_seconds, s.phase)

    @property
    def phase(self) -> CountdownPhase:
        return self._state.phase

    @property
    def total_seconds(self) -> int:
        return self._state.total_seconds

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    @property
    def running(self) -> bool:
        return self._state.phase is CountdownPhase.RUNNING

    @property
    def progress(self) -> float:
        return self._state.remaining_seconds / self._state.total_seconds

    @property
    def can_resume(self) -> bool:
        s = self._state
        return not self.running and 0 < s.remaining_seconds < s.total_seconds

    # --- Commands -------------------------------------------------------
    def set_duration(self, seconds: int) -> bool:
        if self.running:
            return False
        whole = _whole_number(seconds)
        if whole is None:
            logger.warning("rejected countdown duration %r", seconds)
            return False
        total = _clamp(whole, MIN_DURATION, MAX_DURATION)
        self._state.total_seconds = total
        self._state.remaining_seconds = total
        self._state.phase = CountdownPhase.IDLE
        return True

    def set_duration_parts(self, minutes: int, seconds: int) -> bool:
        whole_minutes = _whole_number(minutes)
        whole_seconds = _whole_number(seconds)
        if whole_minutes is None or whole_seconds is None:
            logger.warning("rejected countdown duration %r:%r", minutes, seconds)
            return False
        return self.set_duration(_clamp(whole_minutes, 0, 120) * 60 + _clamp(whole_seconds, 0, 59))

    def start(self) -> bool:
        if self.running or self._state.remaining_seconds == 0:
            return False
        self._state.phase = CountdownPhase.RUNNING
        logger.debug("countdown started at %ss", self._state.remaining_seconds)
        return True

    def pause(self) -> bool:
        if not self.running:
            return False
        self._state.phase = CountdownPhase.PAUSED
        return True

    def reset(self) -> None:
        self._state.remaining_seconds = self._state.total_seconds
        self._state.phase = CountdownPhase.PAUSED

    def tick(self) -> bool:
        """Advance one second. Returns True only on the tick that expires."""
        if not self.running:
            return False
        self._state.remaining_seconds -= 1
        if self._state.remaining_seconds > 0:
            return False
        self._state.remaining_seconds = 0
        self._state.phase = CountdownPhase.EXPIRED
        logger.info("countdown expired", extra={"_json_total": self._state.total_seconds})
        return True


def _whole_number(value: object) -> Optional[int]:
    """Truncate a finite real number to an int; None for anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return int(value)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


__all__ = ["CountdownTimer", "MIN_DURATION", "MAX_DURATION", "DEFAULT_DURATION"]
