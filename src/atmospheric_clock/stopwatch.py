from __future__ import annotations

"""Lap-recording stopwatch.

Elapsed and lap durations are always differences between two wall-clock
samples, never sums of ticks, so an irregular display refresh cannot drift.
Wrong-state calls (lap/stop while stopped, start while running) are ignored.
"""

from datetime import datetime, timedelta
from typing import List

from .models import StopwatchState

ZERO = timedelta(0)


class StopwatchLapRecorder:
    def __init__(self) -> None:
        self._state = StopwatchState()

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def laps(self) -> List[timedelta]:
        return list(self._state.laps)

    def start(self, now: datetime) -> bool:
        if self._state.running:
            return False
        self._state.start_reference = now
        self._state.lap_reference = now
        self._state.laps.clear()
        return True

    def lap(self, now: datetime) -> bool:
        if not self._state.running or self._state.lap_reference is None:
            return False
        self._state.laps.insert(0, _since(self._state.lap_reference, now))
        self._state.lap_reference = now
        return True

    def stop(self, now: datetime) -> bool:
        if not self._state.running:
            return False
        self._state.start_reference = None
        self._state.lap_reference = None
        return True

    def elapsed_since(self, now: datetime) -> timedelta:
        if self._state.start_reference is None:
            return ZERO
        return _since(self._state.start_reference, now)

    def current_lap(self, now: datetime) -> timedelta:
        if self._state.lap_reference is None:
            return ZERO
        return _since(self._state.lap_reference, now)

    def labelled_laps(self) -> list[tuple[int, timedelta]]:
        count = len(self._state.laps)
        return [(count - i, d) for i, d in enumerate(self._state.laps)]


def _since(reference: datetime, now: datetime) -> timedelta:
    return max(ZERO, now - reference)


__all__ = ["StopwatchLapRecorder"]
