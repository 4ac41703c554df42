from __future__ import annotations

"""Qt wrapper around the lap recorder.

The refresh QTimer only asks for ``elapsed_since(now)``; it never feeds the
recorder, so how often (or how late) it fires has no effect on the numbers.
"""

from datetime import datetime
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .stopwatch import StopwatchLapRecorder

TimeProvider = Callable[[], datetime]


class StopwatchService(QObject):
    elapsed = pyqtSignal(float)  # elapsed seconds
    lap_recorded = pyqtSignal(int, float)  # ordinal, lap seconds
    state_changed = pyqtSignal(bool)  # running
    laps_cleared = pyqtSignal()

    def __init__(
        self,
        recorder: StopwatchLapRecorder | None = None,
        time_provider: Optional[TimeProvider] = None,
        refresh_ms: int = 20,
    ) -> None:
        super().__init__()
        self._recorder = recorder or StopwatchLapRecorder()
        self._time_provider: TimeProvider = time_provider or datetime.now
        self._timer = QTimer(self)
        self._timer.setInterval(refresh_ms)
        self._timer.timeout.connect(self._on_refresh)

    @property
    def recorder(self) -> StopwatchLapRecorder:
        return self._recorder

    def start(self) -> bool:
        if not self._recorder.start(self._time_provider()):
            return False
        self.laps_cleared.emit()
        self._timer.start()
        self.state_changed.emit(True)
        self.elapsed.emit(0.0)
        return True

    def lap(self) -> bool:
        if not self._recorder.lap(self._time_provider()):
            return False
        ordinal, duration = self._recorder.labelled_laps()[0]
        self.lap_recorded.emit(ordinal, duration.total_seconds())
        return True

    def stop(self) -> bool:
        now = self._time_provider()
        if not self._recorder.stop(now):
            return False
        self._timer.stop()
        self.elapsed.emit(self._recorder.elapsed_since(now).total_seconds())
        self.state_changed.emit(False)
        return True

    def _on_refresh(self) -> None:
        self.elapsed.emit(self._recorder.elapsed_since(self._time_provider()).total_seconds())


__all__ = ["StopwatchService"]
