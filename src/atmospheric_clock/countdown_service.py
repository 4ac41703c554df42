from __future__ import annotations

"""Qt tick source for the countdown timer.

Owns a 1 s QTimer that runs only while the countdown is running and feeds
``CountdownTimer.tick``. Re-emits the engine state as signals for the timer
page; ``expired`` fires exactly once per expiry.
"""

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .countdown import CountdownTimer, DEFAULT_DURATION


class CountdownService(QObject):
    tick = pyqtSignal(int, int)  # remaining_seconds, total_seconds
    phase_changed = pyqtSignal(str)  # idle|running|paused|expired
    expired = pyqtSignal()

    def __init__(self, timer: CountdownTimer | None = None, interval_ms: int = 1000) -> None:
        super().__init__()
        self._countdown = timer or CountdownTimer(DEFAULT_DURATION)
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_tick)

    # --- Properties -----------------------------------------------------
    @property
    def countdown(self) -> CountdownTimer:
        return self._countdown

    # --- Public API -----------------------------------------------------
    def set_duration_parts(self, minutes: int, seconds: int) -> bool:
        if not self._countdown.set_duration_parts(minutes, seconds):
            return False
        self._publish()
        return True

    def set_duration(self, seconds: int) -> bool:
        if not self._countdown.set_duration(seconds):
            return False
        self._publish()
        return True

    def start(self) -> bool:
        if not self._countdown.start():
            return False
        self._timer.start()
        self._publish()
        return True

    def pause(self) -> bool:
        if not self._countdown.pause():
            return False
        self._timer.stop()
        self._publish()
        return True

    def reset(self) -> None:
        self._timer.stop()
        self._countdown.reset()
        self._publish()

    # --- Internal -------------------------------------------------------
    def _on_tick(self) -> None:
        did_expire = self._countdown.tick()
        if did_expire:
            self._timer.stop()
        self._publish()
        if did_expire:
            self.expired.emit()

    def _publish(self) -> None:
        c = self._countdown
        self.tick.emit(c.remaining_seconds, c.total_seconds)
        self.phase_changed.emit(c.phase.value)


__all__ = ["CountdownService"]
