from __future__ import annotations

"""Stopwatch tab: elapsed display, Start/Lap/Stop and the lap list."""

from datetime import timedelta

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QListWidget, QPushButton, QVBoxLayout, QWidget

from .formatting import format_lap, format_stopwatch
from .stopwatch_service import StopwatchService


class StopwatchPage(QWidget):  # pragma: no cover UI heavy
    def __init__(self, service: StopwatchService):
        super().__init__()
        self._service = service
        self.display = QLabel(format_stopwatch(timedelta(0)))
        self.display.setAlignment(Qt.AlignmentFlag.AlignCenter)
        font = self.display.font()
        font.setPointSize(40)
        font.setBold(True)
        self.display.setFont(font)

        self.btn_start = QPushButton("Start")
        self.btn_lap = QPushButton("Lap")
        self.btn_stop = QPushButton("Stop")
        btn_row = QHBoxLayout()
        for b in (self.btn_start, self.btn_lap, self.btn_stop):
            btn_row.addWidget(b)

        self.laps = QListWidget()
        self.laps.setMaximumHeight(220)
        self.laps.hide()

        layout = QVBoxLayout(self)
        layout.addWidget(self.display)
        layout.addLayout(btn_row)
        layout.addWidget(self.laps)
        layout.addStretch(1)

        self.btn_start.clicked.connect(service.start)
        self.btn_lap.clicked.connect(service.lap)
        self.btn_stop.clicked.connect(service.stop)
        service.elapsed.connect(lambda s: self.display.setText(format_stopwatch(timedelta(seconds=s))))
        service.lap_recorded.connect(self._on_lap)
        service.laps_cleared.connect(self._on_cleared)
        service.state_changed.connect(self._sync_buttons)
        self._sync_buttons(service.recorder.running)

    def _on_lap(self, ordinal: int, seconds: float) -> None:
        self.laps.insertItem(0, format_lap(ordinal, timedelta(seconds=seconds)))
        self.laps.show()

    def _on_cleared(self) -> None:
        self.laps.clear()
        self.laps.hide()

    def _sync_buttons(self, running: bool) -> None:
        self.btn_start.setVisible(not running)
        self.btn_lap.setVisible(running)
        self.btn_stop.setVisible(running)


__all__ = ["StopwatchPage"]
