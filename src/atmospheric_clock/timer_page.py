from __future__ import annotations

"""Timer tab with a circular countdown ring and minute/second steppers."""

from PyQt6.QtCore import QRectF, Qt
from PyQt6.QtGui import QColor, QPainter, QPen
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from .countdown_service import CountdownService
from .formatting import format_timer
from .toast import show_toast


class CountdownRing(QWidget):  # pragma: no cover - painting
    def __init__(self) -> None:
        super().__init__()
        self._ratio = 1.0
        self._text = ""
        self.setMinimumSize(240, 240)

    def set_state(self, ratio: float, text: str) -> None:
        self._ratio = ratio
        self._text = text
        self.update()

    def paintEvent(self, event) -> None:  # noqa: N802
        side = min(self.width(), self.height()) - 24
        rect = QRectF((self.width() - side) / 2, (self.height() - side) / 2, side, side)
        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.Antialiasing)
        track = QPen(QColor(255, 255, 255, 77), 12)
        p.setPen(track)
        p.drawEllipse(rect)
        arc = QPen(QColor(255, 255, 255), 12)
        arc.setCapStyle(Qt.PenCapStyle.RoundCap)
        p.setPen(arc)
        # Qt angles are 1/16 degree, counter-clockwise from 3 o'clock
        p.drawArc(rect, 90 * 16, int(-360 * 16 * self._ratio))
        font = p.font()
        font.setPointSize(32)
        font.setBold(True)
        p.setFont(font)
        p.drawText(rect, Qt.AlignmentFlag.AlignCenter, self._text)
        p.end()


class TimerPage(QWidget):  # pragma: no cover UI heavy
    def __init__(self, service: CountdownService):
        super().__init__()
        self._service = service
        self.ring = CountdownRing()

        self.min_spin = QSpinBox(); self.min_spin.setRange(0, 120); self.min_spin.setSuffix(" min")
        self.sec_spin = QSpinBox(); self.sec_spin.setRange(0, 59); self.sec_spin.setSuffix(" s")
        self.stepper = QWidget()
        step_row = QHBoxLayout(self.stepper)
        step_row.addWidget(QLabel("Minutes:")); step_row.addWidget(self.min_spin)
        step_row.addWidget(QLabel("Seconds:")); step_row.addWidget(self.sec_spin)

        self.btn_start = QPushButton("Start")
        self.btn_pause = QPushButton("Pause")
        self.btn_reset = QPushButton("Reset")
        btn_row = QHBoxLayout()
        for b in (self.btn_start, self.btn_pause, self.btn_reset):
            btn_row.addWidget(b)

        layout = QVBoxLayout(self)
        layout.addWidget(self.ring, 1)
        layout.addWidget(self.stepper)
        layout.addLayout(btn_row)

        total = service.countdown.total_seconds
        self.min_spin.setValue(total // 60)
        self.sec_spin.setValue(total % 60)

        self.min_spin.valueChanged.connect(self._on_stepper)
        self.sec_spin.valueChanged.connect(self._on_stepper)
        self.btn_start.clicked.connect(service.start)
        self.btn_pause.clicked.connect(service.pause)
        self.btn_reset.clicked.connect(service.reset)
        service.tick.connect(self._on_tick)
        service.phase_changed.connect(lambda _p: self._sync_buttons())
        service.expired.connect(lambda: show_toast(self, "Time's up!"))
        self._on_tick(service.countdown.remaining_seconds, total)
        self._sync_buttons()

    def _on_stepper(self) -> None:
        self._service.set_duration_parts(self.min_spin.value(), self.sec_spin.value())

    def _on_tick(self, remaining: int, total: int) -> None:
        self.ring.set_state(remaining / total, format_timer(remaining))

    def _sync_buttons(self) -> None:
        c = self._service.countdown
        self.stepper.setVisible(not c.running)
        self.btn_start.setVisible(not c.running)
        self.btn_start.setText("Resume" if c.can_resume else "Start")
        self.btn_pause.setVisible(c.running)
        self.btn_reset.setVisible(c.running or c.remaining_seconds != c.total_seconds)


__all__ = ["TimerPage", "CountdownRing"]
