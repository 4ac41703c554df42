from __future__ import annotations

"""Alarm tab: one time picker + toggle per preset of the active scheme."""

from PyQt6.QtCore import QTime
from PyQt6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QTimeEdit,
    QVBoxLayout,
    QWidget,
)

from .alarm_scheduler import AlarmScheduler, SCHEMES
from .models import RecurrenceClass
from .notifier import Notifier
from .toast import show_toast

LABELS = {
    RecurrenceClass.DAILY: "Every day",
    RecurrenceClass.WEEKDAY: "Weekdays (Mon–Fri)",
    RecurrenceClass.WEEKEND: "Weekend (Sat–Sun)",
}


class AlarmPage(QWidget):  # pragma: no cover UI heavy
    def __init__(self, scheduler: AlarmScheduler, notifier: Notifier):
        super().__init__()
        self._scheduler = scheduler
        self._notifier = notifier
        self._rows: dict[RecurrenceClass, tuple[QTimeEdit, QCheckBox]] = {}

        layout = QVBoxLayout(self)
        for recurrence in SCHEMES[scheduler.scheme]:
            preset = scheduler.preset(recurrence)
            row = QHBoxLayout()
            row.addWidget(QLabel(LABELS[recurrence]))
            time_edit = QTimeEdit(QTime(preset.hour, preset.minute))
            time_edit.setDisplayFormat("HH:mm")
            enabled_cb = QCheckBox("On")
            enabled_cb.setChecked(preset.enabled)
            row.addWidget(time_edit)
            row.addWidget(enabled_cb)
            row.addStretch(1)
            layout.addLayout(row)
            self._rows[recurrence] = (time_edit, enabled_cb)
            time_edit.timeChanged.connect(lambda t, r=recurrence: self._on_time_changed(r, t))
            enabled_cb.toggled.connect(lambda on, r=recurrence: self._on_toggled(r, on))

        self.permission_hint = QLabel("Enable notifications in your system settings for alarms.")
        self.permission_hint.setObjectName("muted")
        self.permission_hint.hide()
        layout.addWidget(self.permission_hint)
        layout.addStretch(1)

        if not self._notifier.request_permission():
            self.permission_hint.show()

    def _on_time_changed(self, recurrence: RecurrenceClass, t: QTime) -> None:
        if not self._scheduler.set_time(recurrence, t.hour(), t.minute()):
            show_toast(self, "Invalid alarm time")
            self._restore(recurrence)

    def _on_toggled(self, recurrence: RecurrenceClass, on: bool) -> None:
        self._scheduler.set_enabled(recurrence, on)

    def _restore(self, recurrence: RecurrenceClass) -> None:
        preset = self._scheduler.preset(recurrence)
        time_edit, enabled_cb = self._rows[recurrence]
        time_edit.blockSignals(True)
        time_edit.setTime(QTime(preset.hour, preset.minute))
        time_edit.blockSignals(False)
        enabled_cb.blockSignals(True)
        enabled_cb.setChecked(preset.enabled)
        enabled_cb.blockSignals(False)


__all__ = ["AlarmPage"]
