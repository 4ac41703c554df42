from __future__ import annotations

"""Desktop notification collaborator.

 - ``request_permission`` asks the platform once (tray availability + balloon
   support) and caches the answer in the settings table, so later launches do
   not probe again.
 - ``fire`` is fire-and-forget: a tray balloon plus an in-window toast. When
   permission was denied the call is dropped and only logged; the alarm page
   shows a hint instead.
"""

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtGui import QIcon
from PyQt6.QtWidgets import QSystemTrayIcon, QWidget

from .database_manager import DatabaseManager
from .repositories import get_setting, set_setting
from .toast import show_toast

_log = logging.getLogger(__name__)

PERMISSION_KEY = "notifications.permission"
APP_TITLE = "Atmospheric Clock"


def _platform_supports_notifications() -> bool:  # pragma: no cover - platform specific
    return QSystemTrayIcon.isSystemTrayAvailable() and QSystemTrayIcon.supportsMessages()


class Notifier(QObject):
    fired = pyqtSignal(str, str)  # title, body
    dropped = pyqtSignal(str, str)
    permission_resolved = pyqtSignal(bool)

    def __init__(
        self,
        db: DatabaseManager,
        parent: Optional[QWidget] = None,
        probe: Optional[Callable[[], bool]] = None,
    ) -> None:
        super().__init__(parent)
        self._db = db
        self._parent_widget = parent
        self._probe = probe or _platform_supports_notifications
        self._granted: Optional[bool] = None
        self._tray: Optional[QSystemTrayIcon] = None

    # --- Permission -----------------------------------------------------
    def request_permission(self) -> bool:
        if self._granted is not None:
            return self._granted
        cached = get_setting(self._db, PERMISSION_KEY)
        if cached in ("1", "0"):
            self._granted = cached == "1"
        else:
            self._granted = bool(self._probe())
            set_setting(self._db, PERMISSION_KEY, "1" if self._granted else "0")
            _log.info("notification permission resolved", extra={"_json_granted": self._granted})
        self.permission_resolved.emit(self._granted)
        return self._granted

    # --- Firing ---------------------------------------------------------
    def fire(self, title: str, body: str) -> None:
        if not self.request_permission():
            _log.info("notification dropped (no permission): %s", title)
            self.dropped.emit(title, body)
            return
        self._show(title, body)
        self.fired.emit(title, body)

    def _show(self, title: str, body: str) -> None:  # pragma: no cover - UI
        if self._parent_widget is None:
            return
        show_toast(self._parent_widget, f"{title}: {body}" if body else title)
        if self._tray is None:
            self._tray = QSystemTrayIcon(self._parent_widget)
            self._tray.setToolTip(APP_TITLE)
            self._tray.setIcon(QIcon())
            self._tray.setVisible(True)
        self._tray.showMessage(title, body, QSystemTrayIcon.MessageIcon.Information, 5000)


__all__ = ["Notifier", "PERMISSION_KEY"]
