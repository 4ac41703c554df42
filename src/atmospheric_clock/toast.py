from __future__ import annotations

"""Toast overlay for alarm and timer messages, tinted with the current sky."""

from datetime import datetime
from typing import Optional

from PyQt6.QtCore import QTimer, Qt
from PyQt6.QtWidgets import QLabel, QWidget

from .theme import ThemeSample, sample

TOAST_TIMEOUT_MS = 4000
TOAST_TOP_MARGIN = 24


def toast_stylesheet(theme: ThemeSample) -> str:
    # Sits on the gradient, so pick the band's end colour as the backdrop
    bg = theme.end_color
    return (
        f"background: rgba({bg.r},{bg.g},{bg.b},0.85);"
        f" color: {theme.text_color.name()};"
        f" border: 1px solid {theme.border_color.name()};"
        " padding: 8px 14px; border-radius: 12px;"
    )


class Toast(QLabel):
    def __init__(self, parent: QWidget, message: str, theme: ThemeSample, timeout_ms: int = TOAST_TIMEOUT_MS):
        super().__init__(parent)
        self.setText(message)
        self.setStyleSheet(toast_stylesheet(theme))
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.adjustSize()
        self.move(max(0, (parent.width() - self.width()) // 2), TOAST_TOP_MARGIN)
        self.show()
        QTimer.singleShot(timeout_ms, self.close)


def show_toast(
    parent: QWidget,
    message: str,
    theme: Optional[ThemeSample] = None,
    timeout_ms: int = TOAST_TIMEOUT_MS,
) -> Toast:
    return Toast(parent, message, theme or sample(datetime.now()), timeout_ms)


__all__ = ["Toast", "show_toast", "toast_stylesheet"]
