from __future__ import annotations

import sys
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from PyQt6.QtCore import QTimer, QVariantAnimation, Qt
from PyQt6.QtWidgets import (
    QApplication,
    QLabel,
    QMainWindow,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from .alarm_backends import CalendarAlarmBackend, PollingAlarmBackend
from .alarm_page import AlarmPage
from .alarm_scheduler import AlarmScheduler
from .config import AppConfig
from .countdown import CountdownTimer
from .countdown_service import CountdownService
from .database_manager import DBConfig, DatabaseManager
from .formatting import format_clock
from .logging_setup import configure_logging
from .notifier import Notifier
from .repositories import SqlitePresetRepository
from .stopwatch_page import StopwatchPage
from .stopwatch_service import StopwatchService
from .theme import Color, ThemeSample, sample
from .timer_page import TimerPage


APP_NAME = "Atmospheric Clock"

AlarmBackendType = Union[PollingAlarmBackend, CalendarAlarmBackend]


@dataclass(slots=True)
class AppState:
    config: AppConfig
    db: DatabaseManager
    scheduler: AlarmScheduler
    countdown: CountdownService
    stopwatch: StopwatchService


def get_app_state(config: Optional[AppConfig] = None) -> AppState:
    config = config or AppConfig.from_env()
    config.data_dir.mkdir(parents=True, exist_ok=True)
    # Logging first
    configure_logging(config.data_dir, config.log_level)
    db = DatabaseManager(DBConfig(path=config.db_path))
    db.init_db()
    scheduler = AlarmScheduler(SqlitePresetRepository(db), scheme=config.alarm_scheme)
    countdown = CountdownService(CountdownTimer(config.default_countdown_seconds))
    stopwatch = StopwatchService(refresh_ms=config.stopwatch_refresh_ms)
    logging.getLogger(__name__).info(
        "app_state_created",
        extra={"_json_scheme": config.alarm_scheme, "_json_backend": config.alarm_backend},
    )
    return AppState(config=config, db=db, scheduler=scheduler, countdown=countdown, stopwatch=stopwatch)


def theme_stylesheet(theme: ThemeSample, start: Color, end: Color) -> str:
    return f"""
        QMainWindow {{
            background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                stop:0 {start.name()}, stop:1 {end.name()});
        }}
        QWidget {{ color: {theme.text_color.name()}; background: transparent; }}
        QLabel#muted {{ color: {theme.muted_text_color.name()}; }}
        QTabWidget::pane {{ border: 1px solid {theme.border_color.name()}; border-radius: 16px; }}
        QPushButton, QSpinBox, QTimeEdit, QListWidget {{
            background: rgba(255,255,255,0.15);
            border: 1px solid {theme.border_color.name()};
            border-radius: 10px; padding: 6px 12px;
        }}
        QPushButton:hover {{ background: rgba(255,255,255,0.25); }}
    """


class MainWindow(QMainWindow):
    def __init__(self, state: AppState) -> None:  # pragma: no cover - UI
        super().__init__()
        self.state = state
        self.setWindowTitle(APP_NAME)
        self.resize(480, 720)
        self.notifier = Notifier(state.db, self)
        self.alarm_backend = self._build_alarm_backend()

        self.clock_label = QLabel(format_clock(datetime.now()))
        self.clock_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        font = self.clock_label.font()
        font.setPointSize(36)
        font.setBold(True)
        self.clock_label.setFont(font)
        self.celestial_label = QLabel("")
        self.celestial_label.setAlignment(Qt.AlignmentFlag.AlignRight)

        self.tabs = QTabWidget()
        self.tabs.addTab(AlarmPage(state.scheduler, self.notifier), "Alarm")
        self.tabs.addTab(TimerPage(state.countdown), "Timer")
        self.tabs.addTab(StopwatchPage(state.stopwatch), "Stopwatch")

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.addWidget(self.celestial_label)
        layout.addWidget(self.clock_label)
        layout.addWidget(self.tabs, 1)
        self.setCentralWidget(container)

        self._clock_timer = QTimer(self)
        self._clock_timer.setInterval(1000)
        self._clock_timer.timeout.connect(lambda: self.clock_label.setText(format_clock(datetime.now())))
        self._clock_timer.start()

        # Theme: sample every minute, fade between colour pairs
        self._theme: Optional[ThemeSample] = None
        self._shown: Optional[tuple[Color, Color]] = None
        self._fade_from: tuple[Color, Color] = (Color(0, 0, 0), Color(0, 0, 0))
        self._fade = QVariantAnimation(self)
        self._fade.setDuration(state.config.theme_transition_ms)
        self._fade.setStartValue(0.0)
        self._fade.setEndValue(1.0)
        self._fade.valueChanged.connect(self._on_fade)
        self._theme_timer = QTimer(self)
        self._theme_timer.setInterval(state.config.theme_refresh_ms)
        self._theme_timer.timeout.connect(self.refresh_theme)
        self._theme_timer.start()
        self.refresh_theme()

        self.alarm_backend.start()

    def _build_alarm_backend(self) -> AlarmBackendType:  # pragma: no cover - UI
        if self.state.config.alarm_backend == "calendar":
            backend: AlarmBackendType = CalendarAlarmBackend(self.notifier.fire)
        else:
            backend = PollingAlarmBackend(
                self.state.scheduler,
                self.notifier.fire,
                interval_ms=self.state.config.alarm_poll_interval_ms,
            )
        self.state.scheduler.attach_backend(backend)
        return backend

    # --- Theme handling -----------------------------------------------
    def refresh_theme(self) -> None:  # pragma: no cover UI
        new = sample(datetime.now())
        old_colors = self._shown
        self._theme = new
        self.celestial_label.setText("☾" if new.is_night_indicator_visible else "☀")
        if old_colors is None or old_colors == (new.start_color, new.end_color):
            self._apply_colors(new.start_color, new.end_color)
            return
        self._fade_from = old_colors
        self._fade.stop()
        self._fade.start()

    def _on_fade(self, t: float) -> None:  # pragma: no cover UI
        if self._theme is None:
            return
        start0, end0 = self._fade_from
        self._apply_colors(
            start0.mix(self._theme.start_color, t),
            end0.mix(self._theme.end_color, t),
        )

    def _apply_colors(self, start: Color, end: Color) -> None:  # pragma: no cover UI
        assert self._theme is not None
        self._shown = (start, end)
        self.setStyleSheet(theme_stylesheet(self._theme, start, end))


def run(argv: Optional[list[str]] = None) -> int:
    if argv is None:
        argv = sys.argv
    app = QApplication(argv)
    app.setApplicationName(APP_NAME)
    state = get_app_state()
    window = MainWindow(state)
    window.show()
    try:
        return app.exec()
    finally:
        window.alarm_backend.stop()
        state.db.close()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(run())
