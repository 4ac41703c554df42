"""Display formatting helpers for the clock, timer and stopwatch."""

from datetime import datetime, timedelta


def format_clock(ts: datetime) -> str:
    h12 = ts.hour % 12 or 12
    suffix = "AM" if ts.hour < 12 else "PM"
    return f"{h12}:{ts.minute:02d} {suffix}"


def format_timer(seconds: int) -> str:
    return f"{seconds // 60}:{seconds % 60:02d}"


def format_stopwatch(elapsed: timedelta) -> str:
    total_ms = elapsed // timedelta(milliseconds=1)
    m = total_ms // 60000
    s = (total_ms % 60000) // 1000
    ms = total_ms % 1000
    return f"{m:02d}:{s:02d}.{ms:03d}"


def format_lap(ordinal: int, duration: timedelta) -> str:
    return f"Lap {ordinal} — {format_stopwatch(duration)}"


__all__ = ["format_clock", "format_timer", "format_stopwatch", "format_lap"]
