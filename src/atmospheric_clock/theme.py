from __future__ import annotations

"""Time-of-day theme engine.

Maps a timestamp to a sky gradient (start/end color) and decides whether the
moon or the sun is shown. Four half-open bands partition the day:

 - Night   [20, 24) and [0, 6)
 - Sunrise [6, 9)
 - Day     [9, 17)
 - Dusk    [17, 20)

A sample taken exactly on a boundary belongs to the later band. Everything in
here is pure; the window decides how often to sample and how to animate
between two samples (see ``Color.mix``).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Band(str, Enum):
    NIGHT = "night"
    SUNRISE = "sunrise"
    DAY = "day"
    DUSK = "dusk"


@dataclass(slots=True, frozen=True)
class Color:
    r: int
    g: int
    b: int

    def name(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def mix(self, other: "Color", t: float) -> "Color":
        t = min(1.0, max(0.0, t))
        return Color(
            round(self.r + (other.r - self.r) * t),
            round(self.g + (other.g - self.g) * t),
            round(self.b + (other.b - self.b) * t),
        )


# (lower bound inclusive, band); Night wraps so it is listed at both ends.
_BAND_STARTS: tuple[tuple[float, Band], ...] = (
    (20.0, Band.NIGHT),
    (17.0, Band.DUSK),
    (9.0, Band.DAY),
    (6.0, Band.SUNRISE),
    (0.0, Band.NIGHT),
)

BAND_COLORS: dict[Band, tuple[Color, Color]] = {
    Band.NIGHT: (Color(10, 14, 26), Color(26, 34, 53)),
    Band.SUNRISE: (Color(232, 168, 56), Color(135, 206, 235)),
    Band.DAY: (Color(91, 163, 246), Color(179, 224, 255)),
    Band.DUSK: (Color(255, 126, 95), Color(44, 62, 80)),
}

BRIGHT_TEXT = (Color(0x1E, 0x29, 0x3B), Color(0x64, 0x74, 0x8B), Color(0xE2, 0xE8, 0xF0))
DARK_TEXT = (Color(0xF1, 0xF5, 0xF9), Color(0x94, 0xA3, 0xB8), Color(0x33, 0x41, 0x55))


@dataclass(slots=True, frozen=True)
class ThemeSample:
    band: Band
    start_color: Color
    end_color: Color
    is_night_indicator_visible: bool
    text_color: Color
    muted_text_color: Color
    border_color: Color


def hour_fraction(ts: datetime) -> float:
    return ts.hour + ts.minute / 60


def band_for_hour(hour: float) -> Band:
    hour = hour % 24
    for lower, band in _BAND_STARTS:
        if hour >= lower:
            return band
    return Band.NIGHT  # unreachable for finite input


def sample_hour(hour: float) -> ThemeSample:
    hour = hour % 24
    band = band_for_hour(hour)
    start, end = BAND_COLORS[band]
    # text palette follows daylight, which is wider than the non-night bands
    text, muted, border = BRIGHT_TEXT if 6 <= hour < 18 else DARK_TEXT
    return ThemeSample(
        band=band,
        start_color=start,
        end_color=end,
        is_night_indicator_visible=band is Band.NIGHT,
        text_color=text,
        muted_text_color=muted,
        border_color=border,
    )


def sample(ts: datetime) -> ThemeSample:
    return sample_hour(hour_fraction(ts))


__all__ = [
    "Band",
    "Color",
    "ThemeSample",
    "BAND_COLORS",
    "hour_fraction",
    "band_for_hour",
    "sample_hour",
    "sample",
]
