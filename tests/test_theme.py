from datetime import datetime

import pytest

from atmospheric_clock.theme import BAND_COLORS, Band, Color, band_for_hour, sample, sample_hour


def test_every_minute_of_day_maps_to_exactly_one_band_pair():
    pairs = set(BAND_COLORS.values())
    seen = set()
    for h in range(24):
        for m in range(60):
            s = sample(datetime(2025, 1, 6, h, m))
            assert (s.start_color, s.end_color) in pairs
            assert BAND_COLORS[s.band] == (s.start_color, s.end_color)
            seen.add(s.band)
    assert seen == set(Band)


@pytest.mark.parametrize(
    "hour,band",
    [
        (0.0, Band.NIGHT),
        (5.99, Band.NIGHT),
        (6.0, Band.SUNRISE),
        (8.99, Band.SUNRISE),
        (9.0, Band.DAY),
        (16.99, Band.DAY),
        (17.0, Band.DUSK),
        (19.99, Band.DUSK),
        (20.0, Band.NIGHT),
        (23.99, Band.NIGHT),
    ],
)
def test_boundaries_belong_to_later_band(hour, band):
    assert band_for_hour(hour) is band


def test_night_indicator_follows_band():
    for h in range(24):
        for m in (0, 30, 59):
            s = sample(datetime(2025, 1, 6, h, m))
            assert s.is_night_indicator_visible == (s.band is Band.NIGHT)


def test_out_of_range_hours_wrap():
    assert sample_hour(24.0).band is Band.NIGHT
    assert sample_hour(30.5).band is Band.SUNRISE
    assert sample_hour(-1.0).band is Band.NIGHT
    assert sample_hour(-10.0).band is Band.DAY


def test_minutes_count_toward_hour_fraction():
    assert sample(datetime(2025, 1, 6, 5, 59)).band is Band.NIGHT
    assert sample(datetime(2025, 1, 6, 19, 59)).band is Band.DUSK


def test_text_palette_bright_during_daylight():
    morning = sample_hour(6.5)
    late_dusk = sample_hour(18.5)
    assert morning.text_color != late_dusk.text_color
    assert sample_hour(17.5).text_color == morning.text_color


def test_color_mix_and_name():
    a = Color(0, 0, 0)
    b = Color(255, 100, 50)
    assert a.mix(b, 0.0) == a
    assert a.mix(b, 1.0) == b
    assert a.mix(b, 0.5) == Color(128, 50, 25)
    assert a.mix(b, 2.0) == b
    assert Color(10, 14, 26).name() == "#0a0e1a"
