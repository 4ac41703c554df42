from datetime import datetime, timedelta

import pytest

from atmospheric_clock.alarm_scheduler import (
    AlarmScheduler,
    AlarmSchemeError,
    build_rules,
    decide,
    next_occurrence,
    trigger_rules,
)
from atmospheric_clock.models import AlarmFireRecord, AlarmPreset, RecurrenceClass

# 2025-01-04 is a Saturday, 2025-01-05 a Sunday, 2025-01-06 a Monday
SATURDAY = datetime(2025, 1, 4)
SUNDAY = datetime(2025, 1, 5)
MONDAY = datetime(2025, 1, 6)


class MemoryRepo:
    def __init__(self, presets=None):
        self.store = {p.recurrence: p for p in (presets or [])}
        self.saved = []

    def load(self, recurrence):
        return self.store.get(recurrence)

    def save(self, preset):
        self.store[preset.recurrence] = preset
        self.saved.append(preset)


class RecordingBackend:
    def __init__(self):
        self.calls = []

    def reschedule(self, rules):
        self.calls.append(list(rules))


def weekend(hour=9, minute=0, enabled=True):
    return AlarmPreset(RecurrenceClass.WEEKEND, hour, minute, enabled)


def weekday(hour=7, minute=0, enabled=True):
    return AlarmPreset(RecurrenceClass.WEEKDAY, hour, minute, enabled)


def test_weekend_preset_fires_on_sunday_morning():
    record = AlarmFireRecord()
    now = SUNDAY.replace(hour=9, minute=0, second=30)
    decision = decide(now, [weekend()], record)
    assert decision.fire
    assert decision.title == "Weekend Alarm"
    assert record.last_fired == now


def test_weekend_preset_debounced_inside_window():
    record = AlarmFireRecord(last_fired=SUNDAY.replace(hour=9, minute=0, second=30))
    decision = decide(SUNDAY.replace(hour=9, minute=2), [weekend()], record)
    assert not decision.fire
    assert record.last_fired == SUNDAY.replace(hour=9, minute=0, second=30)


def test_weekend_preset_silent_on_monday():
    decision = decide(MONDAY.replace(hour=9, minute=0, second=30), [weekend()], AlarmFireRecord())
    assert not decision.fire


def test_weekday_preset_never_fires_on_saturday():
    preset = weekday()
    for minute_of_day in range(0, 24 * 60):
        now = SATURDAY + timedelta(minutes=minute_of_day)
        assert not decide(now, [preset], AlarmFireRecord()).fire


def test_match_tolerates_one_minute_either_side():
    preset = weekday(7, 0)
    assert decide(MONDAY.replace(hour=6, minute=59), [preset], AlarmFireRecord()).fire
    assert decide(MONDAY.replace(hour=7, minute=1, second=59), [preset], AlarmFireRecord()).fire
    assert not decide(MONDAY.replace(hour=7, minute=2), [preset], AlarmFireRecord()).fire
    assert not decide(MONDAY.replace(hour=6, minute=58), [preset], AlarmFireRecord()).fire


def test_disabled_preset_never_fires():
    assert not decide(MONDAY.replace(hour=7), [weekday(enabled=False)], AlarmFireRecord()).fire


def test_fires_once_within_window_then_again_after():
    preset = AlarmPreset(RecurrenceClass.DAILY, 7, 0, True)
    record = AlarmFireRecord()
    t0 = MONDAY.replace(hour=7, minute=0, second=0)
    assert decide(t0, [preset], record).fire
    assert not decide(t0, [preset], record).fire
    assert not decide(t0 + timedelta(seconds=30), [preset], record).fire
    # Same minute still matching after the window elapses fires again
    later = AlarmFireRecord(last_fired=t0 - timedelta(minutes=2))
    assert decide(t0, [preset], later).fire


def test_single_record_fires_again_once_debounce_elapses():
    preset = weekday(7, 0)
    record = AlarmFireRecord()
    first = MONDAY.replace(hour=6, minute=59)
    assert decide(first, [preset], record).fire
    assert not decide(MONDAY.replace(hour=7, minute=0, second=30), [preset], record).fire
    assert record.last_fired == first
    # 07:01 is still inside the match tolerance and exactly two minutes later
    again = MONDAY.replace(hour=7, minute=1)
    assert decide(again, [preset], record).fire
    assert record.last_fired == again


def test_two_candidates_is_a_no_op():
    daily = AlarmPreset(RecurrenceClass.DAILY, 7, 0, True)
    decision = decide(MONDAY.replace(hour=7), [daily, weekday()], AlarmFireRecord())
    assert not decision.fire


def test_rule_enumeration_counts_and_days():
    daily = trigger_rules(AlarmPreset(RecurrenceClass.DAILY, 6, 30, True))
    assert [r.weekday for r in daily] == [None]
    wd = trigger_rules(weekday(7, 15))
    assert [r.weekday for r in wd] == [0, 1, 2, 3, 4]
    assert all((r.hour, r.minute) == (7, 15) for r in wd)
    we = trigger_rules(weekend())
    assert [r.weekday for r in we] == [5, 6]
    assert all(r.title == "Weekend Alarm" for r in we)
    assert trigger_rules(weekend(enabled=False)) == []
    assert len(build_rules([weekday(), weekend()])) == 7


def test_next_occurrence():
    wd_rules = trigger_rules(weekday(7, 0))
    monday_rule = wd_rules[0]
    assert next_occurrence(monday_rule, MONDAY.replace(hour=6, minute=59, second=30)) == MONDAY.replace(hour=7)
    # exactly at the trigger minute -> following week
    assert next_occurrence(monday_rule, MONDAY.replace(hour=7)) == MONDAY.replace(hour=7) + timedelta(days=7)
    friday_rule = wd_rules[4]
    assert next_occurrence(friday_rule, SATURDAY) == datetime(2025, 1, 10, 7, 0)
    daily_rule = trigger_rules(AlarmPreset(RecurrenceClass.DAILY, 7, 0, True))[0]
    assert next_occurrence(daily_rule, MONDAY.replace(hour=8)) == datetime(2025, 1, 7, 7, 0)


def test_scheduler_loads_defaults_when_repo_empty():
    scheduler = AlarmScheduler(MemoryRepo())
    assert scheduler.preset(RecurrenceClass.DAILY) == AlarmPreset(RecurrenceClass.DAILY, 7, 0, False)
    assert scheduler.preset(RecurrenceClass.WEEKDAY) == AlarmPreset(RecurrenceClass.WEEKDAY, 7, 0, True)
    assert scheduler.preset(RecurrenceClass.WEEKEND) == AlarmPreset(RecurrenceClass.WEEKEND, 9, 0, True)


def test_set_preset_persists_and_regenerates_all_rules():
    repo = MemoryRepo()
    backend = RecordingBackend()
    scheduler = AlarmScheduler(repo, backend)
    assert scheduler.set_preset(RecurrenceClass.WEEKDAY, 6, 45, True)
    assert repo.saved[-1] == AlarmPreset(RecurrenceClass.WEEKDAY, 6, 45, True)
    rules = backend.calls[-1]
    assert len(rules) == 7
    assert {(r.hour, r.minute) for r in rules if r.weekday in range(5)} == {(6, 45)}
    # Changing the time again must not leave the 06:45 triggers around
    scheduler.set_time(RecurrenceClass.WEEKDAY, 8, 0)
    assert not any((r.hour, r.minute) == (6, 45) for r in backend.calls[-1])


def test_invalid_time_rejected_and_preset_unchanged():
    repo = MemoryRepo()
    backend = RecordingBackend()
    scheduler = AlarmScheduler(repo, backend)
    assert len(backend.calls) == 1
    before = scheduler.preset(RecurrenceClass.WEEKEND)
    assert not scheduler.set_preset(RecurrenceClass.WEEKEND, 24, 0, True)
    assert not scheduler.set_time(RecurrenceClass.WEEKEND, 9, 60)
    assert not scheduler.set_time(RecurrenceClass.WEEKEND, -1, 0)
    assert scheduler.preset(RecurrenceClass.WEEKEND) == before
    assert repo.saved == []
    assert len(backend.calls) == 1


def test_set_enabled_keeps_time():
    scheduler = AlarmScheduler(MemoryRepo([weekend(10, 30, True)]))
    scheduler.set_enabled(RecurrenceClass.WEEKEND, False)
    assert scheduler.preset(RecurrenceClass.WEEKEND) == weekend(10, 30, False)


def test_daily_scheme_ignores_weekly_presets():
    scheduler = AlarmScheduler(MemoryRepo(), scheme="daily")
    # default daily preset is disabled; weekday default (07:00, on) must not fire
    assert not scheduler.poll(MONDAY.replace(hour=7)).fire
    scheduler.set_enabled(RecurrenceClass.DAILY, True)
    decision = scheduler.poll(MONDAY.replace(hour=7))
    assert decision.fire and decision.title == "Alarm"
    assert [r.weekday for r in scheduler.rules()] == [None]


def test_poll_uses_time_provider_and_debounces():
    now = SUNDAY.replace(hour=9, minute=0, second=30)
    scheduler = AlarmScheduler(MemoryRepo(), time_provider=lambda: now)
    assert scheduler.poll().fire
    assert not scheduler.poll().fire
    assert scheduler.fire_record.last_fired == now


def test_unknown_scheme_rejected():
    with pytest.raises(AlarmSchemeError):
        AlarmScheduler(MemoryRepo(), scheme="hourly")


def test_attach_backend_pushes_current_rules():
    scheduler = AlarmScheduler(MemoryRepo())
    backend = RecordingBackend()
    scheduler.attach_backend(backend)
    assert len(backend.calls) == 1
    assert len(backend.calls[0]) == 7


@pytest.mark.parametrize(
    "hour, minute, enabled",
    [(7.5, 0, True), ("7", 0, True), (7, 0.0, True), (None, 0, True), (True, 0, True), (7, 0, "false")],
)
def test_non_integer_edits_rejected_without_side_effects(hour, minute, enabled):
    repo = MemoryRepo()
    backend = RecordingBackend()
    scheduler = AlarmScheduler(repo, backend)
    before = scheduler.preset(RecurrenceClass.WEEKEND)
    assert scheduler.set_preset(RecurrenceClass.WEEKEND, hour, minute, enabled) is False
    assert scheduler.preset(RecurrenceClass.WEEKEND) == before
    assert repo.saved == []
    assert len(backend.calls) == 1


class FailingRepo(MemoryRepo):
    def save(self, preset):
        raise OSError("disk full")


def test_failed_save_leaves_preset_and_rules_untouched():
    backend = RecordingBackend()
    scheduler = AlarmScheduler(FailingRepo(), backend)
    with pytest.raises(OSError):
        scheduler.set_preset(RecurrenceClass.WEEKDAY, 6, 30, True)
    assert scheduler.preset(RecurrenceClass.WEEKDAY) == weekday(7, 0)
    assert len(backend.calls) == 1
