from atmospheric_clock.notifier import PERMISSION_KEY, Notifier
from atmospheric_clock.repositories import get_setting


def test_permission_probed_once_and_cached(db, qtbot):
    calls = {"n": 0}

    def probe():
        calls["n"] += 1
        return True

    notifier = Notifier(db, probe=probe)
    assert notifier.request_permission()
    assert notifier.request_permission()
    assert calls["n"] == 1
    assert get_setting(db, PERMISSION_KEY) == "1"
    # Simulate new session: cached answer used, no new probe
    again = Notifier(db, probe=probe)
    assert again.request_permission()
    assert calls["n"] == 1


def test_denied_permission_drops_fire(db, qtbot):
    notifier = Notifier(db, probe=lambda: False)
    with qtbot.assertNotEmitted(notifier.fired):
        with qtbot.waitSignal(notifier.dropped) as blocker:
            notifier.fire("Alarm", "Time to get up!")
    assert blocker.args == ["Alarm", "Time to get up!"]


def test_granted_permission_fires(db, qtbot):
    notifier = Notifier(db, probe=lambda: True)
    with qtbot.waitSignal(notifier.fired) as blocker:
        notifier.fire("Weekend Alarm", "body")
    assert blocker.args == ["Weekend Alarm", "body"]
