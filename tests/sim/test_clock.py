from roamly.sim import clock
from roamly.sim.clock import FRAME_S, RealtimePacer, ms, to_ms


def test_ms_conversions():
    assert ms(250) == 0.25
    assert ms(2500) == 2.5
    assert to_ms(0.2) == 200.0
    assert abs(FRAME_S - 1 / 60) < 1e-12


def test_realtime_pacer_sleeps_until_due(monkeypatch):
    now = [100.0]
    slept = []

    def fake_sleep(s):
        slept.append(s)
        now[0] += s

    monkeypatch.setattr(clock.time, "monotonic", lambda: now[0])
    monkeypatch.setattr(clock.time, "sleep", fake_sleep)

    pacer = RealtimePacer()
    pacer.wait_until(0.5)
    assert slept == [0.5]
    # already past due: no sleep
    now[0] += 1.0
    pacer.wait_until(1.0)
    assert slept == [0.5]


def test_realtime_pacer_speed_factor(monkeypatch):
    now = [0.0]
    slept = []

    def fake_sleep(s):
        slept.append(s)
        now[0] += s

    monkeypatch.setattr(clock.time, "monotonic", lambda: now[0])
    monkeypatch.setattr(clock.time, "sleep", fake_sleep)

    pacer = RealtimePacer(speed=4.0)
    pacer.wait_until(2.0)
    assert slept == [0.5]
    assert pacer.elapsed() == 2.0
