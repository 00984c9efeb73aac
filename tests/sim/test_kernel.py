# tests/sim/test_kernel.py
from dataclasses import dataclass

import pytest

from roamly.sim.event import BaseEvent
from roamly.sim.hooks import NoopHooks
from roamly.sim.kernel import Kernel


# ---- demo domain events ----
@dataclass(order=True)
class Ping(BaseEvent):
    n: int = 0


@dataclass(order=True)
class Pong(BaseEvent):
    n: int = 0


@dataclass(order=True)
class Timer(BaseEvent):
    label: str = ""


# ---- demo handlers ----
def handle_ping(ev: Ping):
    out: list[BaseEvent] = [Pong(t=ev.t, n=ev.n)]
    if ev.n > 0:
        out.append(Ping(t=ev.t + 1.0, n=ev.n - 1))
    return out


def handle_pong(ev: Pong):
    return [Timer(t=ev.t + 0.5, label=f"after pong {ev.n}")]


def handle_timer(ev: Timer):
    return []


# --- test hook that records dispatch order & times ---
class TraceHooks(NoopHooks):
    def __init__(self):
        self.trace = []
        self.cancelled = []

    def dispatch_start(self, ev, *, seq, qsize, handlers):
        self.trace.append((ev.t, type(ev).__name__))

    def cancel(self, ev, *, now, qsize):
        self.cancelled.append(type(ev).__name__)


def test_kernel_order_and_fan_out():
    hooks = TraceHooks()
    k = Kernel(hooks=hooks)
    k.on(Ping, handle_ping)
    k.on(Pong, handle_pong)
    k.on(Timer, handle_timer)

    k.schedule(Ping(t=0.0, n=2))
    processed = k.run(until=3.0)
    assert processed == 9
    names = [name for _, name in hooks.trace]
    times = [t for t, _ in hooks.trace]
    assert names == ["Ping", "Pong", "Timer", "Ping", "Pong", "Timer", "Ping", "Pong", "Timer"]
    assert times == [0.0, 0.0, 0.5, 1.0, 1.0, 1.5, 2.0, 2.0, 2.5]
    # drained before the horizon: the clock still moves to it
    assert k.now == 3.0


def test_fifo_tie_break():
    k = Kernel()
    seen: list[str] = []
    k.on(Ping, lambda ev: seen.append(f"A{ev.n}"))
    k.on(Ping, lambda ev: seen.append(f"B{ev.n}"))
    k.schedule(Ping(t=5.0, n=1))
    k.schedule(Ping(t=5.0, n=2))
    k.run()
    assert seen == ["A1", "B1", "A2", "B2"]


def test_max_events_gate():
    k = Kernel()
    k.on(Ping, handle_ping)
    k.schedule(Ping(t=0.0, n=10))
    assert k.run(max_events=1) == 1
    assert k.now == 0.0


def test_scheduling_in_the_past_raises():
    k = Kernel()
    k.on(Ping, lambda ev: [Ping(t=ev.t - 1.0, n=0)])
    k.schedule(Ping(t=1.0, n=0))
    with pytest.raises(RuntimeError):
        k.run()


def test_cancel_drops_event_and_is_idempotent():
    hooks = TraceHooks()
    k = Kernel(hooks=hooks)
    seen = []
    k.on(Timer, lambda ev: seen.append(ev.label))
    keep = k.schedule(Timer(t=1.0, label="keep"))
    drop = k.schedule(Timer(t=2.0, label="drop"))
    assert k.pending == 2

    assert k.cancel(drop) is True
    assert k.cancel(drop) is False
    assert k.cancel(None) is False
    assert k.pending == 1
    assert hooks.cancelled == ["Timer"]

    k.run()
    assert seen == ["keep"]
    assert k.pending == 0
    # already dispatched
    assert k.cancel(keep) is False


def test_advance_runs_only_due_events():
    k = Kernel()
    seen = []
    k.on(Timer, lambda ev: seen.append(ev.label))
    k.schedule(Timer(t=0.2, label="a"))
    k.schedule(Timer(t=0.7, label="b"))
    k.advance(0.5)
    assert seen == ["a"]
    assert k.now == 0.5
    k.advance(0.5)
    assert seen == ["a", "b"]


def test_pacer_is_asked_to_wait_for_each_event():
    class FakePacer:
        def __init__(self):
            self.waits = []

        def wait_until(self, t):
            self.waits.append(t)

    pacer = FakePacer()
    k = Kernel(pacer=pacer)
    k.on(Timer, handle_timer)
    k.schedule(Timer(t=0.25))
    k.schedule(Timer(t=1.0))
    k.run(until=2.0)
    assert pacer.waits == [0.25, 1.0, 2.0]
