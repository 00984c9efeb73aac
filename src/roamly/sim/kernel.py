# sim/kernel.py

import heapq
import time
from collections.abc import Callable, Iterable
from typing import Protocol

from .event import BaseEvent
from .hooks import KernelHooks, NoopHooks

Handler = Callable[[BaseEvent], Iterable[BaseEvent] | None]
Handle = int


class Pacer(Protocol):
    def wait_until(self, t: float) -> None: ...


class Kernel:
    """Single-threaded cooperative scheduler.

    Events are dispatched in time order (FIFO on ties). ``schedule`` returns a
    handle accepted by ``cancel``; cancelled events are dropped lazily when
    they reach the head of the queue. Without a pacer the kernel runs in
    virtual time, with one it follows the wall clock.
    """

    def __init__(self, hooks: KernelHooks | None = None, pacer: Pacer | None = None):
        self._t = 0.0
        self._q: list[tuple[float, int, BaseEvent]] = []
        self._seq = 0
        self._cancelled: set[Handle] = set()
        self._subs: dict[type[BaseEvent], list[Handler]] = {}
        self._hooks = hooks or NoopHooks()
        self._pacer = pacer

    @property
    def now(self) -> float:
        return self._t

    @property
    def pending(self) -> int:
        return len(self._q) - len(self._cancelled)

    def on(self, etype: type[BaseEvent], handler: Handler) -> None:
        self._subs.setdefault(etype, []).append(handler)

    def schedule(self, ev: BaseEvent) -> Handle:
        if ev.t + 1e-12 < self._t:
            self._hooks.error(ev, reason="scheduled_past", scheduled_t=ev.t, now=self._t)
            raise RuntimeError(f"cannot schedule {type(ev).__name__} at {ev.t} < now {self._t}")
        self._seq += 1
        heapq.heappush(self._q, (ev.t, self._seq, ev))
        self._hooks.schedule(ev, now=self._t, qsize=len(self._q))
        return self._seq

    def cancel(self, handle: Handle | None) -> bool:
        if handle is None or handle in self._cancelled:
            return False
        for _, seq, ev in self._q:
            if seq == handle:
                self._cancelled.add(handle)
                self._hooks.cancel(ev, now=self._t, qsize=len(self._q))
                return True
        return False

    def run(self, until: float | None = None, max_events: int | None = None) -> int:
        t0 = time.perf_counter()
        self._hooks.run_start(until=until, max_events=max_events, qsize=len(self._q))
        processed = 0
        while self._q and (until is None or self._q[0][0] <= until):
            t, seq, ev = heapq.heappop(self._q)
            if seq in self._cancelled:
                self._cancelled.discard(seq)
                continue
            if t < self._t - 1e-9:
                self._hooks.error(ev, reason="time_backwards", prev_t=self._t, t=t)
                raise RuntimeError(f"time went backwards: {t} < {self._t}")
            if self._pacer is not None:
                self._pacer.wait_until(t)
            self._t = t
            handlers = self._subs.get(type(ev), ())
            t1 = time.perf_counter()
            self._hooks.dispatch_start(ev, seq=seq, qsize=len(self._q), handlers=len(handlers))
            produced = 0
            for h in list(handlers):
                out = h(ev) or ()
                for nxt in out:
                    self.schedule(nxt)
                    produced += 1
            ms = (time.perf_counter() - t1) * 1000
            self._hooks.dispatch_end(ev, produced=produced, qsize=len(self._q), ms=ms)
            processed += 1
            if max_events and processed >= max_events:
                break
        else:
            # drained up to the horizon: the clock still advances to it
            if until is not None and until > self._t:
                if self._pacer is not None:
                    self._pacer.wait_until(until)
                self._t = until
        self._hooks.run_end(
            processed=processed,
            last_t=self._t,
            qsize=len(self._q),
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return processed

    def advance(self, dt: float) -> int:
        """Run every event due within the next ``dt`` seconds."""
        return self.run(until=self._t + dt)
