# sim/clock.py
from __future__ import annotations

import time
from dataclasses import dataclass, field

FRAME_S = 1.0 / 60.0  # one display refresh at 60 Hz


def ms(x: float) -> float:
    """Milliseconds -> kernel seconds."""
    return x / 1000.0


def to_ms(t: float) -> float:
    return t * 1000.0


@dataclass
class RealtimePacer:
    """Keeps the kernel in step with ``time.monotonic()``.

    Kernel time zero is bound to the monotonic reading taken on the first
    ``wait_until`` call. ``speed`` > 1 plays the timeline faster than real time.
    """

    speed: float = 1.0
    _origin: float | None = field(default=None, init=False, repr=False)

    def elapsed(self) -> float:
        if self._origin is None:
            return 0.0
        return (time.monotonic() - self._origin) * self.speed

    def wait_until(self, t: float) -> None:
        if self._origin is None:
            self._origin = time.monotonic()
        delay = (t - self.elapsed()) / self.speed
        if delay > 0:
            time.sleep(delay)
