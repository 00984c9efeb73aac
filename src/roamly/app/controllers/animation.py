# app/controllers/animation.py
import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from roamly.app.events import AnimationFinished, FrameTick
from roamly.domain.entities.geography import Coord
from roamly.domain.mechanics.geometry import calculate_rotation, interpolate
from roamly.sim.clock import FRAME_S, ms
from roamly.sim.kernel import Handle, Kernel

log = logging.getLogger(__name__)

# on_frame(position, heading, partial_path, progress)
FrameFn = Callable[[Coord, float, list[Coord], float], None]
DoneFn = Callable[[], None]


@dataclass
class _Run:
    run_id: int
    path: list[Coord]
    duration_s: float
    start_t: float
    on_frame: FrameFn
    on_complete: DoneFn
    progress: float = 0.0
    tick: Handle | None = None


@dataclass
class Frame:
    position: Coord
    heading: float
    partial: list[Coord]
    progress: float


def sample_path(path: Sequence[Coord], progress: float) -> Frame:
    """Position, heading and drawn-so-far polyline at ``progress`` in [0, 1]."""
    last = len(path) - 1
    idx = progress * last
    i1 = min(math.floor(idx), last)
    i2 = min(i1 + 1, last)
    sub = idx - i1
    p1, p2 = path[i1], path[i2]
    pos = interpolate(p1, p2, sub)
    return Frame(
        position=pos,
        heading=calculate_rotation(p1, p2),
        partial=list(path[: i1 + 1]) + [pos],
        progress=progress,
    )


class AnimationClock:
    """Advances one vehicle animation over kernel time, independent of frame rate.

    Frames are ``FrameTick`` events every ``frame_interval_ms``. Progress is
    elapsed/duration, clamped to 1 and never lowered. When it reaches 1 the run
    goes idle and ``on_complete`` fires after ``landing_grace_ms``.
    """

    def __init__(
        self,
        kernel: Kernel,
        *,
        frame_interval_ms: float = FRAME_S * 1000.0,
        landing_grace_ms: float = 500.0,
    ):
        self.kernel = kernel
        self.frame_s = ms(frame_interval_ms)
        self.grace_s = ms(landing_grace_ms)
        self._run_id = 0
        self._active: _Run | None = None
        # run_id -> (handle of AnimationFinished, on_complete)
        self._completions: dict[int, tuple[Handle, DoneFn]] = {}

    def is_running(self) -> bool:
        return self._active is not None

    @property
    def progress(self) -> float:
        return self._active.progress if self._active else 0.0

    def start(
        self,
        path: Sequence[Coord],
        duration_ms: float,
        on_frame: FrameFn,
        on_complete: DoneFn,
    ) -> bool:
        if self._active is not None:
            log.warning("animation run %d still active; start refused", self._active.run_id)
            return False
        if not path:
            raise ValueError("animation path must contain at least one point")

        self._run_id += 1
        now = self.kernel.now
        run = _Run(
            run_id=self._run_id,
            path=list(path),
            duration_s=ms(duration_ms),
            start_t=now,
            on_frame=on_frame,
            on_complete=on_complete,
        )
        self._active = run
        run.tick = self.kernel.schedule(FrameTick(t=now + self.frame_s, run_id=run.run_id))
        log.debug("animation run %d started: %d points, %.0f ms", run.run_id, len(run.path), duration_ms)
        return True

    def cancel(self) -> None:
        run, self._active = self._active, None
        if run is not None:
            self.kernel.cancel(run.tick)
            log.debug("animation run %d cancelled at progress %.3f", run.run_id, run.progress)
        for handle, _ in self._completions.values():
            self.kernel.cancel(handle)
        self._completions.clear()

    # ------------ kernel handlers --------------

    def on_frame_tick(self, ev: FrameTick):
        run = self._active
        if run is None or ev.run_id != run.run_id:
            return []  # stale tick from a cancelled run
        run.tick = None

        if run.duration_s <= 0:
            progress = 1.0
        else:
            progress = min((ev.t - run.start_t) / run.duration_s, 1.0)
        run.progress = max(run.progress, progress)

        frame = sample_path(run.path, run.progress)
        run.on_frame(frame.position, frame.heading, frame.partial, frame.progress)

        if self._active is not run:
            return []  # cancelled from inside on_frame
        if run.progress < 1.0:
            run.tick = self.kernel.schedule(FrameTick(t=ev.t + self.frame_s, run_id=run.run_id))
            return []

        self._active = None
        handle = self.kernel.schedule(AnimationFinished(t=ev.t + self.grace_s, run_id=run.run_id))
        self._completions[run.run_id] = (handle, run.on_complete)
        return []

    def on_animation_finished(self, ev: AnimationFinished):
        entry = self._completions.pop(ev.run_id, None)
        if entry is None:
            return []
        entry[1]()
        return []
