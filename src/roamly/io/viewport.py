# roamly/io/viewport.py
import logging
from collections.abc import Callable, Sequence
from typing import Any

from roamly.app.events import CameraSettled
from roamly.app.protocols import MarkerClick
from roamly.domain.entities.destination import Destination
from roamly.domain.entities.geography import Coord, VehicleKind
from roamly.domain.mechanics.geometry import bounds_center, bounds_of, path_length_deg, route_bounds
from roamly.sim.kernel import Kernel

log = logging.getLogger(__name__)


class HeadlessViewPort:
    """ViewPort without a map: keeps layer state, journals calls, settles on the kernel.

    Camera fits finish ``opts["duration"]`` seconds after they start, reported
    through a ``CameraSettled`` event. ``settles=False`` models a camera that
    never reports completion.
    """

    def __init__(self, kernel: Kernel, *, settles: bool = True):
        self.kernel = kernel
        self.settles = settles
        self.calls: list[tuple[str, tuple]] = []
        self.markers: dict[int, tuple[Destination, MarkerClick]] = {}
        self.path: list[Coord] = []
        self.path_style: tuple[str, str | None] | None = None
        self.vehicle: tuple[Coord, float] | None = None
        self.center: Coord | None = None
        self._fit_id = 0
        self._on_settled: dict[int, Callable[[], None]] = {}

    def _journal(self, name: str, *args) -> None:
        self.calls.append((name, args))

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    # ------------- camera -------------

    def fit_to_route(
        self, start: Coord, end: Coord, opts: dict[str, Any], on_settled: Callable[[], None]
    ) -> None:
        self._journal("fit_to_route", start, end)
        b = route_bounds(start, end)
        self.center = bounds_center(b)
        log.info("camera: fit route %s", b)
        if not self.settles:
            return
        self._fit_id += 1
        self._on_settled[self._fit_id] = on_settled
        self.kernel.schedule(
            CameraSettled(t=self.kernel.now + float(opts.get("duration", 0.0)), fit_id=self._fit_id)
        )

    def fit_to_all(self, destinations: Sequence[Destination], opts: dict[str, Any]) -> None:
        self._journal("fit_to_all", tuple(d.id for d in destinations))
        coords = [c for d in destinations for c in (d.start, d.end)]
        if coords:
            b = bounds_of(coords)
            self.center = bounds_center(b)
            log.info("camera: fit %d destinations %s", len(destinations), b)

    def zoom_to(self, coord: Coord, level: int, opts: dict[str, Any]) -> None:
        self._journal("zoom_to", coord, level)
        self.center = coord
        log.info("camera: zoom to %s at level %d", coord, level)

    def on_camera_settled(self, ev: CameraSettled):
        cb = self._on_settled.pop(ev.fit_id, None)
        if cb is not None:
            cb()
        return []

    # ------------- markers -------------

    def add_marker(self, destination: Destination, on_click: MarkerClick) -> None:
        self._journal("add_marker", destination.id)
        self.markers[destination.id] = (destination, on_click)

    def remove_marker(self, destination_id: int) -> None:
        self._journal("remove_marker", destination_id)
        self.markers.pop(destination_id, None)

    def update_markers(self, destinations: Sequence[Destination], on_click: MarkerClick) -> None:
        self._journal("update_markers", tuple(d.id for d in destinations))
        self.markers = {d.id: (d, on_click) for d in destinations}

    def click(self, destination_id: int):
        d, on_click = self.markers[destination_id]
        return on_click(d)

    # ------------- route & vehicle -------------

    def create_path(self, color: str, dash_pattern: str | None) -> None:
        self._journal("create_path", color, dash_pattern)
        self.path_style = (color, dash_pattern)
        self.path = []

    def update_path(self, points: Sequence[Coord]) -> None:
        self.path = list(points)

    def place_vehicle(self, coord: Coord, kind: VehicleKind) -> None:
        self._journal("place_vehicle", coord, kind)
        self.vehicle = (coord, 0.0)

    def move_vehicle(self, coord: Coord, heading: float) -> None:
        self.vehicle = (coord, heading)

    def play_landing(self) -> None:
        self._journal("play_landing")
        log.info("vehicle landed after %.2f deg of route", path_length_deg(self.path))

    def clear_route(self) -> None:
        self._journal("clear_route")
        self.path = []
        self.path_style = None
        self.vehicle = None
