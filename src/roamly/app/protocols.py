from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

from roamly.domain.entities.destination import Destination
from roamly.domain.entities.geography import Coord, VehicleKind

MarkerClick = Callable[[Destination], None]


# ------------- Collaborator ports --------------------
@runtime_checkable
class ViewPort(Protocol):
    """
    Camera and map-layer control.
    Responsibilities:
      • Move the camera (fit a route, fit a set of destinations, fly to a point).
      • Own destination markers, the route polyline and the vehicle marker.
    ``fit_to_route`` must invoke ``on_settled`` once when the camera transition
    ends; it may do so synchronously.
    """

    def fit_to_route(
        self,
        start: Coord,
        end: Coord,
        opts: dict[str, Any],
        on_settled: Callable[[], None],
    ) -> None: ...
    def fit_to_all(self, destinations: Sequence[Destination], opts: dict[str, Any]) -> None: ...
    def zoom_to(self, coord: Coord, level: int, opts: dict[str, Any]) -> None: ...
    def add_marker(self, destination: Destination, on_click: MarkerClick) -> None: ...
    def remove_marker(self, destination_id: int) -> None: ...
    def update_markers(self, destinations: Sequence[Destination], on_click: MarkerClick) -> None: ...
    def create_path(self, color: str, dash_pattern: str | None) -> None: ...
    def update_path(self, points: Sequence[Coord]) -> None: ...
    def place_vehicle(self, coord: Coord, kind: VehicleKind) -> None: ...
    def move_vehicle(self, coord: Coord, heading: float) -> None: ...
    def play_landing(self) -> None: ...
    def clear_route(self) -> None: ...


@runtime_checkable
class Presentation(Protocol):
    """Status line and destination details card."""

    def set_status(self, text: str) -> None: ...
    def show_details(self, destination: Destination) -> None: ...
    def hide_details(self) -> None: ...
    def is_details_visible(self) -> bool: ...


@runtime_checkable
class Repository(Protocol):
    def load(self) -> list[Destination]: ...
    def is_loaded(self) -> bool: ...
    def all(self) -> list[Destination]: ...
    def get_by_id(self, destination_id: int) -> Destination | None: ...
    def get_by_kind(self, kind: VehicleKind) -> list[Destination]: ...
    def add(self, destination: Destination) -> None: ...
    def remove(self, destination_id: int) -> bool: ...
    def update(self, destination_id: int, **changes: Any) -> Destination | None: ...


@runtime_checkable
class FilterPanel(Protocol):
    """Pushes the currently filtered destination subset on every change."""

    def on_change(self, callback: Callable[[list[Destination]], None]) -> None: ...
