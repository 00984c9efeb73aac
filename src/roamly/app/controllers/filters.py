# roamly/app/controllers/filters.py
import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from roamly.domain.entities.destination import Destination
from roamly.domain.entities.geography import VEHICLE_KINDS, VehicleKind

log = logging.getLogger(__name__)

_YEAR = re.compile(r"\b(\d{4})\b")

FilterChange = Callable[[list[Destination]], None]


@dataclass
class FilterState:
    years: list[str] = field(default_factory=list)
    kinds: list[VehicleKind] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.years and not self.kinds


def extract_years(destinations: Iterable[Destination]) -> list[str]:
    """Distinct four-digit years mentioned in the date labels, ascending."""
    return sorted({y for d in destinations for y in _YEAR.findall(d.date)})


def filter_destinations(destinations: Iterable[Destination], state: FilterState) -> list[Destination]:
    """AND across facets; an empty facet matches everything."""
    out = []
    for d in destinations:
        year_ok = not state.years or any(y in d.date for y in state.years)
        kind_ok = not state.kinds or d.kind in state.kinds
        if year_ok and kind_ok:
            out.append(d)
    return out


class FilterHandler:
    """Headless filter panel: keeps the selection and pushes the filtered subset."""

    def __init__(self):
        self._destinations: list[Destination] = []
        self._state = FilterState()
        self._callback: FilterChange | None = None

    def set_destinations(self, destinations: Sequence[Destination]) -> None:
        self._destinations = list(destinations)

    def available_years(self) -> list[str]:
        return extract_years(self._destinations)

    def available_kinds(self) -> tuple[VehicleKind, ...]:
        return VEHICLE_KINDS

    def on_change(self, callback: FilterChange) -> None:
        self._callback = callback

    def state(self) -> FilterState:
        return FilterState(list(self._state.years), list(self._state.kinds))

    def filtered(self) -> list[Destination]:
        return filter_destinations(self._destinations, self._state)

    def toggle_year(self, year: str, checked: bool) -> None:
        self._toggle(self._state.years, year, checked)

    def toggle_kind(self, kind: VehicleKind, checked: bool) -> None:
        if kind not in VEHICLE_KINDS:
            raise ValueError(f"unknown vehicle kind {kind!r}")
        self._toggle(self._state.kinds, kind, checked)

    def reset_filters(self) -> None:
        self._state = FilterState()
        self._apply()

    def reset(self) -> None:
        self._state = FilterState()
        self._callback = None

    def _toggle(self, selected: list, value, checked: bool) -> None:
        if checked and value not in selected:
            selected.append(value)
        elif not checked and value in selected:
            selected.remove(value)
        self._apply()

    def _apply(self) -> None:
        filtered = self.filtered()
        log.debug("filters %s -> %d destinations", self._state, len(filtered))
        if self._callback is not None:
            self._callback(filtered)
