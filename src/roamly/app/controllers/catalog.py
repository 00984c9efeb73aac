# roamly/app/controllers/catalog.py
import logging
from typing import Any

from roamly.app import status
from roamly.app.controllers.filters import FilterHandler
from roamly.app.controllers.journey import JourneyController
from roamly.app.protocols import Presentation, Repository, ViewPort
from roamly.config.models import ViewModel
from roamly.domain.entities.destination import Destination
from roamly.domain.state import Phase

log = logging.getLogger(__name__)


class CatalogHandler:
    """Caller-facing glue: markers, filters and destination CRUD around one journey."""

    def __init__(
        self,
        repository: Repository,
        journey: JourneyController,
        filters: FilterHandler,
        viewport: ViewPort,
        presentation: Presentation,
        view: ViewModel | None = None,
    ):
        self.repository = repository
        self.journey = journey
        self.filters = filters
        self.viewport = viewport
        self.presentation = presentation
        self.view = view or ViewModel()
        self.destinations: list[Destination] = []
        self.filtered: list[Destination] = []

    def load(self) -> list[Destination]:
        self.presentation.set_status(status.LOADING)
        try:
            self.destinations = self.repository.load()
        except Exception:
            log.exception("failed to load destinations")
            self.presentation.set_status(status.error("Could not load destinations"))
            raise
        self.filtered = list(self.destinations)
        self.filters.set_destinations(self.destinations)
        self.filters.on_change(self.on_filter_change)

        for d in self.destinations:
            self.viewport.add_marker(d, self.on_marker_click)
        self._fit(self.destinations)
        self.presentation.set_status(status.IDLE)
        log.info("loaded %d destinations", len(self.destinations))
        return list(self.destinations)

    def visible(self) -> list[Destination]:
        return list(self.filtered)

    # ------------ UI events --------------

    def on_marker_click(self, d: Destination) -> bool:
        if self.journey.phase is not Phase.IDLE:
            return False
        self.viewport.update_markers([d], self.on_marker_click)
        return self.journey.select_destination(d)

    def on_filter_change(self, filtered: list[Destination]) -> None:
        self.filtered = list(filtered)
        if not self._overview():
            return  # the journey owns the markers; close_details restores them
        self.viewport.update_markers(self.filtered, self.on_marker_click)
        self._fit(self.filtered)

    def close_details(self) -> bool:
        if not self.journey.close():
            return False
        self.viewport.update_markers(self.filtered, self.on_marker_click)
        return True

    # ------------ CRUD --------------

    def get_destination(self, destination_id: int) -> Destination | None:
        return next((d for d in self.destinations if d.id == destination_id), None)

    def add_destination(self, d: Destination) -> None:
        self.repository.add(d)
        self.destinations.append(d)
        self._sync()
        if self._overview() and d in self.filtered:
            self.viewport.add_marker(d, self.on_marker_click)
            self._fit(self.filtered)

    def remove_destination(self, destination_id: int) -> bool:
        if not self.repository.remove(destination_id):
            return False
        self.destinations = [d for d in self.destinations if d.id != destination_id]
        self._sync()
        self.viewport.remove_marker(destination_id)
        if self._overview():
            self._fit(self.filtered)
        return True

    def update_destination(self, destination_id: int, **changes: Any) -> Destination | None:
        updated = self.repository.update(destination_id, **changes)
        if updated is None:
            return None
        self.destinations = [updated if d.id == destination_id else d for d in self.destinations]
        self._sync()
        if self._overview():
            # markers hold the destination they were created with
            self.viewport.update_markers(self.filtered, self.on_marker_click)
            self._fit(self.filtered)
        return updated

    def destroy(self) -> None:
        self.journey.destroy()
        self.filters.reset()
        self.destinations = []
        self.filtered = []

    def _overview(self) -> bool:
        """True when the map shows the filtered set rather than one journey."""
        return self.journey.phase is Phase.IDLE and not self.presentation.is_details_visible()

    def _sync(self) -> None:
        self.filters.set_destinations(self.destinations)
        self.filtered = self.filters.filtered()

    def _fit(self, ds: list[Destination]) -> None:
        if ds:
            self.viewport.fit_to_all(ds, self.view.all_options())
