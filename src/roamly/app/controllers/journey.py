# roamly/app/controllers/journey.py
import logging
from collections.abc import Callable, Sequence
from functools import partial

from roamly.app import status
from roamly.app.controllers.animation import AnimationClock
from roamly.app.events import RevealDetails, SettleTimeout, StartMoving
from roamly.app.protocols import MarkerClick, Presentation, ViewPort
from roamly.config.models import AnimationModel, ViewModel
from roamly.domain.entities.destination import Destination, style_for
from roamly.domain.entities.geography import Coord
from roamly.domain.mechanics.geometry import calculate_path_points
from roamly.domain.state import IN_FLIGHT, JourneyState, Phase
from roamly.io.business_events import (
    BizEvent,
    CollaboratorFailedBiz,
    JourneyPhaseBiz,
    JourneyRejectedBiz,
    JourneyResetBiz,
    JourneySelectedBiz,
)
from roamly.sim.clock import ms, to_ms
from roamly.sim.event import BaseEvent
from roamly.sim.kernel import Handle, Kernel

log = logging.getLogger(__name__)

# pending delayed actions, one slot each
SETTLE, START, REVEAL = "settle", "start", "reveal"


class JourneyController:
    """Phase state machine for one journey at a time.

    Idle -> Preparing -> Moving -> Arrived -> Details -> Idle. Every delayed
    action carries the generation it was scheduled under and is dropped when
    the generation has moved on, so ``reset()`` and rapid re-selection never
    let an old journey touch the current one.
    """

    def __init__(
        self,
        kernel: Kernel,
        animation: AnimationClock,
        viewport: ViewPort | None,
        presentation: Presentation | None,
        *,
        settings: AnimationModel | None = None,
        view: ViewModel | None = None,
        destinations: Callable[[], Sequence[Destination]] = tuple,
        report: Callable[[BizEvent], None] | None = None,
        marker_click: MarkerClick | None = None,
        run_id: str = "local",
    ):
        self.kernel = kernel
        self.animation = animation
        self.viewport = viewport
        self.presentation = presentation
        self.settings = settings or AnimationModel()
        self.view = view or ViewModel()
        self.destinations = destinations
        self.report = report
        self.marker_click = marker_click  # click handler for the marker left on screen at Details
        self.run_id = run_id
        self._state = JourneyState()
        self._pending: dict[str, Handle] = {}
        self._settled_gen = 0  # generation whose view-settle was consumed

    # ------------ queries --------------

    @property
    def state(self) -> JourneyState:
        return self._state.snapshot()

    @property
    def phase(self) -> Phase:
        return self._state.phase

    def is_animating_now(self) -> bool:
        return self._state.phase in IN_FLIGHT

    def get_current_destination(self) -> Destination | None:
        return self._state.destination

    # ------------ commands --------------

    def select_destination(self, d: Destination) -> bool:
        st = self._state
        if st.phase is not Phase.IDLE:
            active = st.destination.id if st.destination else None
            log.debug("selection of %s ignored: journey %s is %s", d.id, active, st.phase.value)
            self._biz(
                JourneyRejectedBiz,
                "journey_rejected",
                destination_id=d.id,
                active_id=active,
                phase=st.phase.value,
            )
            return False

        gen = st.begin(d)
        self._biz(JourneySelectedBiz, "journey_selected", destination_id=d.id, generation=gen, kind=d.kind)
        self._phase_changed(Phase.IDLE)
        self._call("presentation.set_status", self.presentation, "set_status", status.preparing(d.name))

        # the timeout is armed first: a viewport that settles synchronously disarms it
        self._arm(SETTLE, SettleTimeout(t=self._after(self.settings.settle_timeout_ms), generation=gen))
        self._call(
            "viewport.fit_to_route",
            self.viewport,
            "fit_to_route",
            d.start,
            d.end,
            self.view.route_options(),
            partial(self._view_settled, gen),
        )
        return True

    def close(self) -> bool:
        """Details -> Idle: hide the card and hand the camera back to the full set."""
        if self._state.phase is not Phase.DETAILS:
            return False
        self._call("presentation.hide_details", self.presentation, "hide_details")
        self._call("viewport.clear_route", self.viewport, "clear_route")
        self._fit_all()
        self._call("presentation.set_status", self.presentation, "set_status", status.IDLE)
        d = self._state.destination
        self._state.clear()
        self._phase_changed(Phase.DETAILS, d)
        return True

    def reset(self) -> None:
        """Abort whatever is in flight and return to Idle. Safe in any phase."""
        st = self._state
        prev = st.phase
        st.generation += 1
        self.animation.cancel()
        for key in list(self._pending):
            self.kernel.cancel(self._pending.pop(key))

        self._call("viewport.clear_route", self.viewport, "clear_route")
        if self.presentation is not None and self._is_details_visible():
            self._call("presentation.hide_details", self.presentation, "hide_details")
        self._call("presentation.set_status", self.presentation, "set_status", status.IDLE)

        d = st.destination
        st.clear()
        self._biz(JourneyResetBiz, "journey_reset", generation=st.generation, phase=prev.value)
        if prev is not Phase.IDLE:
            self._phase_changed(prev, d)

    def destroy(self) -> None:
        self.reset()
        self.viewport = None
        self.presentation = None

    # ------------ kernel handlers --------------

    def on_settle_timeout(self, ev: SettleTimeout):
        if self._stale(ev.generation, SETTLE):
            return []
        log.info("camera did not report settling within %.0f ms; continuing", self.settings.settle_timeout_ms)
        self._view_settled(ev.generation)
        return []

    def on_start_moving(self, ev: StartMoving):
        if self._stale(ev.generation, START) or self._state.phase is not Phase.PREPARING:
            return []
        d = self._state.destination
        s = self.settings
        try:
            path = calculate_path_points(d.start, d.end, d.kind, s.step_count, s.curve_factor)
            style = style_for(d.kind)
        except Exception as exc:
            log.exception("cannot start journey to %s; resetting", d.id)
            self._biz(CollaboratorFailedBiz, "collaborator_failed", call="journey.start_moving", error=str(exc))
            self.reset()
            return []

        self._call("viewport.clear_route", self.viewport, "clear_route")
        self._call("viewport.create_path", self.viewport, "create_path", style.color, style.dash_pattern)
        self._call("viewport.place_vehicle", self.viewport, "place_vehicle", d.start, d.kind)

        if self.animation.is_running():
            # only this controller starts runs, so a live one is a leftover
            log.error("animation clock busy on journey start; cancelling leftover run")
            self.animation.cancel()
        gen = ev.generation
        self.animation.start(
            path,
            s.duration_ms,
            partial(self._on_frame, gen),
            partial(self._on_animation_complete, gen),
        )

        prev = self._state.phase
        self._state.phase = Phase.MOVING
        self._phase_changed(prev)
        self._call("presentation.set_status", self.presentation, "set_status", status.moving(d.kind, d.name))
        return []

    def on_reveal_details(self, ev: RevealDetails):
        if self._stale(ev.generation, REVEAL) or self._state.phase is not Phase.ARRIVED:
            return []
        d = self._state.destination
        self._call("presentation.show_details", self.presentation, "show_details", d)
        self._call(
            "viewport.update_markers",
            self.viewport,
            "update_markers",
            [d],
            self.marker_click or self.select_destination,
        )
        self._call(
            "viewport.zoom_to",
            self.viewport,
            "zoom_to",
            d.end,
            self.view.details_zoom,
            self.view.details_options(),
        )
        prev = self._state.phase
        self._state.phase = Phase.DETAILS
        self._phase_changed(prev)
        return []

    # ------------ callbacks --------------

    def _view_settled(self, gen: int) -> None:
        st = self._state
        if gen != st.generation or st.phase is not Phase.PREPARING or self._settled_gen == gen:
            return
        self._settled_gen = gen
        self.kernel.cancel(self._pending.pop(SETTLE, None))
        self._arm(START, StartMoving(t=self._after(self.settings.settle_delay_ms), generation=gen))

    def _on_frame(self, gen: int, position: Coord, heading: float, partial_path: list[Coord], progress: float):
        if gen != self._state.generation:
            return
        self._state.progress = progress
        self._call("viewport.move_vehicle", self.viewport, "move_vehicle", position, heading)
        self._call("viewport.update_path", self.viewport, "update_path", partial_path)
        if progress >= 1.0:
            self._call("viewport.play_landing", self.viewport, "play_landing")

    def _on_animation_complete(self, gen: int) -> None:
        st = self._state
        if gen != st.generation or st.phase is not Phase.MOVING:
            return
        st.phase = Phase.ARRIVED
        self._phase_changed(Phase.MOVING)
        self._call("presentation.set_status", self.presentation, "set_status", status.arrived(st.destination.name))
        self._arm(REVEAL, RevealDetails(t=self._after(self.settings.arrival_delay_ms), generation=gen))

    # ------------ helpers --------------

    def _after(self, delay_ms: float) -> float:
        return self.kernel.now + ms(delay_ms)

    def _arm(self, key: str, ev: BaseEvent) -> None:
        self.kernel.cancel(self._pending.pop(key, None))
        self._pending[key] = self.kernel.schedule(ev)

    def _stale(self, gen: int, key: str) -> bool:
        if gen != self._state.generation:
            return True
        self._pending.pop(key, None)
        return False

    def _fit_all(self) -> None:
        ds = list(self.destinations())
        if ds:
            self._call("viewport.fit_to_all", self.viewport, "fit_to_all", ds, self.view.all_options())

    def _is_details_visible(self) -> bool:
        try:
            return bool(self.presentation.is_details_visible())
        except Exception:
            log.exception("presentation.is_details_visible failed")
            return True  # hide anyway

    def _call(self, name: str, target, method: str, *args) -> None:
        """Invoke a collaborator; cosmetic failures are logged, never raised."""
        if target is None:
            log.debug("%s skipped: collaborator not attached", name)
            return
        try:
            getattr(target, method)(*args)
        except Exception as exc:
            log.exception("%s failed", name)
            self._biz(CollaboratorFailedBiz, "collaborator_failed", call=name, error=str(exc))

    def _phase_changed(self, prev: Phase, d: Destination | None = None) -> None:
        st = self._state
        d = d or st.destination
        log.info(
            "journey %s: %s -> %s at %.0f ms",
            d.id if d else None,
            prev.value,
            st.phase.value,
            to_ms(self.kernel.now),
        )
        self._biz(
            JourneyPhaseBiz,
            "journey_phase",
            destination_id=d.id if d else None,
            generation=st.generation,
            phase=st.phase.value,
            prev=prev.value,
        )

    def _biz(self, cls: type[BizEvent], name: str, **fields) -> None:
        if self.report is not None:
            self.report(cls(run_id=self.run_id, t=self.kernel.now, name=name, **fields))
