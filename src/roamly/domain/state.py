# domain/state.py
from dataclasses import dataclass
from enum import Enum

from roamly.domain.entities.destination import Destination


class Phase(Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    MOVING = "moving"
    ARRIVED = "arrived"
    DETAILS = "details"


# phases in which a journey owns the camera and the animation
IN_FLIGHT = frozenset({Phase.PREPARING, Phase.MOVING, Phase.ARRIVED})


@dataclass
class JourneyState:
    phase: Phase = Phase.IDLE
    destination: Destination | None = None
    generation: int = 0  # bumped on every start/reset; invalidates stale callbacks
    progress: float = 0.0

    def begin(self, d: Destination) -> int:
        self.generation += 1
        self.phase = Phase.PREPARING
        self.destination = d
        self.progress = 0.0
        return self.generation

    def clear(self) -> None:
        self.phase = Phase.IDLE
        self.destination = None
        self.progress = 0.0

    def snapshot(self) -> "JourneyState":
        return JourneyState(self.phase, self.destination, self.generation, self.progress)
