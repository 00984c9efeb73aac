# app/events.py
from dataclasses import dataclass

from roamly.sim.event import BaseEvent


# Animation loop
@dataclass(order=True)
class FrameTick(BaseEvent):
    run_id: int  # versioning to make ticks of a cancelled run harmless


@dataclass(order=True)
class AnimationFinished(BaseEvent):
    run_id: int  # landing grace elapsed


# Journey phases (generation-guarded delayed actions)
@dataclass(order=True)
class SettleTimeout(BaseEvent):
    generation: int


@dataclass(order=True)
class StartMoving(BaseEvent):
    generation: int


@dataclass(order=True)
class RevealDetails(BaseEvent):
    generation: int


# Camera
@dataclass(order=True)
class CameraSettled(BaseEvent):
    fit_id: int
