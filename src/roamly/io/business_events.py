# roamly/io/business_events.py

from dataclasses import dataclass


# Base type for journey analytics events (not scheduled in the kernel!)
@dataclass
class BizEvent:
    run_id: str
    t: float  # kernel time
    name: str  # stable event name


@dataclass
class JourneySelectedBiz(BizEvent):
    destination_id: int
    generation: int
    kind: str


@dataclass
class JourneyPhaseBiz(BizEvent):
    destination_id: int | None
    generation: int
    phase: str
    prev: str


@dataclass
class JourneyRejectedBiz(BizEvent):
    destination_id: int
    active_id: int | None
    phase: str


@dataclass
class JourneyResetBiz(BizEvent):
    generation: int
    phase: str  # phase the journey was in when reset


@dataclass
class CollaboratorFailedBiz(BizEvent):
    call: str
    error: str
