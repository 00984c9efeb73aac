# app/status.py
from roamly.domain.entities.geography import VehicleKind

IDLE = "Choose a destination on the map"
LOADING = "⏳ Loading destinations..."


def preparing(name: str) -> str:
    return f"Preparing route: {name}"


def moving(kind: VehicleKind | str, name: str) -> str:
    if kind == "train":
        return f"Travelling by train to: {name}"
    if kind == "car":
        return f"Driving to: {name}"
    return f"Flying to: {name}"  # plane, and the fallback for unknown kinds


def arrived(name: str) -> str:
    return f"Arrived at: {name}"


def error(message: str) -> str:
    return f"❌ {message}"
