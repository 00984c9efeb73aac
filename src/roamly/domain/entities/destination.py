# domain/entities/destination.py
from dataclasses import dataclass

from roamly.domain.entities.geography import Coord, VehicleKind


@dataclass(frozen=True)
class Destination:
    id: int
    kind: VehicleKind
    start: Coord
    end: Coord
    name: str
    date: str = ""
    description: str = ""
    image_url: str | None = None
    video_url: str | None = None


@dataclass(frozen=True)
class VehicleStyle:
    color: str
    dash_pattern: str | None = None  # None => solid line


VEHICLE_STYLES: dict[VehicleKind, VehicleStyle] = {
    "plane": VehicleStyle(color="#1F6F8B"),
    "train": VehicleStyle(color="#E76F51", dash_pattern="5, 10"),
    "car": VehicleStyle(color="#6B8E6E", dash_pattern="5, 10"),
}


def style_for(kind: VehicleKind) -> VehicleStyle:
    return VEHICLE_STYLES[kind]
