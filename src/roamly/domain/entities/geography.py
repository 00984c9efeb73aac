# domain/entities/geography.py
from typing import Literal

# (latitude, longitude) in degrees
Coord = tuple[float, float]

# ((south, west), (north, east))
Bounds = tuple[Coord, Coord]

VehicleKind = Literal["plane", "train", "car"]
VEHICLE_KINDS: tuple[VehicleKind, ...] = ("plane", "train", "car")
