# domain/mechanics/geometry.py
"""Planar path geometry for journey animation.

Paths are straight-line interpolations between two ``(lat, lng)`` pairs.
Flights get a sine-shaped latitude bulge so the route reads as an arc on the
map; the curve is cosmetic and has no geodesic meaning.
"""

import logging
import math
from collections.abc import Iterable, Sequence

import numpy as np

from roamly.domain.entities.geography import Bounds, Coord, VehicleKind

log = logging.getLogger(__name__)

DEFAULT_STEPS = 200
DEFAULT_CURVE_FACTOR = 0.15


def _normalize(start: Coord, end: Coord) -> tuple[Coord, Coord]:
    """Replace non-finite components so the path stays finite.

    A missing component borrows the other endpoint's value, or 0.0 when both
    are unusable.
    """
    if all(math.isfinite(v) for v in (*start, *end)):
        return start, end
    s = [float(v) for v in start]
    e = [float(v) for v in end]
    for i in range(2):
        if not math.isfinite(s[i]):
            s[i] = e[i] if math.isfinite(e[i]) else 0.0
        if not math.isfinite(e[i]):
            e[i] = s[i]
    log.warning("non-finite route %s -> %s normalized to %s -> %s", start, end, tuple(s), tuple(e))
    return (s[0], s[1]), (e[0], e[1])


def calculate_path_points(
    start: Coord,
    end: Coord,
    kind: VehicleKind,
    steps: int = DEFAULT_STEPS,
    curve_factor: float = DEFAULT_CURVE_FACTOR,
) -> list[Coord]:
    """Return ``steps + 1`` points from ``start`` to ``end`` inclusive.

    ``steps <= 0`` is treated as 1 and non-finite components are normalized
    (see ``_normalize``). For ``plane`` the latitude is shifted by
    ``sin(pi * f) * (dlng * curve_factor)`` where ``f`` is the fraction along
    the path; ``train`` and ``car`` follow the straight line.
    """
    start, end = _normalize(start, end)
    if not math.isfinite(curve_factor):
        curve_factor = 0.0
    steps = max(1, int(steps))

    f = np.arange(steps + 1, dtype=float) / steps
    lat = start[0] + (end[0] - start[0]) * f
    lng = start[1] + (end[1] - start[1]) * f

    if kind == "plane":
        lat = lat + np.sin(np.pi * f) * ((end[1] - start[1]) * curve_factor)

    points = [(float(a), float(b)) for a, b in zip(lat, lng)]
    # endpoints are pinned; float lerp and sin(pi) would otherwise leave ~1e-16 residue
    points[0] = (float(start[0]), float(start[1]))
    points[-1] = (float(end[0]), float(end[1]))
    return points


def calculate_rotation(p1: Coord, p2: Coord) -> float:
    """Heading in degrees for an icon whose forward axis points along +lng at 0.

    Identical points give exactly 90 (``atan2(0, 0) == 0``).
    """
    d_lat = p2[0] - p1[0]
    d_lng = p2[1] - p1[1]
    return 90.0 - math.degrees(math.atan2(d_lat, d_lng))


def interpolate(p1: Coord, p2: Coord, sub: float) -> Coord:
    return (p1[0] + (p2[0] - p1[0]) * sub, p1[1] + (p2[1] - p1[1]) * sub)


def bounds_of(coords: Iterable[Coord]) -> Bounds:
    arr = np.asarray(list(coords), dtype=float)
    if arr.size == 0:
        raise ValueError("bounds_of() needs at least one coordinate")
    south, west = arr.min(axis=0)
    north, east = arr.max(axis=0)
    return (float(south), float(west)), (float(north), float(east))


def route_bounds(start: Coord, end: Coord) -> Bounds:
    return bounds_of((start, end))


def bounds_center(b: Bounds) -> Coord:
    (south, west), (north, east) = b
    return (south + north) / 2.0, (west + east) / 2.0


def path_length_deg(points: Sequence[Coord]) -> float:
    """Planar polyline length in degrees, used for log summaries."""
    if len(points) < 2:
        return 0.0
    arr = np.asarray(points, dtype=float)
    return float(np.hypot(*np.diff(arr, axis=0).T).sum())
