"""Waypoint enhancement for raw room-to-room paths.

A* returns one point per room (its centroid). Drawn or narrated as-is the
route cuts straight through walls, so long same-floor hops get extra points:
- corridor <-> room: the corridor boundary vertex nearest the room.
- corridor <-> corridor: up to `max_corridor_waypoints` evenly spaced points
  between the facing boundary vertices of the two corridors, or between
  their centroids when the corridors overlap.
- room <-> room: a single `transition` midpoint.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from wayfinder.config import RoutingConfig
from wayfinder.features import Feature
from wayfinder.room_index import RoomRole
from wayfinder.utils import euclidean, lerp, nearest_vertex

TRANSITION_NAME = "transition"


@dataclass(slots=True)
class RoutePoint:
    """One step of a resolved route."""

    coords: tuple[float, float]
    floor: int
    name: str
    features: list[Feature] = field(default_factory=list)
    role: RoomRole = RoomRole.REGULAR
    is_waypoint: bool = False
    base_height: float = 0.0

    @property
    def is_corridor(self) -> bool:
        return self.role is RoomRole.CORRIDOR


def _vertices(point: RoutePoint) -> np.ndarray:
    parts = [v for v in (f.outer_vertices() for f in point.features) if v.size]
    return np.vstack(parts) if parts else np.empty((0, 2), dtype=float)


def _waypoint(coords: tuple[float, float], owner: RoutePoint) -> RoutePoint:
    return RoutePoint(
        coords=coords,
        floor=owner.floor,
        name=owner.name,
        features=list(owner.features),
        role=owner.role,
        is_waypoint=True,
        base_height=owner.base_height,
    )


def _midpoint(a: RoutePoint, b: RoutePoint) -> RoutePoint:
    return RoutePoint(
        coords=lerp(a.coords, b.coords, 0.5),
        floor=a.floor,
        name=TRANSITION_NAME,
        is_waypoint=True,
        base_height=max(a.base_height, b.base_height),
    )


def _corridor_to_room(a: RoutePoint, b: RoutePoint) -> list[RoutePoint]:
    corridor, other = (a, b) if a.is_corridor else (b, a)

    vertex = nearest_vertex(_vertices(corridor), other.coords)
    if vertex is not None:
        return [_waypoint(vertex, corridor)]

    vertex = nearest_vertex(_vertices(other), corridor.coords)
    if vertex is not None:
        return [_waypoint(vertex, other)]

    return [_midpoint(a, b)]


def _axis_position(point: tuple[float, float], a: RoutePoint, b: RoutePoint) -> float:
    """Projection of `point` onto the a->b centroid axis, 0 at a and 1 at b."""
    ax, ay = a.coords
    dx, dy = b.coords[0] - ax, b.coords[1] - ay
    return ((point[0] - ax) * dx + (point[1] - ay) * dy) / (dx * dx + dy * dy)


def _corridor_to_corridor(a: RoutePoint, b: RoutePoint, dist: float, config: RoutingConfig) -> list[RoutePoint]:
    count = min(config.max_corridor_waypoints, max(1, int(dist / config.waypoint_gap)))

    exit_vertex = nearest_vertex(_vertices(a), b.coords)
    entry_vertex = nearest_vertex(_vertices(b), a.coords)

    # Overlapping corridors put the exit vertex at or past the entry vertex.
    if (
        exit_vertex is not None
        and entry_vertex is not None
        and _axis_position(exit_vertex, a, b) < _axis_position(entry_vertex, a, b)
    ):
        steps = [0.5] if count == 1 else [i / (count - 1) for i in range(count)]
        return [_waypoint(lerp(exit_vertex, entry_vertex, t), a if t < 0.5 else b) for t in steps]

    steps = [i / (count + 1) for i in range(1, count + 1)]
    return [_waypoint(lerp(a.coords, b.coords, t), a if t < 0.5 else b) for t in steps]


def _between(a: RoutePoint, b: RoutePoint, config: RoutingConfig) -> list[RoutePoint]:
    if a.floor != b.floor:
        return []

    dist = euclidean(a.coords, b.coords)
    if dist <= config.waypoint_gap:
        return []

    if a.is_corridor and b.is_corridor:
        return _corridor_to_corridor(a, b, dist, config)
    if a.is_corridor or b.is_corridor:
        return _corridor_to_room(a, b)
    return [_midpoint(a, b)]


def add_waypoints(path: Sequence[RoutePoint], config: RoutingConfig | None = None) -> list[RoutePoint]:
    """Insert boundary/interpolated waypoints between distant same-floor hops.

    Args:
        path: Room-level route points, in travel order.
        config: Gap threshold and corridor waypoint cap.

    Returns:
        New list containing every input point in order, with inserted points
        flagged `is_waypoint=True`.
    """
    cfg = config or RoutingConfig()
    if len(path) < 2:
        return list(path)

    out: list[RoutePoint] = [path[0]]
    for a, b in zip(path, path[1:]):
        out.extend(_between(a, b, cfg))
        out.append(b)
    return out
