"""Geometry and serialization helpers shared across wayfinder modules.

Purpose:
- Planar distances in native coordinate units (graph construction, search).
- Great-circle distance and bearing in meters/degrees (directions, stats).
- Convert route objects to JSON-safe payload types.
"""

from __future__ import annotations

import math
from dataclasses import asdict
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, Sequence

import numpy as np

from wayfinder.config import EARTH_RADIUS_M

if TYPE_CHECKING:
    from wayfinder.directions import Direction, RouteStats
    from wayfinder.path_enhancer import RoutePoint

Coord = tuple[float, float]


def euclidean(a: Sequence[float], b: Sequence[float]) -> float:
    """Planar distance between two `[x, y]` points in their own units."""
    dx = float(a[0]) - float(b[0])
    dy = float(a[1]) - float(b[1])
    return math.sqrt(dx * dx + dy * dy)


def haversine_m(a: Sequence[float], b: Sequence[float]) -> float:
    """Great-circle distance in meters between two `[lon, lat]` points."""
    lon1, lat1 = float(a[0]), float(a[1])
    lon2, lat2 = float(b[0]), float(b[1])

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def bearing_deg(a: Sequence[float], b: Sequence[float]) -> float:
    """Initial great-circle bearing from `a` to `b`, normalized to [0, 360)."""
    lon1, lat1 = float(a[0]), float(a[1])
    lon2, lat2 = float(b[0]), float(b[1])

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_lambda = math.radians(lon2 - lon1)

    y = math.sin(d_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lambda)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def nearest_vertex(vertices: np.ndarray, target: Sequence[float]) -> Coord | None:
    """Return the vertex of an `(N, 2)` array closest to `target`."""
    if vertices.size == 0:
        return None
    diffs = vertices - np.asarray([float(target[0]), float(target[1])], dtype=float)
    idx = int(np.argmin(np.einsum("ij,ij->i", diffs, diffs)))
    return float(vertices[idx, 0]), float(vertices[idx, 1])


def lerp(a: Sequence[float], b: Sequence[float], t: float) -> Coord:
    """Linear interpolation between two points."""
    return (
        float(a[0]) + (float(b[0]) - float(a[0])) * t,
        float(a[1]) + (float(b[1]) - float(a[1])) * t,
    )


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return [_json_value(v) for v in value]
    if isinstance(value, list):
        return [_json_value(v) for v in value]
    return value


def route_to_dicts(path: Iterable["RoutePoint"]) -> list[dict[str, Any]]:
    """Convert route points to JSON-friendly dictionaries (features omitted)."""
    return [
        {
            "coords": [float(p.coords[0]), float(p.coords[1])],
            "floor": int(p.floor),
            "name": p.name,
            "role": p.role.value,
            "is_waypoint": bool(p.is_waypoint),
        }
        for p in path
    ]


def directions_to_dicts(directions: Iterable["Direction"]) -> list[dict[str, Any]]:
    """Convert directions to JSON-friendly dictionaries without null fields."""
    out: list[dict[str, Any]] = []
    for direction in directions:
        payload = {k: _json_value(v) for k, v in asdict(direction).items() if v is not None}
        out.append(payload)
    return out


def stats_to_dict(stats: "RouteStats") -> dict[str, Any]:
    """Convert route statistics to a JSON-friendly dictionary."""
    return {
        "total_distance": float(stats.total_distance),
        "estimated_time": float(stats.estimated_time),
        "floors": [int(f) for f in stats.floors],
        "floor_changes": int(stats.floor_changes),
    }
