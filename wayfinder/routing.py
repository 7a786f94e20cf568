"""Route queries: from feature collection to an enhanced room path.

Pipeline per query:
    group_rooms -> build_room_graph -> astar -> add_waypoints

Every failure (unnamed endpoint, endpoint missing from the graph, no
connection) returns None; callers only need a single None check.

Usage example:
    >>> from wayfinder.routing import RoomKey, find_route
    >>> path = find_route(features, RoomKey("Lab 1", 0), RoomKey("Lab 2", 1))
    >>> [p.name for p in path if not p.is_waypoint]
    ['Lab 1', 'Corridor A', 'Elevator 1', 'Elevator 1', 'Lab 2']
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, NamedTuple, Sequence, Union

from pydantic import ValidationError

from wayfinder.config import DEGREES_TO_METERS, RoutingConfig
from wayfinder.features import Feature, parse_features
from wayfinder.graph_builder import RoomGraph, build_room_graph
from wayfinder.path_enhancer import RoutePoint, add_waypoints
from wayfinder.pathfinding import astar
from wayfinder.room_index import group_rooms, room_key
from wayfinder.trace import TraceHook, emit, log_trace
from wayfinder.utils import euclidean


class RoomKey(NamedTuple):
    """Explicit room reference: exact name plus floor."""

    name: str
    floor: int

    @property
    def key(self) -> str:
        return room_key(self.name, self.floor)


RoomRef = Union[RoomKey, Feature, Mapping[str, Any]]


def resolve_room_ref(ref: RoomRef | None) -> RoomKey | None:
    """Turn a room reference into a `RoomKey`; None when it has no name."""
    if ref is None:
        return None
    if isinstance(ref, RoomKey):
        key = ref
    elif isinstance(ref, Feature):
        key = RoomKey(ref.name, ref.floor)
    elif isinstance(ref, tuple) and len(ref) == 2:
        key = RoomKey(str(ref[0]), ref[1])
    elif isinstance(ref, Mapping):
        try:
            feature = Feature.from_geojson(ref)
        except ValidationError:
            return None
        key = RoomKey(feature.name, feature.floor)
    else:
        return None

    name = "" if key.name is None else str(key.name)
    if not name.strip():
        return None
    try:
        floor = int(float(key.floor))
    except (TypeError, ValueError, OverflowError):
        return None
    return RoomKey(name, floor)


def _lookup_key(graph: RoomGraph, ref: RoomKey) -> str | None:
    """Exact key first, then a case-insensitive name match on the same floor."""
    if ref.key in graph:
        return ref.key

    wanted = ref.name.strip().casefold()
    matches = sorted(
        key
        for key, node in graph.items()
        if node.room.floor == ref.floor and node.room.name.strip().casefold() == wanted
    )
    return matches[0] if matches else None


def _to_route_point(graph: RoomGraph, key: str) -> RoutePoint:
    node = graph[key]
    return RoutePoint(
        coords=node.centroid,
        floor=node.room.floor,
        name=node.room.name,
        features=list(node.room.features),
        role=node.room.role,
        is_waypoint=False,
        base_height=node.room.base_height,
    )


def find_route(
    features: Iterable[Feature | Mapping[str, Any]],
    start: RoomRef | None,
    end: RoomRef | None,
    target_floor: int | None = None,
    *,
    config: RoutingConfig | None = None,
    trace: TraceHook | None = None,
    enhance: bool = True,
) -> list[RoutePoint] | None:
    """Find a route between two rooms.

    Args:
        features: Feature collection (parsed or raw GeoJSON features).
        start: Start room as `RoomKey`, `Feature` or GeoJSON feature mapping.
        end: End room, same forms as `start`.
        target_floor: Restrict routing to one floor; None allows floor changes.
        config: Routing parameters; defaults to `RoutingConfig()`.
        trace: Optional trace hook. When omitted and `config.trace_logging`
            is set, events go to the module logger.
        enhance: Insert boundary waypoints between hops.

    Returns:
        Ordered route points, or None when no route can be produced.
    """
    cfg = config or RoutingConfig()
    if trace is None and cfg.trace_logging:
        trace = log_trace

    start_ref = resolve_room_ref(start)
    end_ref = resolve_room_ref(end)
    if start_ref is None or end_ref is None:
        emit(trace, "route_failed", reason="invalid_endpoint")
        return None

    rooms = group_rooms(parse_features(list(features)))
    graph = build_room_graph(rooms, target_floor=target_floor, config=cfg, trace=trace)

    start_key = _lookup_key(graph, start_ref)
    end_key = _lookup_key(graph, end_ref)
    if start_key is None or end_key is None:
        emit(
            trace,
            "route_failed",
            reason="not_in_graph",
            start=start_ref.key,
            end=end_ref.key,
            start_found=start_key is not None,
            end_found=end_key is not None,
        )
        return None

    keys = astar(graph, start_key, end_key, trace=trace)
    if keys is None:
        emit(trace, "route_failed", reason="no_path", start=start_key, end=end_key)
        return None

    path = [_to_route_point(graph, key) for key in keys]
    if enhance:
        path = add_waypoints(path, config=cfg)

    emit(trace, "route_found", rooms=len(keys), points=len(path))
    return path


def calculate_route_distance(path: Sequence[RoutePoint] | None) -> float:
    """Sum of consecutive planar distances in native coordinate units.

    For WGS84 input this is decimal degrees, not meters; see
    `approximate_meters`.
    """
    if not path or len(path) < 2:
        return 0.0
    return float(sum(euclidean(a.coords, b.coords) for a, b in zip(path, path[1:])))


def approximate_meters(degrees: float) -> float:
    """Rough degrees -> meters conversion (1 degree ~ 111 km)."""
    return float(degrees) * DEGREES_TO_METERS


def route_to_coordinates_3d(
    path: Sequence[RoutePoint],
    floor_height_m: float = 3.0,
) -> list[list[float]]:
    """Convert a route into `[lon, lat, z]` vertices for 3D rendering.

    `z` is the floor elevation plus the point's base height (the highest base
    height declared by its room).
    """
    if floor_height_m <= 0:
        raise ValueError("floor_height_m must be > 0")

    coords: list[list[float]] = []
    for point in path:
        z = point.floor * floor_height_m + point.base_height
        coords.append([float(point.coords[0]), float(point.coords[1]), z])
    return coords
