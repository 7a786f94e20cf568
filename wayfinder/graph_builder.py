"""Room-level adjacency graph for floor-local and cross-floor routing.

Input features carry no topology, so adjacency is inferred from centroid
proximity:
- same floor: threshold and weight multiplier depend on whether each end is a
  corridor; corridor links are cheapest so search prefers circulation space.
- adjacent floors: only through stairs/elevator rooms, with a floor-change
  weight penalty.

All distances are in native coordinate units.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from wayfinder.config import RoutingConfig
from wayfinder.room_index import Room
from wayfinder.trace import TraceHook, emit
from wayfinder.utils import euclidean


@dataclass(slots=True)
class Neighbor:
    """Directed edge to another room node."""

    key: str
    distance: float
    is_corridor: bool = False
    is_vertical: bool = False


@dataclass(slots=True)
class GraphNode:
    """Graph node wrapping one navigable room."""

    key: str
    room: Room
    centroid: tuple[float, float]
    is_corridor: bool
    neighbors: list[Neighbor] = field(default_factory=list)


RoomGraph = dict[str, GraphNode]


def _same_floor_rule(a: Room, b: Room, config: RoutingConfig) -> tuple[float, float]:
    """Return `(threshold, multiplier)` for a same-floor pair."""
    if a.is_corridor and b.is_corridor:
        return config.corridor_threshold, config.corridor_multiplier
    if a.is_corridor or b.is_corridor:
        return config.corridor_room_threshold, config.corridor_room_multiplier
    return config.regular_threshold, config.regular_multiplier


def _edge(room: Room, other: Room, config: RoutingConfig) -> Neighbor | None:
    """Build the edge `room -> other`, or None when they are not adjacent."""
    dist = euclidean(room.centroid, other.centroid)

    if room.floor == other.floor:
        threshold, multiplier = _same_floor_rule(room, other, config)
        if 0 < dist < threshold:
            return Neighbor(
                key=other.key,
                distance=dist * multiplier,
                is_corridor=room.is_corridor and other.is_corridor,
            )
        return None

    if abs(room.floor - other.floor) != 1:
        return None
    if not (room.role.is_vertical_connector or other.role.is_vertical_connector):
        return None

    # Stacked shafts share a centroid, so zero distance is a valid link here.
    if dist < config.vertical_threshold:
        return Neighbor(
            key=other.key,
            distance=dist * config.floor_change_penalty,
            is_vertical=True,
        )
    return None


def build_room_graph(
    rooms: dict[str, Room] | Iterable[Room],
    target_floor: int | None = None,
    config: RoutingConfig | None = None,
    trace: TraceHook | None = None,
) -> RoomGraph:
    """Build the weighted adjacency graph over navigable rooms.

    Args:
        rooms: Rooms from `group_rooms` (mapping or iterable).
        target_floor: Restrict the graph to one floor; None keeps all floors
            and enables cross-floor links.
        config: Thresholds and multipliers; defaults to `RoutingConfig()`.
        trace: Optional trace hook.

    Returns:
        Mapping of room key -> GraphNode.
    """
    cfg = config or RoutingConfig()
    all_rooms = list(rooms.values()) if isinstance(rooms, dict) else list(rooms)

    candidates = all_rooms if target_floor is None else [r for r in all_rooms if r.floor == int(target_floor)]
    navigable = [r for r in candidates if r.is_navigable]

    graph: RoomGraph = {}
    edge_count = 0
    for room in navigable:
        neighbors: list[Neighbor] = []
        for other in navigable:
            if other is room:
                continue
            edge = _edge(room, other, cfg)
            if edge is not None:
                neighbors.append(edge)

        edge_count += len(neighbors)
        graph[room.key] = GraphNode(
            key=room.key,
            room=room,
            centroid=room.centroid,
            is_corridor=room.is_corridor,
            neighbors=neighbors,
        )

    emit(
        trace,
        "graph_built",
        target_floor=target_floor,
        rooms=len(candidates),
        navigable=len(navigable),
        nodes=len(graph),
        edges=edge_count,
    )
    return graph
