"""A* pathfinding over the room adjacency graph.

Purpose:
- Compute least-cost room sequences between two graph keys.
- Stay deterministic on graphs with symmetric alternatives.

Tie-breaking: among open nodes with equal f-score the one with the smaller
heuristic (closer to the goal) is expanded first, then the one pushed
earliest.

The heuristic is the Euclidean distance between centroids. Corridor edges
are discounted below that distance (multipliers < 1), so the heuristic is
not strictly admissible with the default multipliers and a corridor-heavy
path may be preferred over a marginally cheaper one. Pass
`heuristic_weight=config.min_multiplier` for an exact search.

Usage example:
    >>> from wayfinder.pathfinding import astar
    >>> astar(graph, "Lab 1_F0", "Lab 2_F0")
    ['Lab 1_F0', 'Main Hall_F0', 'Lab 2_F0']
"""

from __future__ import annotations

import heapq
import itertools
from typing import Sequence

from wayfinder.graph_builder import RoomGraph
from wayfinder.trace import TraceHook, emit
from wayfinder.utils import euclidean


def _heuristic(graph: RoomGraph, key: str, goal: str, weight: float) -> float:
    return weight * euclidean(graph[key].centroid, graph[goal].centroid)


def astar(
    graph: RoomGraph,
    start_key: str,
    end_key: str,
    heuristic_weight: float = 1.0,
    trace: TraceHook | None = None,
) -> list[str] | None:
    """Compute the least-cost key path via A*.

    Args:
        graph: Room graph from `build_room_graph`.
        start_key: Start node key.
        end_key: Goal node key.
        heuristic_weight: Scale applied to the Euclidean heuristic.
        trace: Optional trace hook.

    Returns:
        Ordered list of keys from start to goal, or None if either key is not
        in the graph or the goal is unreachable.
    """
    if start_key not in graph or end_key not in graph:
        emit(trace, "search_finished", found=False, reason="missing_node", expanded=0)
        return None

    counter = itertools.count()
    h0 = _heuristic(graph, start_key, end_key, heuristic_weight)
    open_heap: list[tuple[float, float, int, str]] = [(h0, h0, next(counter), start_key)]

    came_from: dict[str, str] = {}
    g_score: dict[str, float] = {start_key: 0.0}
    closed: set[str] = set()

    emit(trace, "search_started", start=start_key, goal=end_key, heuristic=h0)

    while open_heap:
        _, _, _, current = heapq.heappop(open_heap)

        if current in closed:
            continue

        if current == end_key:
            path = [current]
            while current in came_from:
                current = came_from[current]
                path.append(current)
            path.reverse()
            emit(trace, "search_finished", found=True, expanded=len(closed), length=len(path))
            return path

        closed.add(current)

        for neighbor in graph[current].neighbors:
            # Edges can point at nodes filtered out of this graph.
            if neighbor.key in closed or neighbor.key not in graph:
                continue

            tentative_g = g_score[current] + neighbor.distance
            if tentative_g < g_score.get(neighbor.key, float("inf")):
                came_from[neighbor.key] = current
                g_score[neighbor.key] = tentative_g
                h = _heuristic(graph, neighbor.key, end_key, heuristic_weight)
                heapq.heappush(open_heap, (tentative_g + h, h, next(counter), neighbor.key))

    emit(trace, "search_finished", found=False, reason="exhausted", expanded=len(closed))
    return None


def path_cost(graph: RoomGraph, keys: Sequence[str]) -> float | None:
    """Sum edge weights along `keys`; None if any hop is not an edge."""
    total = 0.0
    for a, b in zip(keys, keys[1:]):
        node = graph.get(a)
        if node is None:
            return None
        weight = next((n.distance for n in node.neighbors if n.key == b), None)
        if weight is None:
            return None
        total += weight
    return total
