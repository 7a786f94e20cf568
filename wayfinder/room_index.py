"""Room index: group raw geometry features into logical rooms.

A room is every feature sharing the same `(name, floor)`. Each room is
classified once into a `RoomRole` so graph construction and direction
generation never re-run name matching.

Usage example:
    >>> from wayfinder.room_index import group_rooms
    >>> rooms = group_rooms(features)
    >>> rooms["Main Hall_F0"].role
    <RoomRole.CORRIDOR: 'corridor'>
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping

import numpy as np

from wayfinder.features import Feature, parse_features


class RoomRole(str, Enum):
    """Navigation role of a room."""

    REGULAR = "regular"
    CORRIDOR = "corridor"
    STAIRS = "stairs"
    ELEVATOR = "elevator"
    STRUCTURAL = "structural"

    @property
    def is_vertical_connector(self) -> bool:
        return self in (RoomRole.STAIRS, RoomRole.ELEVATOR)


STRUCTURAL_NAMES = frozenset({"floor", "structure", "void", "exterior"})
STAIRS_KEYWORDS = ("stair", "escada")
ELEVATOR_KEYWORDS = ("elevator", "elevador", "lift")
CORRIDOR_KEYWORDS = ("corridor", "corredor", "hallway", "hall", "lobby", "passage")

# `type`/`tipo` values mapped straight to a role.
TYPE_HINTS: dict[str, RoomRole] = {
    "corridor": RoomRole.CORRIDOR,
    "corredor": RoomRole.CORRIDOR,
    "hallway": RoomRole.CORRIDOR,
    "lobby": RoomRole.CORRIDOR,
    "stairs": RoomRole.STAIRS,
    "stair": RoomRole.STAIRS,
    "staircase": RoomRole.STAIRS,
    "escada": RoomRole.STAIRS,
    "elevator": RoomRole.ELEVATOR,
    "elevador": RoomRole.ELEVATOR,
    "lift": RoomRole.ELEVATOR,
    "structure": RoomRole.STRUCTURAL,
    "structural": RoomRole.STRUCTURAL,
    "void": RoomRole.STRUCTURAL,
    "exterior": RoomRole.STRUCTURAL,
}


def room_key(name: str, floor: int) -> str:
    """Graph key for a room, e.g. `Lab 2_F1`."""
    return f"{name}_F{int(floor)}"


def classify_role(name: str, type_hint: str | None = None) -> RoomRole:
    """Classify a room from its `type` hint, falling back to name keywords."""
    if type_hint:
        hinted = TYPE_HINTS.get(type_hint.strip().lower())
        if hinted is not None:
            return hinted

    lowered = name.strip().lower()
    if lowered in STRUCTURAL_NAMES:
        return RoomRole.STRUCTURAL
    if any(word in lowered for word in STAIRS_KEYWORDS):
        return RoomRole.STAIRS
    if any(word in lowered for word in ELEVATOR_KEYWORDS):
        return RoomRole.ELEVATOR
    if any(word in lowered for word in CORRIDOR_KEYWORDS):
        return RoomRole.CORRIDOR
    return RoomRole.REGULAR


@dataclass(slots=True, eq=False)
class Room:
    """Logical room built from every feature sharing a name and floor."""

    name: str
    floor: int
    role: RoomRole = RoomRole.REGULAR
    features: list[Feature] = field(default_factory=list)
    vertices: np.ndarray = field(default_factory=lambda: np.empty((0, 2), dtype=float))
    centroid: tuple[float, float] = (0.0, 0.0)

    @property
    def key(self) -> str:
        return room_key(self.name, self.floor)

    @property
    def is_corridor(self) -> bool:
        return self.role is RoomRole.CORRIDOR

    @property
    def is_navigable(self) -> bool:
        return self.role is not RoomRole.STRUCTURAL

    @property
    def base_height(self) -> float:
        """Highest member base elevation in meters (stairs, ramps)."""
        bases = [f.base_height for f in self.features if f.base_height is not None]
        return max(bases) if bases else 0.0


def is_navigable(room: Room) -> bool:
    """Structural rooms stay indexed but never become graph nodes."""
    return room.is_navigable


def _room_role(name: str, features: list[Feature]) -> RoomRole:
    for feature in features:
        if feature.type_hint and feature.type_hint.strip().lower() in TYPE_HINTS:
            return classify_role(name, feature.type_hint)
    return classify_role(name)


def group_rooms(features: Iterable[Feature | Mapping[str, Any]]) -> dict[str, Room]:
    """Group features by `(name, floor)` and compute each room's centroid.

    The centroid is the arithmetic mean of every outer-ring vertex across the
    room's features. It approximates position for proximity checks and
    display; it is not an area centroid. Rooms without vertices sit at the
    origin.

    Args:
        features: Parsed `Feature` objects or raw GeoJSON feature mappings.

    Returns:
        Mapping of room key -> Room, in order of first appearance.
    """
    rooms: dict[str, Room] = {}
    for feature in parse_features(list(features)):
        key = room_key(feature.name, feature.floor)
        room = rooms.get(key)
        if room is None:
            room = Room(name=feature.name, floor=feature.floor)
            rooms[key] = room
        room.features.append(feature)

    for room in rooms.values():
        room.role = _room_role(room.name, room.features)
        parts = [v for v in (f.outer_vertices() for f in room.features) if v.size]
        if parts:
            room.vertices = np.vstack(parts)
            mean = room.vertices.mean(axis=0)
            room.centroid = (float(mean[0]), float(mean[1]))

    return rooms
