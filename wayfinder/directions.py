"""Turn-by-turn directions and route statistics.

Purpose:
- Convert an enhanced route into start/turn/floor-change/waypoint/destination
  instructions.
- Summarize distance, walking time and floors for a route.
- Format directions as display/speech text.

Distances here are true meters (Haversine on `[lon, lat]`), unlike graph
construction which works in native coordinate units.

Usage example:
    >>> from wayfinder.directions import calculate_route_stats, generate_directions
    >>> steps = generate_directions(path)
    >>> steps[0].instruction
    'Start at Lab 1'
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from wayfinder.config import RoutingConfig
from wayfinder.path_enhancer import TRANSITION_NAME, RoutePoint
from wayfinder.room_index import RoomRole
from wayfinder.utils import bearing_deg, haversine_m


class DirectionType(str, Enum):
    START = "start"
    TURN = "turn"
    FLOOR_CHANGE = "floor_change"
    WAYPOINT = "waypoint"
    DESTINATION = "destination"


class TurnSeverity(str, Enum):
    STRAIGHT = "straight"
    SLIGHT = "slight"
    TURN = "turn"
    SHARP = "sharp"
    BACK = "back"


@dataclass(slots=True)
class Direction:
    """One navigation instruction."""

    id: int
    type: DirectionType
    instruction: str
    floor: int
    distance: float
    cumulative_distance: float
    location: str
    coords: tuple[float, float]
    target_floor: int | None = None
    turn: str | None = None
    turn_severity: TurnSeverity | None = None
    heading: str | None = None
    icon: str | None = None


@dataclass(slots=True)
class RouteStats:
    """Aggregate route statistics."""

    total_distance: float = 0.0
    estimated_time: float = 0.0
    floors: list[int] = field(default_factory=list)
    floor_changes: int = 0


COMPASS_POINTS = ("north", "northeast", "east", "southeast", "south", "southwest", "west", "northwest")

ICON_STAIRS = "\U0001fa9c"
ICON_ELEVATOR = "\U0001f6d7"
ICON_LEFT = "↰"
ICON_RIGHT = "↱"
ICON_AHEAD = "↑"
ICON_WAYPOINT = "\U0001f4cd"
ICON_DESTINATION = "\U0001f3af"


def bearing_to_compass(bearing: float) -> str:
    """Map a 0-360 bearing to one of eight compass words."""
    return COMPASS_POINTS[int(((bearing % 360.0) + 22.5) // 45.0) % 8]


def classify_turn(previous_bearing: float, current_bearing: float) -> tuple[TurnSeverity, str]:
    """Classify the signed change between two bearings.

    Returns:
        `(severity, label)` where label is e.g. `"slight left"`, `"right"`,
        `"sharp left"`, `"back"` or `"straight"`.
    """
    diff = current_bearing - previous_bearing
    while diff > 180:
        diff -= 360
    while diff < -180:
        diff += 360

    side = "right" if diff > 0 else "left"
    magnitude = abs(diff)

    if magnitude < 20:
        return TurnSeverity.STRAIGHT, "straight"
    if magnitude < 60:
        return TurnSeverity.SLIGHT, f"slight {side}"
    if magnitude < 120:
        return TurnSeverity.TURN, side
    if magnitude < 160:
        return TurnSeverity.SHARP, f"sharp {side}"
    return TurnSeverity.BACK, "back"


def _floor_change_kind(previous: RoutePoint, current: RoutePoint) -> str:
    for point in (previous, current):
        if point.role is RoomRole.STAIRS:
            return "stairs"
        if point.role is RoomRole.ELEVATOR:
            return "elevator"
    return "stairs/elevator"


def _turn_icon(label: str) -> str:
    if "left" in label:
        return ICON_LEFT
    if "right" in label:
        return ICON_RIGHT
    return ICON_AHEAD


def _turn_instruction(severity: TurnSeverity, label: str, point: RoutePoint) -> str:
    if severity is TurnSeverity.BACK:
        text = "Turn around"
    elif severity is TurnSeverity.SLIGHT:
        text = f"Continue {label}"
    else:
        text = f"Turn {label}"

    if not point.is_corridor and point.name != TRANSITION_NAME:
        text += f" at {point.name}"
    return text


def generate_directions(path: Sequence[RoutePoint], config: RoutingConfig | None = None) -> list[Direction]:
    """Generate turn-by-turn directions for a route.

    Args:
        path: Route points in travel order (typically from `find_route`).
        config: Minimum instruction distances; defaults to `RoutingConfig()`.

    Returns:
        Directions starting with `start` and ending with `destination`; empty
        when the path has fewer than two points.
    """
    cfg = config or RoutingConfig()
    if not path or len(path) < 2:
        return []

    first = path[0]
    directions: list[Direction] = [
        Direction(
            id=0,
            type=DirectionType.START,
            instruction=f"Start at {first.name}",
            floor=first.floor,
            distance=0.0,
            cumulative_distance=0.0,
            location=first.name,
            coords=first.coords,
        )
    ]

    cumulative = 0.0
    segment = 0.0
    previous_bearing: float | None = None
    last_index = len(path) - 1

    for i in range(1, len(path)):
        previous = path[i - 1]
        current = path[i]

        step = haversine_m(previous.coords, current.coords)
        segment += step
        cumulative += step

        if current.floor != previous.floor:
            kind = _floor_change_kind(previous, current)
            direction = "up" if current.floor > previous.floor else "down"
            directions.append(
                Direction(
                    id=len(directions),
                    type=DirectionType.FLOOR_CHANGE,
                    instruction=f"Take {kind} {direction} to Floor {current.floor}",
                    floor=previous.floor,
                    target_floor=current.floor,
                    distance=segment,
                    cumulative_distance=cumulative,
                    location=previous.name,
                    coords=previous.coords,
                    icon=ICON_ELEVATOR if kind == "elevator" else ICON_STAIRS,
                )
            )
            segment = 0.0
            previous_bearing = None
            continue

        # Coincident points carry no heading.
        if step == 0:
            continue

        current_bearing = bearing_deg(previous.coords, current.coords)

        if previous_bearing is not None:
            severity, label = classify_turn(previous_bearing, current_bearing)
            if severity is not TurnSeverity.STRAIGHT and segment > cfg.min_turn_distance_m:
                directions.append(
                    Direction(
                        id=len(directions),
                        type=DirectionType.TURN,
                        instruction=_turn_instruction(severity, label, current),
                        floor=current.floor,
                        distance=segment,
                        cumulative_distance=cumulative,
                        location=current.name,
                        coords=current.coords,
                        turn=label,
                        turn_severity=severity,
                        heading=bearing_to_compass(current_bearing),
                        icon=_turn_icon(label),
                    )
                )
                segment = 0.0

        # Pass-through rooms: real rooms only, never the destination or the
        # point right before it.
        if (
            not current.is_corridor
            and not current.is_waypoint
            and i < last_index - 1
            and segment > cfg.min_pass_through_distance_m
        ):
            directions.append(
                Direction(
                    id=len(directions),
                    type=DirectionType.WAYPOINT,
                    instruction=f"Pass through {current.name}",
                    floor=current.floor,
                    distance=segment,
                    cumulative_distance=cumulative,
                    location=current.name,
                    coords=current.coords,
                    icon=ICON_WAYPOINT,
                )
            )
            segment = 0.0

        previous_bearing = current_bearing

    last = path[-1]
    directions.append(
        Direction(
            id=len(directions),
            type=DirectionType.DESTINATION,
            instruction=f"Arrive at {last.name}",
            floor=last.floor,
            distance=segment,
            cumulative_distance=cumulative,
            location=last.name,
            coords=last.coords,
            icon=ICON_DESTINATION,
        )
    )
    return directions


def calculate_route_stats(path: Sequence[RoutePoint], config: RoutingConfig | None = None) -> RouteStats:
    """Total Haversine distance, walking time and floors of a route.

    Time is distance / walking speed plus a fixed delay per floor change.
    """
    cfg = config or RoutingConfig()
    if not path or len(path) < 2:
        return RouteStats()

    total = 0.0
    floor_changes = 0
    floors = {path[0].floor}
    for previous, current in zip(path, path[1:]):
        total += haversine_m(previous.coords, current.coords)
        floors.add(current.floor)
        if current.floor != previous.floor:
            floor_changes += 1

    return RouteStats(
        total_distance=total,
        estimated_time=total / cfg.walking_speed_mps + floor_changes * cfg.floor_change_time_s,
        floors=sorted(floors),
        floor_changes=floor_changes,
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_distance(meters: float) -> str:
    """Human-readable distance (`"45 cm"`, `"3.2 m"`, `"27 m"`, `"0.15 km"`)."""
    if meters < 1:
        return f"{_round_half_up(meters * 100)} cm"
    if meters < 10:
        return f"{meters:.1f} m"
    if meters < 100:
        return f"{_round_half_up(meters)} m"
    return f"{meters / 1000:.2f} km"


def format_duration(seconds: float) -> str:
    """Human-readable duration (`"45 sec"`, `"2 min"`, `"2 min 5 sec"`)."""
    mins, secs = divmod(_round_half_up(max(0.0, seconds)), 60)
    if mins == 0:
        return f"{secs} sec"
    return f"{mins} min {secs} sec" if secs > 0 else f"{mins} min"


def generate_speech_text(directions: Sequence[Direction]) -> str:
    """Join all directions into one spoken paragraph."""
    if not directions:
        return ""

    texts: list[str] = []
    for direction in directions:
        text = direction.instruction
        if direction.type not in (DirectionType.START, DirectionType.DESTINATION) and direction.distance > 1:
            text += f", in {format_distance(direction.distance)}"
        texts.append(text)
    return ". ".join(texts) + "."


def generate_step_speech(direction: Direction | None) -> str:
    """Spoken text for a single direction step."""
    if direction is None:
        return ""

    text = direction.instruction
    if direction.distance and direction.distance > 1:
        text += f". Distance: {format_distance(direction.distance)}"
    if direction.target_floor is not None:
        text += f". Moving from Floor {direction.floor} to Floor {direction.target_floor}"
    return text
