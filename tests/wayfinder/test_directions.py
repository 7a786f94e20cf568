"""Unit tests for wayfinder.directions."""

from __future__ import annotations

import math

import pytest

from wayfinder.directions import (
    Direction,
    DirectionType,
    TurnSeverity,
    bearing_to_compass,
    calculate_route_stats,
    classify_turn,
    format_distance,
    format_duration,
    generate_directions,
    generate_speech_text,
    generate_step_speech,
)
from wayfinder.path_enhancer import RoutePoint
from wayfinder.room_index import RoomRole

# ~11 m per step at the equator.
STEP = 0.0001


def _p(name: str, lon: float, lat: float, floor: int = 0, role: RoomRole = RoomRole.REGULAR, waypoint: bool = False) -> RoutePoint:
    return RoutePoint(coords=(lon, lat), floor=floor, name=name, role=role, is_waypoint=waypoint)


def _types(directions: list[Direction]) -> list[DirectionType]:
    return [d.type for d in directions]


def test_short_paths_produce_nothing() -> None:
    """Paths shorter than two points yield no directions."""
    assert generate_directions([]) == []
    assert generate_directions([_p("Lab", 0.0, 0.0)]) == []


def test_straight_path_has_start_and_destination_only() -> None:
    """A straight walk is just start and arrival."""
    directions = generate_directions([_p("Lab", 0.0, 0.0), _p("Office", STEP, 0.0)])

    assert _types(directions) == [DirectionType.START, DirectionType.DESTINATION]
    assert directions[0].instruction == "Start at Lab"
    assert directions[-1].instruction == "Arrive at Office"
    assert directions[-1].cumulative_distance == pytest.approx(11.12, abs=0.05)
    assert [d.id for d in directions] == [0, 1]


def test_right_angle_yields_exactly_one_turn() -> None:
    """A right-angle corner yields one left turn."""
    path = [_p("Lab", 0.0, 0.0), _p("Corner", STEP, 0.0), _p("Office", STEP, STEP)]

    directions = generate_directions(path)
    turns = [d for d in directions if d.type is DirectionType.TURN]

    assert len(turns) == 1
    assert turns[0].turn_severity is TurnSeverity.TURN
    assert turns[0].turn == "left"
    assert turns[0].instruction == "Turn left at Office"
    assert turns[0].heading == "north"
    assert turns[0].icon == "↰"


def test_turn_in_corridor_has_no_location_suffix() -> None:
    """Turns inside a corridor omit the location."""
    path = [
        _p("Lab", 0.0, 0.0),
        _p("Main Hall", STEP, 0.0, role=RoomRole.CORRIDOR),
        _p("Main Hall", STEP, -STEP, role=RoomRole.CORRIDOR),
        _p("Office", 2 * STEP, -STEP),
    ]

    turns = [d for d in generate_directions(path) if d.type is DirectionType.TURN]

    assert turns[0].instruction == "Turn right"
    assert turns[0].icon == "↱"


def test_short_segments_suppress_turns() -> None:
    """Turns after very short segments are not announced."""
    tiny = 0.00001  # ~1.1 m
    path = [_p("Lab", 0.0, 0.0), _p("Corner", tiny, 0.0), _p("Office", tiny, tiny)]

    assert _types(generate_directions(path)) == [DirectionType.START, DirectionType.DESTINATION]


def test_floor_change_uses_departure_role() -> None:
    """The connector kind comes from the departure point."""
    path = [
        _p("Lab", 0.0, 0.0, floor=0),
        _p("Stairs", STEP, 0.0, floor=0, role=RoomRole.STAIRS),
        _p("Stairs", STEP, 0.0, floor=1, role=RoomRole.STAIRS),
        _p("Office", 2 * STEP, 0.0, floor=1),
    ]

    directions = generate_directions(path)
    changes = [d for d in directions if d.type is DirectionType.FLOOR_CHANGE]

    assert len(changes) == 1
    assert changes[0].instruction == "Take stairs up to Floor 1"
    assert changes[0].floor == 0
    assert changes[0].target_floor == 1
    assert changes[0].location == "Stairs"


def test_floor_change_down_falls_back_to_arrival_role_then_generic() -> None:
    """Unknown departure roles fall back to the arrival role, then a generic label."""
    elevator = [
        _p("Lab", 0.0, 0.0, floor=2),
        _p("Lift", 0.0, 0.0, floor=1, role=RoomRole.ELEVATOR),
    ]
    generic = [_p("Lab", 0.0, 0.0, floor=2), _p("Office", 0.0, 0.0, floor=1)]

    assert generate_directions(elevator)[1].instruction == "Take elevator down to Floor 1"
    assert generate_directions(generic)[1].instruction == "Take stairs/elevator down to Floor 1"


def test_pass_through_room_on_long_route() -> None:
    """Long hops through a regular room announce it."""
    path = [
        _p("Lab", 0.0, 0.0),
        _p("Gallery", STEP, 0.0),
        _p("Main Hall", 2 * STEP, 0.0, role=RoomRole.CORRIDOR),
        _p("Office", 3 * STEP, 0.0),
    ]

    directions = generate_directions(path)

    assert _types(directions) == [DirectionType.START, DirectionType.WAYPOINT, DirectionType.DESTINATION]
    assert directions[1].instruction == "Pass through Gallery"


def test_inserted_waypoints_never_become_pass_through() -> None:
    """Inserted waypoints are never announced."""
    path = [
        _p("Lab", 0.0, 0.0),
        _p("transition", STEP, 0.0, waypoint=True),
        _p("Main Hall", 2 * STEP, 0.0, role=RoomRole.CORRIDOR),
        _p("Office", 3 * STEP, 0.0),
    ]

    assert _types(generate_directions(path)) == [DirectionType.START, DirectionType.DESTINATION]


def test_classify_turn_boundaries() -> None:
    """Turn severity follows the angle bands."""
    assert classify_turn(0, 10) == (TurnSeverity.STRAIGHT, "straight")
    assert classify_turn(0, 30) == (TurnSeverity.SLIGHT, "slight right")
    assert classify_turn(90, 0) == (TurnSeverity.TURN, "left")
    assert classify_turn(0, 140) == (TurnSeverity.SHARP, "sharp right")
    assert classify_turn(0, 180) == (TurnSeverity.BACK, "back")
    assert classify_turn(350, 20) == (TurnSeverity.SLIGHT, "slight right")


def test_bearing_to_compass() -> None:
    """Bearings map to the nearest compass point."""
    assert bearing_to_compass(0) == "north"
    assert bearing_to_compass(350) == "north"
    assert bearing_to_compass(45) == "northeast"
    assert bearing_to_compass(180) == "south"
    assert bearing_to_compass(290) == "west"


def test_route_stats_ten_meters() -> None:
    """Ten metres at walking speed takes about seven seconds."""
    ten_m_deg = math.degrees(10.0 / 6371000.0)
    stats = calculate_route_stats([_p("Lab", 0.0, 0.0, floor=2), _p("Office", 0.0, ten_m_deg, floor=2)])

    assert stats.total_distance == pytest.approx(10.0)
    assert stats.estimated_time == pytest.approx(10.0 / 1.4)
    assert stats.floor_changes == 0
    assert stats.floors == [2]


def test_route_stats_counts_floor_changes() -> None:
    """Each floor change adds a fixed delay."""
    path = [
        _p("Lab", 0.0, 0.0, floor=1),
        _p("Stairs", 0.0, 0.0, floor=1, role=RoomRole.STAIRS),
        _p("Stairs", 0.0, 0.0, floor=0, role=RoomRole.STAIRS),
    ]

    stats = calculate_route_stats(path)

    assert stats.floor_changes == 1
    assert stats.floors == [0, 1]
    assert stats.estimated_time == pytest.approx(30.0)
    assert calculate_route_stats(path[:1]).floors == []


def test_format_distance_and_duration() -> None:
    """Distances and durations render in readable units."""
    assert format_distance(0.456) == "46 cm"
    assert format_distance(3.24) == "3.2 m"
    assert format_distance(27.5) == "28 m"
    assert format_distance(150) == "0.15 km"
    assert format_duration(45.2) == "45 sec"
    assert format_duration(120) == "2 min"
    assert format_duration(125.4) == "2 min 5 sec"
    assert format_duration(59.7) == "1 min"


def test_speech_text() -> None:
    """Speech text joins every step into sentences."""
    path = [_p("Lab", 0.0, 0.0), _p("Corner", STEP, 0.0), _p("Office", STEP, STEP)]
    directions = generate_directions(path)

    text = generate_speech_text(directions)

    assert text.startswith("Start at Lab. Turn left at Office, in ")
    assert text.endswith("Arrive at Office.")
    assert generate_speech_text([]) == ""


def test_step_speech_mentions_floors() -> None:
    """Floor change speech names both floors."""
    path = [
        _p("Stairs", 0.0, 0.0, floor=0, role=RoomRole.STAIRS),
        _p("Stairs", 0.0, 0.0, floor=1, role=RoomRole.STAIRS),
    ]
    change = generate_directions(path)[1]

    assert generate_step_speech(change) == "Take stairs up to Floor 1. Moving from Floor 0 to Floor 1"
    assert generate_step_speech(None) == ""
