"""Pytest global fixtures for floor-plan routing tests."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from wayfinder.config import RoutingConfig

FeatureFactory = Callable[..., dict[str, Any]]


def square(cx: float, cy: float, half: float = 0.0001) -> list[list[list[float]]]:
    """Closed square ring centered at `(cx, cy)` as Polygon coordinates."""
    return [
        [
            [cx - half, cy - half],
            [cx + half, cy - half],
            [cx + half, cy + half],
            [cx - half, cy + half],
            [cx - half, cy - half],
        ]
    ]


@pytest.fixture()
def room_feature() -> FeatureFactory:
    """Factory for GeoJSON room features with a small square footprint."""

    def make(name: str, cx: float, cy: float, floor: int = 0, half: float = 0.0001, **props: Any) -> dict[str, Any]:
        return {
            "type": "Feature",
            "properties": {"name": name, "floor": floor, **props},
            "geometry": {"type": "Polygon", "coordinates": square(cx, cy, half)},
        }

    return make


@pytest.fixture()
def corridor_layout(room_feature: FeatureFactory) -> list[dict[str, Any]]:
    """RoomA - Corridor1 - RoomB in a row on floor 1."""
    return [
        room_feature("RoomA", 0.0, 0.0, floor=1),
        room_feature("Corridor1", 0.001, 0.0, floor=1),
        room_feature("RoomB", 0.002, 0.0, floor=1),
    ]


@pytest.fixture()
def elevator_layout(room_feature: FeatureFactory) -> list[dict[str, Any]]:
    """Office on floor 0 and Lab on floor 1, joined only by a stacked elevator."""
    return [
        room_feature("Office", 0.0, 0.0, floor=0),
        room_feature("Elevator_1", 0.0005, 0.0, floor=0),
        room_feature("Elevator_1", 0.0005, 0.0, floor=1),
        room_feature("Lab", 0.001, 0.0, floor=1),
    ]


@pytest.fixture()
def config() -> RoutingConfig:
    """Default routing configuration."""
    return RoutingConfig()
