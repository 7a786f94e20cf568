"""Routing thresholds and constants.

Distances used while building the graph and inserting waypoints are in the
native coordinate units of the input (decimal degrees for WGS84 GeoJSON).
Walking statistics are in meters and seconds.

Usage example:
    >>> from wayfinder.config import RoutingConfig
    >>> RoutingConfig(regular_threshold=0.001).regular_threshold
    0.001
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

EARTH_RADIUS_M = 6371000.0
DEGREES_TO_METERS = 111000.0


@dataclass(frozen=True, slots=True)
class RoutingConfig:
    """Tunable parameters for graph construction, enhancement and directions."""

    # Same-floor proximity thresholds per pair class.
    corridor_threshold: float = 0.0025
    corridor_room_threshold: float = 0.0015
    regular_threshold: float = 0.0008

    # Edge weight multipliers per pair class.
    corridor_multiplier: float = 0.8
    corridor_room_multiplier: float = 0.9
    regular_multiplier: float = 1.2

    # Adjacent-floor links through stairs and elevators.
    vertical_threshold: float = 0.003
    floor_change_penalty: float = 2.0

    # Waypoint enhancement.
    waypoint_gap: float = 0.0002
    max_corridor_waypoints: int = 5

    # Directions.
    min_turn_distance_m: float = 3.0
    min_pass_through_distance_m: float = 5.0
    walking_speed_mps: float = 1.4
    floor_change_time_s: float = 30.0

    trace_logging: bool = False

    def __post_init__(self) -> None:
        for name in (
            "corridor_threshold",
            "corridor_room_threshold",
            "regular_threshold",
            "vertical_threshold",
            "waypoint_gap",
            "walking_speed_mps",
        ):
            if float(getattr(self, name)) <= 0:
                raise ValueError(f"{name} must be > 0")

        for name in (
            "corridor_multiplier",
            "corridor_room_multiplier",
            "regular_multiplier",
            "floor_change_penalty",
        ):
            if float(getattr(self, name)) <= 0:
                raise ValueError(f"{name} must be > 0")

        if self.max_corridor_waypoints < 1:
            raise ValueError("max_corridor_waypoints must be >= 1")
        if self.min_turn_distance_m < 0 or self.min_pass_through_distance_m < 0:
            raise ValueError("minimum instruction distances must be >= 0")
        if self.floor_change_time_s < 0:
            raise ValueError("floor_change_time_s must be >= 0")

    @property
    def min_multiplier(self) -> float:
        """Smallest same-floor or vertical edge multiplier."""
        return min(
            self.corridor_multiplier,
            self.corridor_room_multiplier,
            self.regular_multiplier,
            self.floor_change_penalty,
        )

    @classmethod
    def from_env(cls) -> "RoutingConfig":
        """Build config from `WAYFINDER_*` environment variables.

        Every field can be overridden by its upper-cased name, e.g.
        `WAYFINDER_CORRIDOR_THRESHOLD=0.003` or `WAYFINDER_TRACE_LOGGING=true`.
        """
        overrides: dict[str, object] = {}
        for f in fields(cls):
            raw = os.getenv(f"WAYFINDER_{f.name.upper()}")
            if raw is None or not raw.strip():
                continue
            raw = raw.strip()

            try:
                if f.type in ("bool", bool):
                    overrides[f.name] = raw.lower() in {"1", "true", "yes", "on"}
                elif f.type in ("int", int):
                    overrides[f.name] = int(raw)
                else:
                    overrides[f.name] = float(raw)
            except ValueError as exc:
                raise ValueError(f"WAYFINDER_{f.name.upper()} has invalid value {raw!r}") from exc

        return cls(**overrides)
