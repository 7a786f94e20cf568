"""Input feature model for floor-plan geometry.

Features arrive as GeoJSON-style mappings whose properties use a handful of
aliases depending on the export tool (`name`/`id`/`room_id`,
`floor`/`level`/`nivel`, ...). `Feature.from_geojson` resolves them once so
the rest of the pipeline works with plain attributes.

Usage example:
    >>> from wayfinder.features import Feature
    >>> f = Feature.from_geojson({
    ...     "type": "Feature",
    ...     "properties": {"id": "Lab 2", "nivel": 1},
    ...     "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
    ... })
    >>> (f.name, f.floor)
    ('Lab 2', 1)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from shapely.errors import ShapelyError
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

NAME_KEYS = ("name", "id", "room_id")
FLOOR_KEYS = ("floor", "level", "nivel")
HEIGHT_KEYS = ("height", "altura")
BASE_HEIGHT_KEYS = ("base_height", "base_heigh", "baseHeight", "baseheight")
TYPE_KEYS = ("type", "tipo")


def _first_present(props: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = props.get(key)
        if value is not None and value != "":
            return value
    return None


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class Feature(BaseModel):
    """One geometry unit of the floor plan."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    floor: int = 0
    geometry: dict[str, Any] | None = None
    height: float | None = None
    base_height: float | None = None
    type_hint: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _resolve_aliases(cls, data: Any) -> Any:
        """Accept raw GeoJSON `{"properties": ..., "geometry": ...}` mappings."""
        if not isinstance(data, Mapping) or "properties" not in data or "name" in data:
            return data

        raw_props = data.get("properties")
        props = dict(raw_props) if isinstance(raw_props, Mapping) else {}
        name = _first_present(props, NAME_KEYS)
        type_hint = _first_present(props, TYPE_KEYS)
        return {
            "name": "" if name is None else str(name),
            "floor": _first_present(props, FLOOR_KEYS),
            "geometry": data.get("geometry"),
            "height": _optional_float(_first_present(props, HEIGHT_KEYS)),
            "base_height": _optional_float(_first_present(props, BASE_HEIGHT_KEYS)),
            "type_hint": None if type_hint is None else str(type_hint),
            "properties": props,
        }

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("geometry", mode="before")
    @classmethod
    def _drop_bad_geometry(cls, value: Any) -> Any:
        return dict(value) if isinstance(value, Mapping) else None

    @field_validator("height", "base_height", mode="before")
    @classmethod
    def _coerce_optional_float(cls, value: Any) -> float | None:
        return _optional_float(value)

    @field_validator("type_hint", mode="before")
    @classmethod
    def _coerce_type_hint(cls, value: Any) -> str | None:
        return None if value is None else str(value)

    @field_validator("properties", mode="before")
    @classmethod
    def _coerce_properties(cls, value: Any) -> dict[str, Any]:
        return dict(value) if isinstance(value, Mapping) else {}

    @field_validator("floor", mode="before")
    @classmethod
    def _coerce_floor(cls, value: Any) -> int:
        if value is None:
            return 0
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 0

    @classmethod
    def from_geojson(cls, raw: Mapping[str, Any]) -> "Feature":
        """Parse one GeoJSON feature mapping."""
        return cls.model_validate({"properties": {}, **dict(raw)})

    def to_shape(self) -> BaseGeometry | None:
        """Return the shapely geometry, or None for missing/broken geometry."""
        if not self.geometry:
            return None
        try:
            geom = shape(self.geometry)
        except (ShapelyError, ValueError, TypeError, KeyError, IndexError, AttributeError):
            return None
        return None if geom.is_empty else geom

    def outer_vertices(self) -> np.ndarray:
        """Outer-ring vertices as an `(N, 2)` array of `[x, y]`.

        Polygons contribute their exterior ring without the repeated closing
        vertex; line strings contribute every vertex. Holes are ignored.
        """
        geom = self.to_shape()
        if geom is None:
            return np.empty((0, 2), dtype=float)
        return _geometry_vertices(geom)


def _geometry_vertices(geom: BaseGeometry) -> np.ndarray:
    if geom.is_empty:
        return np.empty((0, 2), dtype=float)

    if geom.geom_type == "Polygon":
        coords = list(geom.exterior.coords)
        if len(coords) > 1 and coords[0] == coords[-1]:
            coords = coords[:-1]
    elif geom.geom_type in ("LineString", "LinearRing", "Point"):
        coords = list(geom.coords)
    elif hasattr(geom, "geoms"):
        parts = [_geometry_vertices(part) for part in geom.geoms]
        parts = [p for p in parts if p.size]
        return np.vstack(parts) if parts else np.empty((0, 2), dtype=float)
    else:
        return np.empty((0, 2), dtype=float)

    if not coords:
        return np.empty((0, 2), dtype=float)
    return np.asarray([(float(c[0]), float(c[1])) for c in coords], dtype=float)


def parse_features(raw_features: list[Mapping[str, Any] | Feature]) -> list[Feature]:
    """Parse a list of GeoJSON feature mappings (already-parsed features pass through)."""
    return [f if isinstance(f, Feature) else Feature.from_geojson(f) for f in raw_features]


def load_feature_collection(path: str | Path) -> list[Feature]:
    """Load a GeoJSON FeatureCollection file into `Feature` objects.

    Raises:
        ValueError: If the file is not valid JSON or not a FeatureCollection.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON") from exc

    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        raise ValueError(f"{path} must contain a GeoJSON FeatureCollection")

    raw_features = data.get("features")
    if not isinstance(raw_features, list):
        raise ValueError(f"{path} FeatureCollection must have a 'features' list")

    return parse_features([f for f in raw_features if isinstance(f, dict)])
