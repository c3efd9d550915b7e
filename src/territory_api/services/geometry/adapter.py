"""Conversion between persisted GeoJSON and editable territory polygons.

Persisted geometry is GeoJSON, longitude first. Editable polygons are
latitude first: ``list[polygon]``, each polygon a ``list[ring]``, each ring a
``list[(lat, lng)]``. The axis swap happens here and nowhere else.

Malformed input never raises. Points with missing or non-finite coordinates
are dropped, rings left with fewer than three points are dropped, and
polygons left without rings are dropped. Drops are logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence, Union

from shapely.errors import GEOSException
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from ...models.domain import EditablePolygon, LatLng, Ring
from ..geospatial import is_finite_number

logger = logging.getLogger(__name__)

MIN_RING_POINTS = 3


@dataclass(slots=True, frozen=True)
class GeometryShape:
    type: str
    coordinates: Any


@dataclass(slots=True, frozen=True)
class FeatureShape:
    geometry: "GeoJSONShape | None"


@dataclass(slots=True, frozen=True)
class FeatureCollectionShape:
    features: tuple["GeoJSONShape", ...]


GeoJSONShape = Union[GeometryShape, FeatureShape, FeatureCollectionShape]


@dataclass(slots=True)
class _DropStats:
    rings: int = 0
    polygons: int = 0

    def log(self, source: str | None) -> None:
        if self.rings or self.polygons:
            logger.warning(
                f"Dropped {self.rings} degenerate ring(s) and {self.polygons} empty polygon(s)"
                f" from {source or 'geometry'}"
            )


def parse_geojson(obj: Any) -> GeoJSONShape:
    """Classify a GeoJSON-like mapping into one of the three supported shapes.

    Anything unrecognised becomes an empty FeatureCollection.
    """

    if not isinstance(obj, dict):
        return FeatureCollectionShape(features=())

    match obj.get("type"):
        case "FeatureCollection":
            features = obj.get("features")
            if not isinstance(features, list):
                return FeatureCollectionShape(features=())
            return FeatureCollectionShape(features=tuple(parse_geojson(item) for item in features))
        case "Feature":
            geometry = obj.get("geometry")
            return FeatureShape(geometry=parse_geojson(geometry) if geometry is not None else None)
        case "Polygon" | "MultiPolygon" as geometry_type:
            return GeometryShape(type=geometry_type, coordinates=obj.get("coordinates"))
        case other:
            logger.warning(f"Unsupported GeoJSON type {other!r} ignored")
            return FeatureCollectionShape(features=())


def _raw_polygons(shape: GeoJSONShape) -> list[list[Any]]:
    """Flatten a parsed shape into raw polygons (lists of raw rings)."""

    match shape:
        case GeometryShape(type="Polygon", coordinates=list() as coordinates):
            return [coordinates]
        case GeometryShape(type="MultiPolygon", coordinates=list() as coordinates):
            return [polygon for polygon in coordinates if isinstance(polygon, list)]
        case GeometryShape():
            return []
        case FeatureShape(geometry=None):
            return []
        case FeatureShape(geometry=geometry):
            return _raw_polygons(geometry)
        case FeatureCollectionShape(features=features):
            polygons: list[list[Any]] = []
            for feature in features:
                polygons.extend(_raw_polygons(feature))
            return polygons


def _clean_ring(raw_ring: Any, *, lng_first: bool) -> Ring:
    """Keep the valid points of a ring, returned as (lat, lng)."""

    if not isinstance(raw_ring, (list, tuple)):
        return []
    points: Ring = []
    for raw_point in raw_ring:
        if not isinstance(raw_point, (list, tuple)) or len(raw_point) < 2:
            continue
        first, second = raw_point[0], raw_point[1]
        if not is_finite_number(first) or not is_finite_number(second):
            continue
        if lng_first:
            points.append((float(second), float(first)))
        else:
            points.append((float(first), float(second)))
    return points


def _clean_polygons(raw_polygons: Sequence[Any], *, lng_first: bool, stats: _DropStats) -> list[EditablePolygon]:
    polygons: list[EditablePolygon] = []
    for raw_polygon in raw_polygons:
        rings: EditablePolygon = []
        for raw_ring in raw_polygon if isinstance(raw_polygon, (list, tuple)) else ():
            ring = _clean_ring(raw_ring, lng_first=lng_first)
            if len(ring) >= MIN_RING_POINTS:
                rings.append(ring)
            else:
                stats.rings += 1
        if rings:
            polygons.append(rings)
        else:
            stats.polygons += 1
    return polygons


def to_editable(geojson: Any, *, source: str | None = None) -> list[EditablePolygon]:
    """Convert persisted GeoJSON (any supported shape) into editable polygons."""

    stats = _DropStats()
    polygons = _clean_polygons(_raw_polygons(parse_geojson(geojson)), lng_first=True, stats=stats)
    stats.log(source)
    return polygons


def clean_editable(polygons: Sequence[Any], *, source: str | None = None) -> list[EditablePolygon]:
    """Filter user supplied (lat, lng) polygons with the same rules as ``to_editable``."""

    stats = _DropStats()
    cleaned = _clean_polygons(polygons, lng_first=False, stats=stats)
    stats.log(source)
    return cleaned


def to_persisted(polygons: Sequence[Any], *, source: str | None = None) -> dict[str, Any]:
    """Serialize editable polygons to a longitude-first GeoJSON MultiPolygon.

    Rings keep their point order and closure as given.
    """

    cleaned = clean_editable(polygons, source=source)
    return {
        "type": "MultiPolygon",
        "coordinates": [
            [[[lng, lat] for lat, lng in ring] for ring in polygon]
            for polygon in cleaned
        ],
    }


def ring_count(polygons: Sequence[EditablePolygon]) -> int:
    return sum(len(polygon) for polygon in polygons)


def _close(ring: Ring) -> list[tuple[float, float]]:
    coords = [(lng, lat) for lat, lng in ring]
    if coords[0] != coords[-1]:
        coords.append(coords[0])
    return coords


def to_shapely(polygons: Sequence[EditablePolygon], *, source: str | None = None) -> BaseGeometry:
    """Build a single shapely geometry (lon/lat axes) from editable polygons.

    Self-intersecting polygons are repaired with ``buffer(0)``; polygons shapely
    cannot build at all are skipped.
    """

    parts: list[BaseGeometry] = []
    for polygon in polygons:
        shell, *holes = polygon
        try:
            shape = Polygon(_close(shell), [_close(hole) for hole in holes])
            if not shape.is_valid:
                shape = shape.buffer(0)
        except (ValueError, GEOSException) as exc:
            logger.warning(f"Skipping unbuildable polygon in {source or 'geometry'}: {exc}")
            continue
        if not shape.is_empty:
            parts.append(shape)

    if not parts:
        return MultiPolygon()
    if len(parts) == 1:
        return parts[0]
    return unary_union(parts)
