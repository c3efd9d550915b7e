"""Geometry adapter between persisted GeoJSON and editable polygons."""

from .adapter import (
    FeatureCollectionShape,
    FeatureShape,
    GeometryShape,
    clean_editable,
    parse_geojson,
    ring_count,
    to_editable,
    to_persisted,
    to_shapely,
)

__all__ = [
    "GeometryShape",
    "FeatureShape",
    "FeatureCollectionShape",
    "parse_geojson",
    "to_editable",
    "clean_editable",
    "to_persisted",
    "to_shapely",
    "ring_count",
]
