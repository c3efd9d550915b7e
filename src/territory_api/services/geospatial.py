"""Geospatial helper functions."""

from __future__ import annotations

import math
from numbers import Real
from typing import Any

from shapely import affinity
from shapely.geometry.base import BaseGeometry

from ..errors import CoordinateValidationError

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE = math.pi * EARTH_RADIUS_KM / 180.0


def is_finite_number(value: Any) -> bool:
    """Return True for real, finite numbers (booleans excluded)."""

    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def validate_coordinates(lat: Any, lng: Any) -> tuple[float, float]:
    """Validate a (lat, lng) pair and return it as floats.

    Raises CoordinateValidationError when either value is missing, non-finite
    or outside the WGS84 range.
    """

    if not is_finite_number(lat) or not -90.0 <= lat <= 90.0:
        raise CoordinateValidationError(f"Invalid latitude: {lat!r} (expected -90..90)")
    if not is_finite_number(lng) or not -180.0 <= lng <= 180.0:
        raise CoordinateValidationError(f"Invalid longitude: {lng!r} (expected -180..180)")
    return float(lat), float(lng)


def area_km2(geometry: BaseGeometry) -> float:
    """Approximate area in km² of a lon/lat geometry.

    Uses an equirectangular projection centred on the geometry's centroid,
    which is accurate enough for territory-sized shapes.
    """

    if geometry.is_empty:
        return 0.0
    lat0 = geometry.centroid.y
    x_scale = KM_PER_DEGREE * math.cos(math.radians(lat0))
    projected = affinity.scale(geometry, xfact=x_scale, yfact=KM_PER_DEGREE, origin=(0.0, 0.0))
    return float(projected.area)
