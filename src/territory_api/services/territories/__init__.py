"""Territory matching, overlap detection and priority resolution."""

from .matcher import match_point, resolve_point, territory_geometry
from .overlaps import all_overlaps, overlaps_for
from .priority import raise_priority_over_overlaps

__all__ = [
    "match_point",
    "resolve_point",
    "territory_geometry",
    "overlaps_for",
    "all_overlaps",
    "raise_priority_over_overlaps",
]
