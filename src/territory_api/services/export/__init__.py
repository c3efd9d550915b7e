"""Export services."""

from .geojson import generate_territory_color, territories_to_feature_collection

__all__ = [
    "territories_to_feature_collection",
    "generate_territory_color",
]
