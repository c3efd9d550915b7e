"""Geocoding services."""

from .nominatim import NominatimGeocoder

__all__ = ["NominatimGeocoder"]
