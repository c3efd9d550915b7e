"""Route group exports."""

from . import geocode, health, partners, quotes, territories

__all__ = ["health", "partners", "territories", "quotes", "geocode"]
