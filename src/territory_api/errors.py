"""Error taxonomy shared by services and routes."""

from __future__ import annotations


class TerritoryAppError(Exception):
    """Base class for errors raised by the territory services."""


class CoordinateValidationError(TerritoryAppError, ValueError):
    """Latitude/longitude missing, non-finite or out of range."""


class GeometryValidationError(TerritoryAppError, ValueError):
    """Territory geometry has no usable ring after filtering."""


class NotFoundError(TerritoryAppError):
    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} '{entity_id}' not found")
        self.entity = entity
        self.entity_id = entity_id


class AuthorizationError(TerritoryAppError):
    """Caller lacks the role required for the operation."""

    def __init__(self, message: str = "Insufficient privileges for this operation", *, authenticated: bool = True) -> None:
        super().__init__(message)
        self.authenticated = authenticated


class PartnerInUseError(TerritoryAppError):
    """Partner cannot be deleted while territories or quotes reference it."""


class PersistenceError(TerritoryAppError):
    """The persistence collaborator failed; carries its message."""

    def __init__(self, message: str, *, unavailable: bool = False, code: str | None = None) -> None:
        super().__init__(message)
        self.unavailable = unavailable
        self.code = code


class GeocodingError(TerritoryAppError):
    """The geocoding collaborator failed or returned an unusable payload."""


class InactivePartnerError(TerritoryAppError, ValueError):
    """Inactive partners cannot receive new territories."""
