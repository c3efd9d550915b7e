"""Translation of service errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException, status

from ..errors import (
    AuthorizationError,
    CoordinateValidationError,
    GeocodingError,
    GeometryValidationError,
    InactivePartnerError,
    NotFoundError,
    PartnerInUseError,
    PersistenceError,
    TerritoryAppError,
)


def to_http_exception(exc: TerritoryAppError) -> HTTPException:
    if isinstance(exc, (CoordinateValidationError, GeometryValidationError, InactivePartnerError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, AuthorizationError):
        if not exc.authenticated:
            return HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(exc),
                headers={"WWW-Authenticate": "Bearer"},
            )
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    if isinstance(exc, PartnerInUseError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, PersistenceError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE if exc.unavailable else status.HTTP_502_BAD_GATEWAY
        return HTTPException(status_code=code, detail=f"Database error: {exc}")
    if isinstance(exc, GeocodingError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
