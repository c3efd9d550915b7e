"""FastAPI dependencies shared by the route modules."""

from __future__ import annotations

from typing import Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..errors import TerritoryAppError
from ..models.domain import Role
from ..services.auth import ensure_role, resolve_role
from ..services.geocoding import NominatimGeocoder
from .errors import to_http_exception

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_role(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Role:
    try:
        return resolve_role(credentials.credentials if credentials else None)
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc


def require_roles(*allowed: Role) -> Callable[[Role], Role]:
    def dependency(role: Role = Depends(get_current_role)) -> Role:
        try:
            ensure_role(role, allowed)
        except TerritoryAppError as exc:
            raise to_http_exception(exc) from exc
        return role

    return dependency


require_admin = require_roles(Role.ADMIN)
require_staff = require_roles(Role.ADMIN, Role.STAFF)


def get_geocoder() -> NominatimGeocoder:
    return NominatimGeocoder()
