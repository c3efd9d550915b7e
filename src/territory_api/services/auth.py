"""Caller role resolution backed by Supabase Auth and the ``profiles`` table."""

from __future__ import annotations

import logging

from ..config import settings
from ..errors import AuthorizationError
from ..models.domain import Role
from ..persistence.database import require_client
from ..persistence.profiles import fetch_role

logger = logging.getLogger(__name__)


def resolve_role(access_token: str | None) -> Role:
    """Return the caller's role; anonymous callers are guests.

    Raises AuthorizationError (unauthenticated) for tokens Supabase rejects.
    """

    if not settings.auth_enabled:
        return Role.ADMIN
    if not access_token:
        return Role.GUEST

    supabase = require_client()
    try:
        user_response = supabase.auth.get_user(access_token)
    except Exception as exc:
        logger.info(f"Rejected access token: {exc}")
        raise AuthorizationError("Invalid or expired session", authenticated=False) from exc

    user = getattr(user_response, "user", None)
    if user is None:
        raise AuthorizationError("Invalid or expired session", authenticated=False)

    role = fetch_role(str(user.id))
    try:
        return Role(role) if role else Role.GUEST
    except ValueError:
        logger.warning(f"Unknown role {role!r} for user {user.id}; treating as guest")
        return Role.GUEST


def ensure_role(role: Role, allowed: tuple[Role, ...]) -> None:
    if role in allowed:
        return
    if role is Role.GUEST:
        raise AuthorizationError("Sign in to perform this operation", authenticated=False)
    raise AuthorizationError(f"Role '{role.value}' may not perform this operation")
