"""FastAPI dependencies for authentication and role checks."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from mailroom.core.config import settings
from mailroom.core.exceptions import ForbiddenError, UnauthorizedError
from mailroom.core.security import Authenticator, RequestContext
from mailroom.db.base import get_db
from mailroom.domain.enums import ADMIN_ROLES, STAFF_ROLES, Role
from mailroom.repositories.people import get_profile_by_user_id


def _extract_token(request: Request) -> str | None:
    """Bearer token from the Authorization header, else the session cookie."""
    header = request.headers.get("authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(settings.session_cookie_name)


async def get_current_context(
    request: Request,
    session: AsyncSession = Depends(get_db),
) -> RequestContext:
    """Resolve the caller's token to an active profile in their organization."""
    token = _extract_token(request)
    if not token:
        raise UnauthorizedError()

    authenticator: Authenticator = request.app.state.authenticator
    identity = authenticator.verify(token)

    profile = await get_profile_by_user_id(session, identity.user_id)
    if not profile:
        raise UnauthorizedError("User not found")
    if not profile.is_active:
        raise UnauthorizedError("Account disabled")

    return RequestContext(
        profile_id=profile.id,
        user_id=profile.user_id,
        org_id=profile.org_id,
        role=profile.role,
        mail_room_id=profile.mail_room_id,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


def require_roles(*roles: Role) -> Callable[..., Awaitable[RequestContext]]:
    """Dependency factory: the caller's role must be one of *roles*.

    Usage::

        ctx: RequestContext = Depends(require_roles(Role.ADMIN))
    """
    allowed = {role.value for role in roles}

    async def dependency(ctx: RequestContext = Depends(get_current_context)) -> RequestContext:
        if ctx.role not in allowed:
            raise ForbiddenError("Insufficient permissions for this action")
        return ctx

    return dependency


require_staff = require_roles(*STAFF_ROLES)
require_manager = require_roles(*ADMIN_ROLES)
require_admin = require_roles(Role.ADMIN)
