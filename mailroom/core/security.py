"""Token verification behind a single pluggable interface.

Two token issuers are supported, and exactly one is selected when the app
starts (``AUTH_PROVIDER``):

* ``session`` -- HS256 session JWTs signed by this service.
* ``identity_provider`` -- HS256 JWTs issued by a third-party identity
  provider and verified with its shared secret and audience.

Both return the same :class:`Identity`; the caller resolves it to a profile.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol

import jwt

from mailroom.core.config import Settings
from mailroom.core.exceptions import UnauthorizedError

_ALGORITHM = "HS256"


@dataclass(frozen=True)
class Identity:
    """Verified token subject."""

    user_id: str
    email: str | None = None
    provider: str = "session"


@dataclass(frozen=True)
class RequestContext:
    """Caller context passed explicitly into every service call."""

    profile_id: str
    user_id: str
    org_id: str
    role: str
    mail_room_id: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None


class Authenticator(Protocol):
    def verify(self, token: str) -> Identity: ...


class SessionTokenAuthenticator:
    """Verifies session JWTs minted by :func:`create_session_token`."""

    def __init__(self, secret: str):
        self._secret = secret

    def verify(self, token: str) -> Identity:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[_ALGORITHM])
        except jwt.InvalidTokenError as exc:
            raise UnauthorizedError("Invalid session") from exc
        subject = payload.get("sub")
        if not subject:
            raise UnauthorizedError("Invalid session")
        return Identity(user_id=subject, email=payload.get("email"), provider="session")


class IdentityProviderAuthenticator:
    """Verifies access tokens issued by the external identity provider."""

    def __init__(self, secret: str, audience: str):
        self._secret = secret
        self._audience = audience

    def verify(self, token: str) -> Identity:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                audience=self._audience,
            )
        except jwt.InvalidTokenError as exc:
            raise UnauthorizedError("Invalid access token") from exc
        subject = payload.get("sub")
        if not subject:
            raise UnauthorizedError("Invalid access token")
        return Identity(
            user_id=subject, email=payload.get("email"), provider="identity_provider"
        )


def build_authenticator(config: Settings) -> Authenticator:
    """Pick the token verifier configured for this deployment."""
    if config.auth_provider == "session":
        return SessionTokenAuthenticator(config.jwt_secret)
    if config.auth_provider == "identity_provider":
        if not config.identity_provider_jwt_secret:
            raise RuntimeError(
                "AUTH_PROVIDER=identity_provider requires IDENTITY_PROVIDER_JWT_SECRET"
            )
        return IdentityProviderAuthenticator(
            config.identity_provider_jwt_secret, config.identity_provider_audience
        )
    raise RuntimeError(f"Unknown AUTH_PROVIDER '{config.auth_provider}'")


def create_session_token(
    user_id: str,
    secret: str,
    *,
    email: str | None = None,
    expires_hours: int = 12,
) -> str:
    """Create a signed session JWT for *user_id*."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "iat": now,
        "exp": now + timedelta(hours=expires_hours),
    }
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)
