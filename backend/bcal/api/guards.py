"""
guards.py — Request Authorization Gates

Three independent checks, each a plain function returning an identity or
raising UnauthorizedException:

- password_guard       → login: body credentials checked against the store
- access_token_guard   → every identity-scoped route (/auth/me, /auth/logout, /calendar/*)
- refresh_token_guard  → /auth/refresh only; keeps the raw token so the
                         session manager can compare it with the stored digest

The `require_*` wrappers bind each guard to its transport (JSON body or
cookie) for use with `Depends`. Handlers receive the identity as a parameter.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Cookie, Depends

from bcal.api.deps import get_auth_service
from bcal.core.config import settings
from bcal.core.exceptions import InvalidTokenException, UnauthorizedException
from bcal.core.logging import get_logger
from bcal.core.security import TokenIssuer, TokenKind, get_token_issuer
from bcal.models.user import User
from bcal.schemas.auth import LoginRequest
from bcal.services.auth import AuthService

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    id: str
    email: str


@dataclass(frozen=True)
class RefreshIdentity(Identity):
    refresh_token: str


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

def password_guard(credentials: LoginRequest, auth_service: AuthService) -> User:
    user = auth_service.validate_credentials(credentials.email, credentials.password)
    if user is None:
        logger.warning("Login rejected: invalid credentials")
        raise UnauthorizedException("Invalid credentials")
    return user


def access_token_guard(token: Optional[str], issuer: TokenIssuer) -> Identity:
    if not token:
        raise UnauthorizedException()
    try:
        claims = issuer.verify(token, TokenKind.ACCESS)
    except InvalidTokenException as e:
        raise UnauthorizedException() from e
    return Identity(id=claims.sub, email=claims.email)


def refresh_token_guard(token: Optional[str], issuer: TokenIssuer) -> RefreshIdentity:
    if not token:
        raise UnauthorizedException()
    try:
        claims = issuer.verify(token, TokenKind.REFRESH)
    except InvalidTokenException as e:
        raise UnauthorizedException() from e
    return RefreshIdentity(id=claims.sub, email=claims.email, refresh_token=token)


# -----------------------------------------------------------------------------
# FastAPI bindings
# -----------------------------------------------------------------------------

def require_password(
    credentials: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    return password_guard(credentials, auth_service)


def require_access_token(
    token: Optional[str] = Cookie(None, alias=settings.ACCESS_TOKEN_COOKIE),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Identity:
    return access_token_guard(token, issuer)


def require_refresh_token(
    token: Optional[str] = Cookie(None, alias=settings.REFRESH_TOKEN_COOKIE),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> RefreshIdentity:
    return refresh_token_guard(token, issuer)
