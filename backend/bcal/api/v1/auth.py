"""
auth.py — Authentication and Session Handling Endpoints (API Layer)

Purpose:
- HTTP endpoints for signup, login, token refresh, logout and "who am I".
- Moves the token pair in and out of cookies; nothing else.

Token transport:
- Two cookies, `access_token` and `refresh_token` (names from settings).
- httpOnly, SameSite=strict, Secure in production, max-age = token lifetime.

This file should be thin — minimal logic. Credential checks live in
api/guards.py, session rules in services/auth.py.
"""

from fastapi import APIRouter, Depends, Response, status

from bcal.api.deps import get_auth_service
from bcal.api.guards import Identity, RefreshIdentity, require_access_token, require_password, require_refresh_token
from bcal.core.config import settings
from bcal.core.security import TokenPair
from bcal.models.user import User
from bcal.schemas.auth import MessageResponse, SignupRequest, UserProfile, UserProfileResponse
from bcal.services.auth import AuthService

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)

# -----------------------------------------------------------------------------
# Cookie helpers
# -----------------------------------------------------------------------------

_COOKIE_OPTIONS = {
    "httponly": True,
    "samesite": "strict",
    "path": "/",
}


def set_token_cookies(response: Response, tokens: TokenPair) -> None:
    response.set_cookie(
        settings.ACCESS_TOKEN_COOKIE,
        tokens.access_token,
        max_age=settings.access_token_max_age,
        secure=settings.cookie_secure,
        **_COOKIE_OPTIONS,
    )
    response.set_cookie(
        settings.REFRESH_TOKEN_COOKIE,
        tokens.refresh_token,
        max_age=settings.refresh_token_max_age,
        secure=settings.cookie_secure,
        **_COOKIE_OPTIONS,
    )


def clear_token_cookies(response: Response) -> None:
    for name in (settings.ACCESS_TOKEN_COOKIE, settings.REFRESH_TOKEN_COOKIE):
        response.delete_cookie(name, secure=settings.cookie_secure, **_COOKIE_OPTIONS)


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------

@router.post("/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    POST /auth/signup

    - 400 when the email is malformed or the password fails the policy.
    - 409 when the email is already registered.
    """
    tokens = auth_service.signup(payload.email, payload.password)
    set_token_cookies(response, tokens)
    return MessageResponse(message="Signup successful")


@router.post("/login", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def login(
    response: Response,
    user: User = Depends(require_password),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    POST /auth/login

    High-Level Flow:
    1. Password guard checks the body against the credential store (401 on mismatch).
    2. Issue a fresh pair; the previous refresh token stops working.
    3. Set both cookies.
    """
    tokens = auth_service.login(user)
    set_token_cookies(response, tokens)
    return MessageResponse(message="Login successful")


@router.post("/refresh", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def refresh(
    response: Response,
    identity: RefreshIdentity = Depends(require_refresh_token),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    POST /auth/refresh

    - 401 when the refresh cookie is missing, forged or expired.
    - 403 when it is signed but no longer the live token (rotated or logged out).
    """
    tokens = auth_service.refresh_tokens(identity.id, identity.refresh_token)
    set_token_cookies(response, tokens)
    return MessageResponse(message="Tokens refreshed")


@router.post("/logout", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def logout(
    response: Response,
    identity: Identity = Depends(require_access_token),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    POST /auth/logout

    Clears the stored refresh digest, so every outstanding refresh token for
    this user is dead, then expires both cookies.
    """
    auth_service.logout(identity.id)
    clear_token_cookies(response)
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=UserProfileResponse)
def me(
    identity: Identity = Depends(require_access_token),
    auth_service: AuthService = Depends(get_auth_service),
):
    user = auth_service.get_profile(identity.id)
    return UserProfileResponse(data=UserProfile(id=user.id, email=user.email))
