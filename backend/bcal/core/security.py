"""
security.py — Password Hashing & Token Issuing

Purpose:
- Hash & verify secrets (login passwords and refresh-token digests).
- Issue and validate the JWT access / refresh token pair.

Key Constraints:
- Access and refresh tokens are signed with independent secrets, so a leaked
  access key cannot mint refresh tokens (and vice versa).
- Every token carries a random `jti`; two tokens minted for the same user in
  the same second are still different strings (rotation relies on it).
- Hashing cost is a fixed setting, never a per-call argument.
- bcrypt only reads the first 72 bytes of its input. A JWT shares a long common
  prefix across rotations, so secrets go through `bcrypt_sha256` (SHA-256 first,
  then bcrypt). Plain `bcrypt` digests are still accepted by `verify`.

This module does NOT:
- Read credentials from requests (see api/guards.py).
- Touch the database (see repositories/users.py).
"""

import datetime
import uuid
from dataclasses import dataclass
from enum import Enum
from functools import cached_property, lru_cache
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from bcal.core.config import Settings, settings
from bcal.core.exceptions import InvalidTokenException


# -----------------------------------------------------------------------------
# Password Hashing
# -----------------------------------------------------------------------------

class PasswordHasher:
    """
    One-way salted hashing with constant-time verification.

    `hash()` is non-deterministic: two calls with the same input give two
    different digests, both of which verify.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt_sha256", "bcrypt"],
            deprecated="auto",
            bcrypt_sha256__rounds=rounds,
            bcrypt__rounds=rounds,
        )

    def hash(self, plaintext: str) -> str:
        return self._context.hash(plaintext)

    @cached_property
    def dummy_digest(self) -> str:
        """Digest of a random secret, verified against when no real digest exists."""
        return self._context.hash(uuid.uuid4().hex)

    def verify(self, plaintext: str, digest: Optional[str]) -> bool:
        """
        Return True if `plaintext` matches `digest`.

        A mismatch, an empty digest, or a digest in an unknown format all
        return False; nothing is raised.
        """
        if not plaintext or not digest:
            return False
        try:
            return self._context.verify(plaintext, digest)
        except (ValueError, TypeError):
            return False


# -----------------------------------------------------------------------------
# JWT Token Handling
# -----------------------------------------------------------------------------

class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims carried by both token classes."""
    sub: str
    email: str


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenIssuer:
    """
    Mint and verify signed access / refresh tokens.

    Payload format:
        {"sub": user_id, "email": email, "jti": <random>, "iat": ..., "exp": ...}
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: datetime.timedelta,
        refresh_ttl: datetime.timedelta,
        algorithm: str = "HS256",
    ):
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens need independent secrets")
        self._secrets = {TokenKind.ACCESS: access_secret, TokenKind.REFRESH: refresh_secret}
        self._ttls = {TokenKind.ACCESS: access_ttl, TokenKind.REFRESH: refresh_ttl}
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, config: Settings) -> "TokenIssuer":
        return cls(
            access_secret=config.JWT_SECRET_KEY,
            refresh_secret=config.JWT_REFRESH_SECRET_KEY,
            access_ttl=datetime.timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_ttl=datetime.timedelta(days=config.REFRESH_TOKEN_EXPIRE_DAYS),
            algorithm=config.JWT_ALGORITHM,
        )

    def _issue(self, claims: TokenClaims, kind: TokenKind) -> str:
        now = datetime.datetime.now(datetime.timezone.utc)
        to_encode: Dict[str, Any] = {
            "sub": claims.sub,
            "email": claims.email,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + self._ttls[kind],
        }
        return jwt.encode(to_encode, self._secrets[kind], algorithm=self.algorithm)

    def issue_access_token(self, claims: TokenClaims) -> str:
        return self._issue(claims, TokenKind.ACCESS)

    def issue_refresh_token(self, claims: TokenClaims) -> str:
        return self._issue(claims, TokenKind.REFRESH)

    def issue_pair(self, user_id: str, email: str) -> TokenPair:
        claims = TokenClaims(sub=user_id, email=email)
        return TokenPair(
            access_token=self.issue_access_token(claims),
            refresh_token=self.issue_refresh_token(claims),
        )

    def verify(self, token: str, kind: TokenKind) -> TokenClaims:
        """
        Decode and validate a token of the given class.

        Raises:
            InvalidTokenException: bad signature (including a token of the
            other class), malformed structure, expiry, or missing claims.
        """
        if not token:
            raise InvalidTokenException("Missing token")
        try:
            payload = jwt.decode(token, self._secrets[kind], algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise InvalidTokenException("Token expired") from e
        except JWTError as e:
            raise InvalidTokenException("Invalid token") from e

        sub = payload.get("sub")
        email = payload.get("email")
        if not isinstance(sub, str) or not sub or not isinstance(email, str) or not email:
            raise InvalidTokenException("Token is missing identity claims")
        return TokenClaims(sub=sub, email=email)


# -----------------------------------------------------------------------------
# Shared instances (FastAPI dependencies)
# -----------------------------------------------------------------------------

@lru_cache()
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)


@lru_cache()
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer.from_settings(settings)
