"""
auth.py — Session Manager (signup, login, refresh, logout)

Purpose:
- Verify credentials without revealing which half (email or password) failed.
- Issue access + refresh token pairs and keep exactly one live refresh digest
  per user.

Rotation:
- signup / login / refresh all end in `_issue_and_rotate()`: mint a pair,
  hash the new refresh token, overwrite the stored digest. Any earlier refresh
  token stops verifying from that point on.
- refresh uses compare-and-swap against the digest it just verified, so two
  concurrent refreshes with the same token cannot both succeed.
- A failed refresh never touches the stored digest; the live session survives.

This module does NOT:
- Read cookies or headers (see api/guards.py).
- Know about HTTP status codes (see core/exceptions.py).
"""

from typing import Any, Optional

from bcal.core.exceptions import DuplicateException, SessionRevokedException, UnauthorizedException
from bcal.core.logging import get_logger
from bcal.core.security import PasswordHasher, TokenIssuer, TokenPair
from bcal.models.user import User
from bcal.repositories.users import UNSET, UserStore

logger = get_logger(__name__)


class AuthService:
    def __init__(self, users: UserStore, hasher: PasswordHasher, issuer: TokenIssuer):
        self.users = users
        self.hasher = hasher
        self.issuer = issuer

    # -------------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------------

    def validate_credentials(self, email: str, password: str) -> Optional[User]:
        """Return the user for a matching email/password pair, else None."""
        user = self.users.find_by_email(email)
        if user is None:
            # unknown emails pay the same bcrypt cost as a wrong password
            self.hasher.verify(password, self.hasher.dummy_digest)
            return None
        if self.hasher.verify(password, user.password_hash):
            return user
        return None

    # -------------------------------------------------------------------------
    # Session lifecycle
    # -------------------------------------------------------------------------

    def _issue_and_rotate(self, user: User, expected: Any = UNSET) -> Optional[TokenPair]:
        """
        Mint a pair and store the new refresh digest.

        Returns None when `expected` is given and the stored digest no longer
        matches it (another rotation got there first).
        """
        tokens = self.issuer.issue_pair(user.id, user.email)
        digest = self.hasher.hash(tokens.refresh_token)
        if not self.users.update_refresh_hash(user.id, digest, expected=expected):
            return None
        return tokens

    def login(self, user: User) -> TokenPair:
        tokens = self._issue_and_rotate(user)
        if tokens is None:
            # account removed between credential check and rotation
            raise UnauthorizedException("Invalid credentials")
        logger.info(f"User {user.id} logged in")
        return tokens

    def signup(self, email: str, password: str) -> TokenPair:
        if self.users.find_by_email(email) is not None:
            logger.warning(f"Signup rejected, email already registered: {email}")
            raise DuplicateException("User", "email", email)

        user = self.users.create(email, self.hasher.hash(password))
        tokens = self._issue_and_rotate(user)
        logger.info(f"User {user.id} signed up")
        return tokens

    def refresh_tokens(self, user_id: str, refresh_token: str) -> TokenPair:
        """
        Exchange the live refresh token for a new pair (single use).

        Raises:
            SessionRevokedException: user gone, logged out, token already
            rotated away, or lost a concurrent refresh race.
        """
        user = self.users.find_by_id(user_id)
        if user is None or user.refresh_token_hash is None:
            logger.warning(f"Refresh rejected for user {user_id}: no active session")
            raise SessionRevokedException()

        current_digest = user.refresh_token_hash
        if not self.hasher.verify(refresh_token, current_digest):
            logger.warning(f"Refresh rejected for user {user_id}: token superseded")
            raise SessionRevokedException()

        tokens = self._issue_and_rotate(user, expected=current_digest)
        if tokens is None:
            logger.warning(f"Refresh rejected for user {user_id}: concurrent rotation")
            raise SessionRevokedException()

        logger.info(f"User {user_id} refreshed tokens")
        return tokens

    def logout(self, user_id: str) -> None:
        self.users.update_refresh_hash(user_id, None)
        logger.info(f"User {user_id} logged out")

    def get_profile(self, user_id: str) -> User:
        """Current user for a verified access token; the account may be gone since."""
        user = self.users.find_by_id(user_id)
        if user is None:
            raise UnauthorizedException()
        return user
