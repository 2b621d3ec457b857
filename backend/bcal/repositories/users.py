"""
User Repository (Credential Store)

Narrow persistence contract used by the auth service:
    find_by_email, find_by_id, create, update_refresh_hash

`update_refresh_hash` doubles as the serialization point for concurrent
refreshes. Passing `expected` turns the write into a compare-and-swap: the
row is only updated while it still holds the digest the caller verified.
"""

from typing import Any, Optional, Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bcal.core.exceptions import DatabaseException, DuplicateException
from bcal.core.logging import get_logger
from bcal.models.user import User
from bcal.repositories.base import BaseRepository

logger = get_logger(__name__)

# Marker for "overwrite unconditionally" (None is a meaningful expected value)
UNSET: Any = object()


class UserStore(Protocol):
    """Anything the auth service can persist users through."""

    def find_by_email(self, email: str) -> Optional[User]: ...

    def find_by_id(self, user_id: str) -> Optional[User]: ...

    def create(self, email: str, password_hash: str) -> User: ...

    def update_refresh_hash(self, user_id: str, digest: Optional[str], expected: Any = UNSET) -> bool: ...


class UserRepository(BaseRepository[User]):
    """SQLAlchemy-backed UserStore."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def find_by_email(self, email: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as e:
            raise DatabaseException("Failed to look up user by email") from e

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self.get(user_id)

    def create(self, email: str, password_hash: str) -> User:
        try:
            return super().create(User(email=email, password_hash=password_hash))
        except IntegrityError as e:
            # Lost a race with a concurrent signup for the same email
            raise DuplicateException("User", "email", email) from e
        except SQLAlchemyError as e:
            raise DatabaseException("Failed to create User") from e

    def update_refresh_hash(self, user_id: str, digest: Optional[str], expected: Any = UNSET) -> bool:
        """
        Store `digest` as the user's live refresh-token digest (None clears it).

        With `expected`, only rows whose current digest equals `expected` are
        touched. Returns whether a row was updated.
        """
        query = self.db.query(User).filter(User.id == user_id)
        if expected is not UNSET:
            if expected is None:
                query = query.filter(User.refresh_token_hash.is_(None))
            else:
                query = query.filter(User.refresh_token_hash == expected)

        try:
            updated = query.update({User.refresh_token_hash: digest}, synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update refresh digest for user {user_id}: {e}")
            raise DatabaseException("Failed to update refresh token") from e

        # Loaded User instances still hold the old digest
        self.db.expire_all()
        return updated > 0
