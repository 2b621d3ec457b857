"""
user.py — ORM Model for Application Users

Purpose:
- Identity root of the service; every calendar entry belongs to one user.
- Stores digests only — never a raw password or a raw refresh token.

Session state lives in `refresh_token_hash`:
- NULL      → no active session (never logged in, or logged out)
- not NULL  → digest of the one live refresh token; overwritten on every
              signup / login / refresh, so older tokens stop verifying.

Used by:
- repositories/users.py (credential store)
- services/auth.py (session manager)
"""

import uuid

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from bcal.models.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Authentication fields
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    refresh_token_hash = Column(String, nullable=True)

    calendar_entries = relationship(
        "CalendarEntry",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def has_active_session(self) -> bool:
        return self.refresh_token_hash is not None

    def __repr__(self):
        return f"<User {self.email}>"
