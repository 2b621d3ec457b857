"""
Shared fixtures.

Environment is pinned before any `bcal` import so the settings singleton and
the module-level engine pick up test values.
"""

import datetime
import os
import uuid
from typing import Any, Dict, Optional

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-access-secret")
os.environ.setdefault("JWT_REFRESH_SECRET_KEY", "test-refresh-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bcal.core.database import get_db
from bcal.core.exceptions import DuplicateException
from bcal.core.security import PasswordHasher, TokenIssuer
from bcal.main import app
from bcal.models import Base, User
from bcal.repositories.users import UNSET
from bcal.services.auth import AuthService


class InMemoryUserStore:
    """
    Dict-backed stand-in for UserRepository.

    Reads hand out detached copies, like rows loaded in separate requests, so
    a caller holding an old copy does not see later writes.
    """

    def __init__(self):
        self._rows: Dict[str, Dict[str, Any]] = {}

    @staticmethod
    def _to_user(row: Dict[str, Any]) -> User:
        return User(**row)

    def find_by_email(self, email: str) -> Optional[User]:
        for row in self._rows.values():
            if row["email"] == email:
                return self._to_user(row)
        return None

    def find_by_id(self, user_id: str) -> Optional[User]:
        row = self._rows.get(user_id)
        return self._to_user(row) if row else None

    def create(self, email: str, password_hash: str) -> User:
        if self.find_by_email(email) is not None:
            raise DuplicateException("User", "email", email)
        row = {
            "id": str(uuid.uuid4()),
            "email": email,
            "password_hash": password_hash,
            "refresh_token_hash": None,
        }
        self._rows[row["id"]] = row
        return self._to_user(row)

    def update_refresh_hash(self, user_id: str, digest: Optional[str], expected: Any = UNSET) -> bool:
        row = self._rows.get(user_id)
        if row is None:
            return False
        if expected is not UNSET and row["refresh_token_hash"] != expected:
            return False
        row["refresh_token_hash"] = digest
        return True

    def stored_digest(self, user_id: str) -> Optional[str]:
        return self._rows[user_id]["refresh_token_hash"]

    def __len__(self) -> int:
        return len(self._rows)


# -----------------------------------------------------------------------------
# Core fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def hasher() -> PasswordHasher:
    # Lowest bcrypt cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(
        access_secret="unit-access-secret",
        refresh_secret="unit-refresh-secret",
        access_ttl=datetime.timedelta(hours=1),
        refresh_ttl=datetime.timedelta(days=7),
    )


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def auth_service(user_store, hasher, issuer) -> AuthService:
    return AuthService(users=user_store, hasher=hasher, issuer=issuer)


# -----------------------------------------------------------------------------
# Database fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def set_cookies(client: TestClient, **cookies: str) -> None:
    """Replace the client's cookie jar with exactly `cookies`."""
    client.cookies.clear()
    for name, value in cookies.items():
        client.cookies.set(name, value)
