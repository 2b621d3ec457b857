"""
deps.py — Service Wiring for Route Handlers

One factory per service so tests can swap any layer through
`app.dependency_overrides`.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from bcal.core.database import get_db
from bcal.core.security import PasswordHasher, TokenIssuer, get_password_hasher, get_token_issuer
from bcal.repositories.calendar import CalendarEntryRepository
from bcal.repositories.users import UserRepository
from bcal.services.auth import AuthService
from bcal.services.calendar import CalendarService


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_auth_service(
    users: UserRepository = Depends(get_user_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    return AuthService(users=users, hasher=hasher, issuer=issuer)


def get_calendar_service(db: Session = Depends(get_db)) -> CalendarService:
    return CalendarService(CalendarEntryRepository(db))
