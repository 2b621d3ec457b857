"""
Tests for core/config.py and core/database.py helpers.
"""

import pytest
from pydantic import ValidationError

from bcal.core.config import Settings
from bcal.core.database import normalize_database_url


def test_defaults(monkeypatch):
    for name in ("ACCESS_TOKEN_EXPIRE_MINUTES", "REFRESH_TOKEN_EXPIRE_DAYS", "BCRYPT_ROUNDS", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)
    config = Settings(_env_file=None)

    assert config.BCRYPT_ROUNDS == 10
    assert config.access_token_max_age == 3600
    assert config.refresh_token_max_age == 7 * 24 * 3600
    assert config.cookie_secure is False


def test_shared_secrets_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, JWT_SECRET_KEY="same", JWT_REFRESH_SECRET_KEY="same")


def test_secure_cookies_in_production():
    assert Settings(_env_file=None, ENVIRONMENT="production").cookie_secure is True


@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgresql://u:p@db:5432/bcal", "postgresql+psycopg://u:p@db:5432/bcal"),
        ("postgresql+psycopg://u:p@db/bcal", "postgresql+psycopg://u:p@db/bcal"),
        ("sqlite:///./bcal.db", "sqlite:///./bcal.db"),
    ],
)
def test_normalize_database_url(url, expected):
    assert normalize_database_url(url) == expected
