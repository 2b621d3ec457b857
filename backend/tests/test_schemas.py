"""
Tests for request schemas (password policy, camelCase calendar bodies).
"""

import pytest
from pydantic import ValidationError

from bcal.schemas.auth import SignupRequest, is_valid_password
from bcal.schemas.calendar import CreateCalendarEntryRequest, UpdateCalendarEntryRequest


@pytest.mark.parametrize(
    "password, expected",
    [
        ("Passw0rd!", True),
        ("abcdefg1#", True),
        ("Pa0!", False),          # too short
        ("Password!", False),     # no digit
        ("Password1", False),     # no symbol
        ("", False),
    ],
)
def test_password_policy(password, expected):
    assert is_valid_password(password) is expected


def test_signup_rejects_bad_email():
    with pytest.raises(ValidationError):
        SignupRequest(email="alice", password="Passw0rd!")


def test_signup_keeps_email_as_sent():
    request = SignupRequest(email="Alice@Example.COM", password="Passw0rd!")
    assert request.email == "Alice@Example.COM"


def test_create_entry_accepts_camel_case():
    request = CreateCalendarEntryRequest.model_validate(
        {"title": "Sync", "startDate": "2025-01-15T10:00:00Z", "endDate": "2025-01-15T10:30:00Z"}
    )
    assert request.content is None
    assert set(request.model_dump()) == {"title", "start_date", "end_date", "content"}


def test_update_entry_tracks_only_sent_fields():
    request = UpdateCalendarEntryRequest.model_validate({"endDate": "2025-01-15T12:00:00Z"})
    assert request.model_dump(exclude_unset=True).keys() == {"end_date"}


def test_update_entry_rejects_null_dates():
    with pytest.raises(ValidationError):
        UpdateCalendarEntryRequest.model_validate({"startDate": None})


def test_update_entry_allows_clearing_content():
    request = UpdateCalendarEntryRequest.model_validate({"content": None})
    assert request.model_dump(exclude_unset=True) == {"content": None}
