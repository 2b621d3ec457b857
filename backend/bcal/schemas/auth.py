"""
Auth Pydantic Schemas

Request bodies for signup / login and the response envelopes of /auth/*.
"""

import re

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator

PASSWORD_MIN_LENGTH = 8
EMAIL_FORMAT_MESSAGE = "email must be an email"
PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters and contain at least one number and one symbol"
)
_DIGIT_RE = re.compile(r"\d")
_SYMBOL_RE = re.compile(r"""[!@#$%^&*()_+\-=\[\]{};':"\\|,.<>/?~`]""")


def is_valid_password(password: str) -> bool:
    """Minimum 8 characters, at least one digit and one symbol."""
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        return False
    return bool(_DIGIT_RE.search(password)) and bool(_SYMBOL_RE.search(password))


class SignupRequest(BaseModel):
    """
    Signup body. The email is checked for format but stored exactly as sent,
    so login with the same string always finds the account.
    """
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(EMAIL_FORMAT_MESSAGE) from e
        return v

    @field_validator("password")
    @classmethod
    def validate_password_policy(cls, v: str) -> str:
        if not is_valid_password(v):
            raise ValueError(PASSWORD_POLICY_MESSAGE)
        return v


class LoginRequest(BaseModel):
    """
    Login body. No format or policy checks here: every mismatch must look
    the same to the caller (401 "Invalid credentials").
    """
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    message: str


class UserProfile(BaseModel):
    id: str
    email: str


class UserProfileResponse(BaseModel):
    data: UserProfile
