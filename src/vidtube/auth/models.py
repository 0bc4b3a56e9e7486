import re
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from vidtube.errors import ValidationError

USERNAME_PATTERN = r'^[a-zA-Z0-9_-]+$'
EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


def _check_password(v: str) -> str:
    if not v:
        raise ValueError('Password cannot be empty')
    if len(v) < 8:
        raise ValueError('Password must be at least 8 characters long')
    if not re.search(r'[A-Z]', v):
        raise ValueError('Password must contain at least one uppercase letter')
    if not re.search(r'[a-z]', v):
        raise ValueError('Password must contain at least one lowercase letter')
    if not re.search(r'\d', v):
        raise ValueError('Password must contain at least one number')
    return v


def _check_email(v: str) -> str:
    if not v.strip():
        raise ValueError('Email cannot be empty')
    if not re.match(EMAIL_PATTERN, v.strip()):
        raise ValueError('Invalid email format')
    return v.strip().lower()


def error_messages(exc: PydanticValidationError) -> List[str]:
    return [e["msg"].removeprefix("Value error, ") for e in exc.errors()]


def build(model, **fields):
    """Validate form input with ``model``, reporting failures as a 400."""
    try:
        return model(**fields)
    except PydanticValidationError as exc:
        messages = error_messages(exc)
        raise ValidationError(messages[0], errors=messages)


class UserCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=8)

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, v):
        if not v.strip():
            raise ValueError('Full name cannot be empty')
        return v.strip()

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        if not v.strip():
            raise ValueError('Username cannot be empty')
        if not re.match(USERNAME_PATTERN, v.strip()):
            raise ValueError('Username can only contain letters, numbers, hyphens, and underscores')
        return v.strip().lower()

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)


class UserLogin(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: str = Field(..., min_length=1)

    @model_validator(mode='after')
    def require_identifier(self):
        if not ((self.username and self.username.strip()) or (self.email and self.email.strip())):
            raise ValueError('Username or email is required')
        return self


class RefreshTokenRequest(BaseModel):
    refreshToken: Optional[str] = None


class PasswordChange(BaseModel):
    oldPassword: str = Field(..., min_length=1)
    newPassword: str = Field(..., min_length=8)

    @field_validator('newPassword')
    @classmethod
    def validate_new_password(cls, v):
        return _check_password(v)


class AccountUpdate(BaseModel):
    fullName: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=1, max_length=255)

    @field_validator('fullName')
    @classmethod
    def validate_full_name(cls, v):
        if not v.strip():
            raise ValueError('Full name cannot be empty')
        return v.strip()

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)
