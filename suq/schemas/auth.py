"""Authentication request and response schemas."""
from datetime import datetime

from fastapi_users import schemas
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class UserCreate(schemas.BaseUserCreate):
    """
    Email and password registration.

    Password strength is checked by the user manager, so a weak password
    answers with the rule it broke.
    """

    name: str = Field(..., min_length=3, max_length=20, pattern=r"^[a-zA-Z0-9_]+$")
    password: str = Field(..., max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, email: str) -> str:
        return email.strip().lower()


class SignInRequest(BaseModel):
    """Email and password sign-in."""

    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, email: str) -> str:
        return email.strip().lower()


class UserResponse(BaseModel):
    """Public view of a user."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: str
    name: str
    email: str
    created_at: datetime


class SessionResponse(BaseModel):
    """Signed-in user and when the session ends."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user: UserResponse
    expires_at: datetime
