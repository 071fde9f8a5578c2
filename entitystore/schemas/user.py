"""User API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

EMAIL_MAX_LENGTH = 100


def _check_email_length(email: str) -> str:
    if len(email) > EMAIL_MAX_LENGTH:
        raise ValueError(f"email must be at most {EMAIL_MAX_LENGTH} characters")
    return email


class UserCreateRequest(BaseModel):
    """Request body for creating a user."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    age: int = Field(default=0, ge=0, le=150)

    @field_validator("email")
    @classmethod
    def email_length(cls, v: str) -> str:
        return _check_email_length(v)


class UserUpdateRequest(BaseModel):
    """Request body for a partial user update.

    Omitted, empty and zero fields leave the stored value unchanged.
    """

    name: str | None = Field(default=None, max_length=100)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6)
    age: int | None = Field(default=None, ge=0, le=150)

    @field_validator("email", "password", mode="before")
    @classmethod
    def empty_as_missing(cls, v: object) -> object:
        return None if v == "" else v

    @field_validator("email")
    @classmethod
    def email_length(cls, v: str | None) -> str | None:
        return v if v is None else _check_email_length(v)


class UserResponse(BaseModel):
    """User response (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    age: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserListResponse(BaseModel):
    users: list[UserResponse]
    total: int
    page: int
    page_size: int
