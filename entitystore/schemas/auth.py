"""Auth API schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    """Request body for login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginUser(BaseModel):
    """Identity summary returned with a fresh login token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class LoginResponse(BaseModel):
    token: str
    user: LoginUser


class TokenResponse(BaseModel):
    """Refreshed session token."""

    token: str
