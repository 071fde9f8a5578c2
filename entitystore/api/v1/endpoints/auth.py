"""Auth API: login, token refresh and current user.

Login is rate-limited per client address. Every authenticated route takes
CurrentClaims, which validates the bearer token without touching the store.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from entitystore.api.v1.dependencies import CurrentClaims, get_auth_service
from entitystore.application.services import AuthService
from entitystore.core.limiter import limit_auth
from entitystore.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LoginUser,
    TokenResponse,
)
from entitystore.schemas.user import UserResponse

router = APIRouter()

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


@router.post("/login", response_model=LoginResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    auth: AuthServiceDep,
) -> LoginResponse:
    """Exchange email and password for a session token."""
    token, user = await auth.login(body.email, body.password)
    return LoginResponse(token=token, user=LoginUser.model_validate(user))


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(claims: CurrentClaims, auth: AuthServiceDep) -> TokenResponse:
    """Issue a fresh token for the caller; the presented token stays valid until it expires."""
    return TokenResponse(token=auth.refresh(claims))


@router.get("/me", response_model=UserResponse)
async def get_me(claims: CurrentClaims, auth: AuthServiceDep) -> UserResponse:
    user = await auth.current_user(claims)
    return UserResponse.model_validate(user)
