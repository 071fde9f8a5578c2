"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the shared handles created in lifespan
(database, cache, token service) and builds repositories, cache-aside
wrappers and services per request. Routes depend only on these functions;
tests replace them through app.dependency_overrides.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from entitystore.application.dtos.product import ProductCreate, ProductResult
from entitystore.application.dtos.user import UserCreate, UserResult
from entitystore.application.interfaces.repositories import (
    IProductRepository,
    IUserRepository,
)
from entitystore.application.services import AuthService, ProductService, UserService
from entitystore.core.config import Settings, get_settings
from entitystore.core.constants import (
    CACHE_PREFIX_PRODUCT,
    CACHE_PREFIX_PRODUCTS,
    CACHE_PREFIX_USER,
    CACHE_PREFIX_USERS,
    MAX_ENTITY_ID,
)
from entitystore.domain.exceptions import UnauthorizedException, ValidationException
from entitystore.infrastructure.cache.cache_aside import CacheAsideRepository
from entitystore.infrastructure.cache.cache_protocol import CacheProtocol
from entitystore.infrastructure.persistence.database import Database
from entitystore.infrastructure.persistence.repositories import (
    ProductRepository,
    UserRepository,
)
from entitystore.infrastructure.security.jwt import SessionClaims, TokenService
from entitystore.infrastructure.security.password import get_password_hash

logger = logging.getLogger(__name__)

_http_bearer = HTTPBearer(auto_error=False)

SettingsDep = Annotated[Settings, Depends(get_settings)]


def parse_entity_id(raw: str, resource_type: str) -> int:
    """Path ids must be positive integers; anything else is a 400."""
    if not (raw.isascii() and raw.isdigit()) or not 1 <= int(raw) <= MAX_ENTITY_ID:
        raise ValidationException(f"invalid {resource_type} id", field="id")
    return int(raw)


# ---- shared handles (created in lifespan) ----


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncIterator[AsyncSession]:
    """One session per request; repositories commit their own writes."""
    async with database.session() as session:
        yield session


def get_cache(request: Request) -> CacheProtocol | None:
    """Shared cache, or None when Redis is disabled."""
    return getattr(request.app.state, "cache", None)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


# ---- stores and cache-aside wrappers ----


def get_user_store(db: Annotated[AsyncSession, Depends(get_db)]) -> IUserRepository:
    return UserRepository(db)


def get_product_store(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> IProductRepository:
    return ProductRepository(db)


def get_cached_users(
    store: Annotated[IUserRepository, Depends(get_user_store)],
    cache: Annotated[CacheProtocol | None, Depends(get_cache)],
    settings: SettingsDep,
) -> CacheAsideRepository[UserResult, UserCreate]:
    return CacheAsideRepository(
        store,
        cache,
        entity_type=UserResult,
        key_prefix=CACHE_PREFIX_USER,
        list_prefix=CACHE_PREFIX_USERS,
        ttl=settings.cache_ttl_entities,
    )


def get_cached_products(
    store: Annotated[IProductRepository, Depends(get_product_store)],
    cache: Annotated[CacheProtocol | None, Depends(get_cache)],
    settings: SettingsDep,
) -> CacheAsideRepository[ProductResult, ProductCreate]:
    return CacheAsideRepository(
        store,
        cache,
        entity_type=ProductResult,
        key_prefix=CACHE_PREFIX_PRODUCT,
        list_prefix=CACHE_PREFIX_PRODUCTS,
        ttl=settings.cache_ttl_entities,
    )


# ---- services ----


def get_user_service(
    users: Annotated[
        CacheAsideRepository[UserResult, UserCreate], Depends(get_cached_users)
    ],
    store: Annotated[IUserRepository, Depends(get_user_store)],
    settings: SettingsDep,
) -> UserService:
    return UserService(
        users,
        store,
        get_password_hash,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )


def get_product_service(
    products: Annotated[
        CacheAsideRepository[ProductResult, ProductCreate],
        Depends(get_cached_products),
    ],
    settings: SettingsDep,
) -> ProductService:
    return ProductService(
        products,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )


def get_auth_service(
    store: Annotated[IUserRepository, Depends(get_user_store)],
    users: Annotated[
        CacheAsideRepository[UserResult, UserCreate], Depends(get_cached_users)
    ],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    return AuthService(store, users, tokens)


# ---- authentication ----


def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> SessionClaims:
    """Validate the bearer token; every failure is the same outward 401.

    HTTPBearer yields None both for a missing header and for a non-bearer
    scheme (matched case-insensitively).
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("missing or non-bearer Authorization header")
    return tokens.validate(credentials.credentials)


CurrentClaims = Annotated[SessionClaims, Depends(get_current_claims)]
