"""Pytest configuration and fixtures for entitystore.

HTTP tests run the real app (routes, dependencies, exception handlers,
middleware) over httpx ASGITransport, with the stores, cache and token
service replaced through app.dependency_overrides. Lifespan does not run,
so no database or Redis is needed.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./entitystore-test.db")
os.environ.setdefault("REDIS_ENABLED", "false")

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from entitystore.api.v1 import dependencies  # noqa: E402
from entitystore.application.dtos import UserCreate  # noqa: E402
from entitystore.core.config import get_settings  # noqa: E402
from entitystore.core.limiter import limiter  # noqa: E402
from entitystore.infrastructure.security.jwt import TokenService  # noqa: E402
from entitystore.infrastructure.security.password import (  # noqa: E402
    get_password_hash,
    verify_password,
)
from entitystore.main import create_app  # noqa: E402
from tests.doubles import (  # noqa: E402
    TEST_PASSWORD,
    DictCache,
    InMemoryProductStore,
    InMemoryUserStore,
)


@pytest.fixture(autouse=True)
def _reset_state():
    """Fresh settings and rate-limit counters for every test."""
    get_settings.cache_clear()
    limiter.reset()
    yield
    get_settings.cache_clear()


@pytest.fixture
def token_service() -> TokenService:
    return TokenService("unit-test-signing-key", issuer="entitystore")


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore(verify=verify_password)


@pytest.fixture
def product_store() -> InMemoryProductStore:
    return InMemoryProductStore()


@pytest.fixture
def cache() -> DictCache:
    return DictCache()


@pytest.fixture
def app(user_store, product_store, cache, token_service) -> FastAPI:
    """The application with in-memory store, cache and token service injected."""
    application = create_app()
    application.dependency_overrides[dependencies.get_user_store] = lambda: user_store
    application.dependency_overrides[dependencies.get_product_store] = (
        lambda: product_store
    )
    application.dependency_overrides[dependencies.get_cache] = lambda: cache
    application.dependency_overrides[dependencies.get_token_service] = (
        lambda: token_service
    )
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def existing_user(user_store: InMemoryUserStore):
    """A stored user whose password is TEST_PASSWORD."""
    return await user_store.create(
        UserCreate(
            name="Alice",
            email="alice@example.com",
            hashed_password=get_password_hash(TEST_PASSWORD),
            age=30,
        )
    )


@pytest.fixture
def auth_headers(existing_user, token_service: TokenService) -> dict[str, str]:
    token = token_service.issue(existing_user.id, existing_user.email)
    return {"Authorization": f"Bearer {token}"}
