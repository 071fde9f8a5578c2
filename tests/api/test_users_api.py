"""Tests for /api/v1/users: validation, CRUD, pagination and cache effects."""

import pytest
from httpx import AsyncClient

NEW_USER = {"name": "Bob", "email": "bob@example.com", "password": "secret1", "age": 25}


async def _create(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/api/v1/users", json={**NEW_USER, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_user_returns_201_without_password(client: AsyncClient) -> None:
    data = await _create(client)
    assert data["name"] == "Bob"
    assert data["email"] == "bob@example.com"
    assert data["age"] == 25
    assert "password" not in data and "hashed_password" not in data


async def test_create_user_duplicate_email_returns_409(client: AsyncClient) -> None:
    await _create(client)
    response = await client.post("/api/v1/users", json={**NEW_USER, "name": "Other"})
    assert response.status_code == 409
    assert response.json()["error"] == "CONFLICT"


@pytest.mark.parametrize(
    "overrides",
    [
        {"email": "not-an-email"},
        {"password": "short"},
        {"age": 151},
        {"age": -1},
        {"name": ""},
        {"name": "x" * 101},
    ],
)
async def test_create_user_invalid_body_returns_422(client: AsyncClient, overrides) -> None:
    response = await client.post("/api/v1/users", json={**NEW_USER, **overrides})
    assert response.status_code == 422


async def test_get_user_populates_cache(client: AsyncClient, cache, user_store) -> None:
    created = await _create(client)
    first = await client.get(f"/api/v1/users/{created['id']}")
    assert first.status_code == 200
    assert f"user:{created['id']}" in cache.data
    reads = user_store.calls["get_by_id"]
    second = await client.get(f"/api/v1/users/{created['id']}")
    assert second.json() == first.json()
    assert user_store.calls["get_by_id"] == reads


async def test_get_unknown_user_returns_404(client: AsyncClient) -> None:
    response = await client.get("/api/v1/users/999")
    assert response.status_code == 404
    assert response.json()["message"] == "user not found"


@pytest.mark.parametrize("raw_id", ["abc", "0", "-3", "1.5", "99999999999999999999"])
async def test_invalid_user_id_returns_400(client: AsyncClient, raw_id) -> None:
    response = await client.get(f"/api/v1/users/{raw_id}")
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_update_user_partial_and_invalidates_cache(client: AsyncClient, cache) -> None:
    created = await _create(client)
    await client.get(f"/api/v1/users/{created['id']}")
    response = await client.put(
        f"/api/v1/users/{created['id']}", json={"name": "", "email": "", "age": 31}
    )
    assert response.status_code == 200
    data = response.json()
    assert (data["name"], data["email"], data["age"]) == ("Bob", "bob@example.com", 31)
    assert f"user:{created['id']}" not in cache.data


async def test_update_user_to_taken_email_returns_409(client: AsyncClient) -> None:
    await _create(client)
    other = await _create(client, email="carol@example.com", name="Carol")
    response = await client.put(
        f"/api/v1/users/{other['id']}", json={"email": "bob@example.com"}
    )
    assert response.status_code == 409


async def test_update_unknown_user_returns_404(client: AsyncClient) -> None:
    response = await client.put("/api/v1/users/77", json={"name": "Ghost"})
    assert response.status_code == 404


async def test_delete_user(client: AsyncClient) -> None:
    created = await _create(client)
    response = await client.delete(f"/api/v1/users/{created['id']}")
    assert response.status_code == 204
    assert (await client.get(f"/api/v1/users/{created['id']}")).status_code == 404
    assert (await client.delete(f"/api/v1/users/{created['id']}")).status_code == 404


async def test_list_users_paginates_and_clamps(client: AsyncClient) -> None:
    for i in range(3):
        await _create(client, email=f"user{i}@example.com", name=f"User {i}")
    response = await client.get("/api/v1/users", params={"page": 2, "page_size": 2})
    data = response.json()
    assert response.status_code == 200
    assert (data["total"], data["page"], data["page_size"]) == (3, 2, 2)
    assert [u["name"] for u in data["users"]] == ["User 2"]

    clamped = (await client.get("/api/v1/users", params={"page": 0, "page_size": 1000})).json()
    assert (clamped["page"], clamped["page_size"]) == (1, 100)


async def test_list_cache_is_dropped_after_create(client: AsyncClient, cache) -> None:
    await _create(client)
    assert (await client.get("/api/v1/users")).json()["total"] == 1
    assert "users:list:0:10" in cache.data
    await _create(client, email="dave@example.com")
    assert "users:list:0:10" not in cache.data
    assert (await client.get("/api/v1/users")).json()["total"] == 2


async def test_responses_carry_request_id_and_security_headers(client: AsyncClient) -> None:
    response = await client.get("/api/v1/users", headers={"X-Request-ID": "trace-123"})
    assert response.headers["x-request-id"] == "trace-123"
    assert response.headers["x-content-type-options"] == "nosniff"

    generated = await client.get("/api/v1/users", headers={"X-Request-ID": "not valid!"})
    assert generated.headers["x-request-id"] != "not valid!"
    assert len(generated.headers["x-request-id"]) == 36
