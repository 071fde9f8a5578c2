"""Tests for CacheAsideRepository: read-through, invalidation and degradation."""

import asyncio
import json

import pytest

from entitystore.application.dtos import (
    ProductCreate,
    ProductPatch,
    ProductResult,
    UserCreate,
    UserPatch,
    UserResult,
)
from entitystore.core.config import get_settings
from entitystore.domain.exceptions import NotFoundException
from entitystore.infrastructure.cache.cache_aside import (
    CacheAsideRepository,
    effective_changes,
    is_zero_value,
)
from entitystore.infrastructure.cache.redis_cache import CacheService
from tests.doubles import DictCache, FakeRedis, InMemoryProductStore, InMemoryUserStore


@pytest.fixture
def users_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def users(users_store, cache) -> CacheAsideRepository[UserResult, UserCreate]:
    return CacheAsideRepository(
        users_store,
        cache,
        entity_type=UserResult,
        key_prefix="user",
        list_prefix="users",
        ttl=300,
    )


async def _seed(users, name="Alice", email="alice@example.com", age=30) -> UserResult:
    return await users.create(
        UserCreate(name=name, email=email, hashed_password="hashed:x", age=age)
    )


async def test_cold_read_returns_store_value_and_populates_cache(users, cache) -> None:
    """A miss reads the store and leaves an equal value under user:<id>."""
    created = await _seed(users)
    found = await users.get_by_id(created.id)
    assert found == created
    assert f"user:{created.id}" in cache.data
    assert cache.ttls[f"user:{created.id}"] == 300
    assert UserResult(**json.loads(cache.data[f"user:{created.id}"])).id == created.id


async def test_warm_read_does_not_touch_store(users, users_store) -> None:
    created = await _seed(users)
    await users.get_by_id(created.id)
    reads_before = users_store.calls["get_by_id"]
    again = await users.get_by_id(created.id)
    assert again == created
    assert users_store.calls["get_by_id"] == reads_before


async def test_cached_value_never_contains_password(users, cache) -> None:
    created = await _seed(users)
    await users.get_by_id(created.id)
    assert "password" not in cache.data[f"user:{created.id}"]


async def test_create_does_not_prepopulate_entity_key(users, cache) -> None:
    created = await _seed(users)
    assert f"user:{created.id}" not in cache.data


async def test_not_found_propagates_and_is_not_cached(users, cache) -> None:
    with pytest.raises(NotFoundException):
        await users.get_by_id(999)
    assert "user:999" not in cache.data
    assert cache.calls["set"] == 0


async def test_update_deletes_entity_key_instead_of_rewriting_it(users, cache) -> None:
    created = await _seed(users)
    await users.get_by_id(created.id)
    updated = await users.update(created.id, UserPatch(name="Alicia"))
    assert updated.name == "Alicia"
    assert f"user:{created.id}" not in cache.data
    assert (await users.get_by_id(created.id)).name == "Alicia"


async def test_update_reads_current_row_from_store_not_cache(
    users, users_store, cache
) -> None:
    created = await _seed(users)
    await users.get_by_id(created.id)
    reads_before = users_store.calls["get_by_id"]
    await users.update(created.id, UserPatch(age=31))
    assert users_store.calls["get_by_id"] == reads_before + 1


async def test_zero_value_patch_fields_are_ignored(users) -> None:
    """{name: "", age: 5} on name="Alice" keeps the name and sets age 5."""
    created = await _seed(users, name="Alice", age=30)
    updated = await users.update(created.id, UserPatch(name="", age=5))
    assert updated.name == "Alice"
    assert updated.age == 5


async def test_age_cannot_be_cleared_to_zero(users) -> None:
    created = await _seed(users, age=30)
    updated = await users.update(created.id, UserPatch(age=0))
    assert updated.age == 30


async def test_update_missing_entity_raises_not_found(users, users_store) -> None:
    with pytest.raises(NotFoundException):
        await users.update(42, UserPatch(name="Nobody"))
    assert users_store.calls["update"] == 0


async def test_delete_invalidates_entity_key(users, users_store, cache) -> None:
    created = await _seed(users)
    await users.get_by_id(created.id)
    await users.delete(created.id)
    assert f"user:{created.id}" not in cache.data
    assert created.id not in users_store.rows
    with pytest.raises(NotFoundException):
        await users.get_by_id(created.id)


async def test_delete_missing_entity_raises_not_found(users, users_store) -> None:
    with pytest.raises(NotFoundException):
        await users.delete(7)
    assert users_store.calls["delete"] == 0


async def test_list_page_is_read_through(users, users_store, cache) -> None:
    await _seed(users, email="a@example.com")
    await _seed(users, email="b@example.com")
    items, total = await users.list_page(0, 10)
    assert total == 2
    assert [u.email for u in items] == ["a@example.com", "b@example.com"]
    assert "users:list:0:10" in cache.data

    reads_before = users_store.calls["get_all"]
    cached_items, cached_total = await users.list_page(0, 10)
    assert (cached_items, cached_total) == (items, total)
    assert users_store.calls["get_all"] == reads_before


@pytest.mark.parametrize("mutation", ["create", "update", "delete"])
async def test_every_mutation_invalidates_whole_list_family(users, cache, mutation) -> None:
    first = await _seed(users, email="a@example.com")
    await users.list_page(0, 10)
    await users.list_page(10, 10)
    await users.list_page(0, 5)
    assert sum(k.startswith("users:list:") for k in cache.data) == 3

    if mutation == "create":
        await _seed(users, email="b@example.com")
    elif mutation == "update":
        await users.update(first.id, UserPatch(name="Changed"))
    else:
        await users.delete(first.id)

    assert not [k for k in cache.data if k.startswith("users:list:")]


async def test_list_invalidation_leaves_other_families_alone(cache) -> None:
    products = CacheAsideRepository(
        InMemoryProductStore(),
        cache,
        entity_type=ProductResult,
        key_prefix="product",
        list_prefix="products",
    )
    cache.data["users:list:0:10"] = json.dumps({"items": [], "total": 0})
    await products.create(ProductCreate(name="Widget", price=9.99))
    assert "users:list:0:10" in cache.data


async def test_corrupt_entity_entry_falls_back_to_store(users, users_store, cache) -> None:
    created = await _seed(users)
    cache.data[f"user:{created.id}"] = "{not json"
    found = await users.get_by_id(created.id)
    assert found == created
    assert users_store.calls["get_by_id"] == 1
    # repopulated with a readable value
    assert json.loads(cache.data[f"user:{created.id}"])["id"] == created.id


async def test_wrong_shape_entry_falls_back_to_store(users, cache) -> None:
    created = await _seed(users)
    cache.data[f"user:{created.id}"] = json.dumps({"id": "not-a-number"})
    assert await users.get_by_id(created.id) == created


async def test_corrupt_list_entry_falls_back_to_store(users, cache) -> None:
    await _seed(users)
    cache.data["users:list:0:10"] = json.dumps({"items": [{"bogus": 1}]})
    items, total = await users.list_page(0, 10)
    assert total == 1
    assert len(items) == 1


async def test_cache_write_failure_is_swallowed(users, cache) -> None:
    created = await _seed(users)
    cache.fail_writes = True
    assert await users.get_by_id(created.id) == created
    assert f"user:{created.id}" not in cache.data


async def test_unavailable_cache_serves_from_store(users, users_store, cache) -> None:
    cache.available = False
    created = await _seed(users)
    assert await users.get_by_id(created.id) == created
    assert await users.get_by_id(created.id) == created
    assert users_store.calls["get_by_id"] == 2
    assert cache.calls["get"] == 0


async def test_without_cache_every_operation_hits_store(users_store) -> None:
    users = CacheAsideRepository(
        users_store, None, entity_type=UserResult, key_prefix="user", list_prefix="users"
    )
    created = await _seed(users)
    await users.update(created.id, UserPatch(name="Bob"))
    assert (await users.get_by_id(created.id)).name == "Bob"
    await users.delete(created.id)
    assert users_store.rows == {}


async def test_concurrent_cold_reads_all_return_the_store_value(users, users_store) -> None:
    created = await _seed(users)
    users_store.delay = 0.001
    results = await asyncio.gather(*(users.get_by_id(created.id) for _ in range(20)))
    assert all(r == created for r in results)


async def test_concurrent_reads_and_update_end_consistent(users, users_store, cache) -> None:
    """Once the update returns, the next read reflects it."""
    created = await _seed(users)
    users_store.delay = 0.001
    await asyncio.gather(
        *(users.get_by_id(created.id) for _ in range(5)),
        users.update(created.id, UserPatch(name="Updated")),
    )
    cache.data.pop(f"user:{created.id}", None)
    assert (await users.get_by_id(created.id)).name == "Updated"


async def test_product_patch_keeps_stock_when_zero(cache) -> None:
    store = InMemoryProductStore()
    products = CacheAsideRepository(
        store, cache, entity_type=ProductResult, key_prefix="product", list_prefix="products"
    )
    created = await products.create(ProductCreate(name="Widget", price=2.5, stock=7))
    updated = await products.update(created.id, ProductPatch(stock=0, price=3.0))
    assert updated.stock == 7
    assert updated.price == 3.0


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, True),
        ("", True),
        (0, True),
        (0.0, True),
        ("x", False),
        (1, False),
        (-1, False),
        (False, False),
        (True, False),
    ],
)
def test_is_zero_value(value, expected) -> None:
    assert is_zero_value(value) is expected


def test_effective_changes_from_dataclass_and_mapping() -> None:
    assert effective_changes(UserPatch(name="Bob", email="", age=0)) == {"name": "Bob"}
    assert effective_changes({"stock": 0, "price": 1.5}) == {"price": 1.5}


async def test_undecodable_redis_bytes_fall_back_to_store(users_store) -> None:
    redis_client = FakeRedis()
    users = CacheAsideRepository(
        users_store,
        CacheService(get_settings(), redis_client=redis_client),
        entity_type=UserResult,
        key_prefix="user",
        list_prefix="users",
        ttl=300,
    )
    created = await _seed(users)
    redis_client.store[f"user:{created.id}"] = b"\xff\xfe\x00garbage"
    redis_client.store["users:list:0:10"] = b"\xc3\x28"

    assert await users.get_by_id(created.id) == created
    items, total = await users.list_page(0, 10)
    assert (items, total) == ([created], 1)
    assert users_store.calls["get_by_id"] == 1
    # both keys repopulated with readable values
    assert json.loads(redis_client.store[f"user:{created.id}"])["id"] == created.id
    assert json.loads(redis_client.store["users:list:0:10"])["total"] == 1
