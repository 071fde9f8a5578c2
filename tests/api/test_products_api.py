"""Tests for /api/v1/products."""

import pytest
from httpx import AsyncClient

WIDGET = {"name": "Widget", "description": "A small widget", "price": 9.99, "stock": 5}


async def _create(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/api/v1/products", json={**WIDGET, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_and_get_product(client: AsyncClient, cache) -> None:
    created = await _create(client)
    assert created["price"] == 9.99
    response = await client.get(f"/api/v1/products/{created['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "Widget"
    assert f"product:{created['id']}" in cache.data


@pytest.mark.parametrize(
    "overrides",
    [
        {"price": 0},
        {"price": -1},
        {"price": 1e12},
        {"price": 100_000_000},
        {"stock": -1},
        {"stock": 2**40},
        {"name": ""},
        {"name": "x" * 201},
    ],
)
async def test_create_product_invalid_body_returns_422(client: AsyncClient, overrides) -> None:
    response = await client.post("/api/v1/products", json={**WIDGET, **overrides})
    assert response.status_code == 422


async def test_update_product_ignores_zero_stock(client: AsyncClient, cache) -> None:
    created = await _create(client)
    await client.get(f"/api/v1/products/{created['id']}")
    response = await client.put(
        f"/api/v1/products/{created['id']}", json={"price": 12.5, "stock": 0}
    )
    assert response.status_code == 200
    data = response.json()
    assert (data["price"], data["stock"]) == (12.5, 5)
    assert f"product:{created['id']}" not in cache.data


async def test_update_product_rejects_negative_price(client: AsyncClient) -> None:
    created = await _create(client)
    response = await client.put(f"/api/v1/products/{created['id']}", json={"price": -2})
    assert response.status_code == 422


@pytest.mark.parametrize("body", [{"price": 1e12}, {"stock": 2**31}])
async def test_update_product_rejects_values_beyond_column_range(
    client: AsyncClient, body
) -> None:
    created = await _create(client)
    response = await client.put(f"/api/v1/products/{created['id']}", json=body)
    assert response.status_code == 422


async def test_largest_stock_and_price_are_accepted(client: AsyncClient) -> None:
    created = await _create(client, price=99_999_999.99, stock=2**31 - 1)
    assert (created["price"], created["stock"]) == (99_999_999.99, 2**31 - 1)


async def test_huge_page_is_clamped_not_an_error(client: AsyncClient) -> None:
    await _create(client)
    response = await client.get("/api/v1/products", params={"page": 10**17, "page_size": 100})
    assert response.status_code == 200
    data = response.json()
    assert data["products"] == []
    assert data["total"] == 1
    assert data["page"] == (2**63 - 1) // 100 + 1


async def test_delete_product_and_list(client: AsyncClient, cache) -> None:
    first = await _create(client)
    await _create(client, name="Gadget")
    listing = (await client.get("/api/v1/products")).json()
    assert listing["total"] == 2
    assert [p["name"] for p in listing["products"]] == ["Widget", "Gadget"]
    assert "products:list:0:10" in cache.data

    assert (await client.delete(f"/api/v1/products/{first['id']}")).status_code == 204
    assert "products:list:0:10" not in cache.data
    assert (await client.get("/api/v1/products")).json()["total"] == 1


async def test_unknown_product_returns_404(client: AsyncClient) -> None:
    assert (await client.get("/api/v1/products/5")).status_code == 404
    assert (await client.delete("/api/v1/products/5")).status_code == 404


async def test_invalid_product_id_returns_400(client: AsyncClient) -> None:
    assert (await client.get("/api/v1/products/widget")).status_code == 400


async def test_cache_outage_degrades_to_store(client: AsyncClient, cache) -> None:
    cache.available = False
    created = await _create(client)
    response = await client.get(f"/api/v1/products/{created['id']}")
    assert response.status_code == 200
    assert cache.data == {}
