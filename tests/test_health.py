"""Smoke tests for health and readiness."""

from httpx import AsyncClient


class _Database:
    def __init__(self, ok: bool) -> None:
        self.ok = ok

    async def ping(self) -> bool:
        return self.ok


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_ready_when_database_answers(app, client: AsyncClient) -> None:
    app.state.database = _Database(ok=True)
    app.state.cache = None
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok", "cache": "disabled"}


async def test_not_ready_without_database(app, client: AsyncClient, cache) -> None:
    app.state.database = _Database(ok=False)
    app.state.cache = cache
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json() == {
        "status": "not_ready",
        "database": "unavailable",
        "cache": "ok",
    }


async def test_unknown_route_is_json_404(client: AsyncClient) -> None:
    response = await client.get("/api/v1/nope")
    assert response.status_code == 404
    assert response.json()["error"] == "HTTP_ERROR"
