"""Health check endpoints for liveness and readiness probes."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from entitystore.core.config import get_settings
from entitystore.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse(version=get_settings().app_version)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database unreachable", "model": ReadinessResponse}},
)
async def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Return 200 when the database answers; 503 otherwise.

    The cache is reported but never fails readiness: without Redis the service
    still serves every request from the database.
    """
    database = getattr(request.app.state, "database", None)
    cache = getattr(request.app.state, "cache", None)

    db_ok = database is not None and await database.ping()
    if cache is None:
        cache_status = "disabled"
    else:
        cache_status = "ok" if await cache.ping() else "unavailable"

    result = ReadinessResponse(
        status="ok" if db_ok else "not_ready",
        database="ok" if db_ok else "unavailable",
        cache=cache_status,
    )
    if db_ok:
        return result
    return JSONResponse(status_code=503, content=result.model_dump())
