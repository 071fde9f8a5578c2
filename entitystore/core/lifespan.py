"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Builds the shared handles
(database, cache, token service, telemetry) and stores them on app.state,
where the API dependencies pick them up. No business logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from entitystore.core.config import get_settings
from entitystore.infrastructure.cache.redis_cache import CacheService
from entitystore.infrastructure.persistence.database import Database
from entitystore.infrastructure.security.jwt import TokenService
from entitystore.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, token service, database (schema creation is
    fatal on failure), Redis cache (if enabled; unreachable means disabled),
    telemetry (if enabled). Shutdown runs in reverse.
    """
    settings = get_settings()
    setup_logging(settings.debug)

    # ---- Startup ----
    app.state.token_service = TokenService.from_settings(settings)

    database = Database(settings)
    if settings.database_auto_create:
        try:
            await database.create_all()
        except Exception:
            logger.exception("Database initialization failed; aborting startup")
            await database.dispose()
            raise
    app.state.database = database

    if settings.redis_enabled:
        cache = CacheService(settings)
        await cache.connect()
        app.state.cache = cache
    else:
        app.state.cache = None
        logger.info("Redis cache disabled by configuration")

    app.state.telemetry = None
    if settings.telemetry_enabled:
        from entitystore.shared.telemetry.telemetry import TelemetryConfig

        telemetry = TelemetryConfig.from_settings(settings)
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        telemetry.instrument_fastapi(app)
        telemetry.instrument_sqlalchemy(database.engine)
        if app.state.cache is not None:
            telemetry.instrument_redis()
        app.state.telemetry = telemetry

    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    # ---- Shutdown ----
    if app.state.telemetry is not None:
        app.state.telemetry.shutdown()
        app.state.telemetry = None

    if app.state.cache is not None:
        await app.state.cache.disconnect()
        app.state.cache = None
        logger.info("Cache disconnected")

    await database.dispose()
    app.state.database = None
