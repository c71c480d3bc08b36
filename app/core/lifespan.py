"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring of infrastructure (outbound HTTP client, identity
verifier, cache, telemetry, DB engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.cache.redis_cache import CacheService
from app.infrastructure.persistence import database
from app.infrastructure.security.identity import IdentityVerifier
from app.shared.telemetry.telemetry import TelemetryConfig, get_telemetry, set_telemetry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: HTTP client and identity verifier, Redis cache (if
    enabled), telemetry (if enabled). Shutdown releases them in reverse.
    """
    settings = get_settings()

    # ---- Startup ----
    app.state.http_client = httpx.AsyncClient(timeout=10.0)
    app.state.identity_verifier = IdentityVerifier(settings, app.state.http_client)
    if settings.hosted_identity_enabled:
        logger.info("Hosted identity enabled (issuer %s)", settings.clerk_issuer)

    app.state.cache = None
    if settings.redis_enabled:
        cache = CacheService()
        await cache.connect()
        app.state.cache = cache

    if settings.telemetry_enabled:
        telemetry = TelemetryConfig.from_settings(settings)
        telemetry.setup(settings.telemetry_exporter, settings.telemetry_otlp_endpoint)
        telemetry.instrument(app, database.get_engine())
        set_telemetry(telemetry)

    yield

    # ---- Shutdown ----
    await app.state.http_client.aclose()
    app.state.http_client = None

    if app.state.cache is not None:
        await app.state.cache.disconnect()
        app.state.cache = None

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
        logger.info("Telemetry shutdown complete")

    await database.dispose_engine()
    logger.info("Database engine disposed")
