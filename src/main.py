"""
Production FastAPI Application

Single process: MongoDB for state, in-memory broadcaster for live status streams.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.mongo_setting import close_mongo, warmup_mongo
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Ordering Service] Starting up...')

    tracing = TracingConfig(service_name='food-ordering-service')
    tracing.setup()
    Logger.base.info('📊 [Ordering Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Ordering Service] Dependency injection wired')

    # Fail fast when MongoDB is unreachable
    await warmup_mongo()

    broadcaster = container.event_broadcaster()
    Logger.base.info('✅ [Ordering Service] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Ordering Service] Shutting down...')

    # Ends every open SSE stream
    await broadcaster.aclose()
    Logger.base.info('📡 [Ordering Service] Live status streams closed')

    await close_mongo()

    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Ordering Service] Shutdown complete')


app = create_app(
    lifespan=lifespan,
    description='Food Ordering Booking Service - cart to order, vendor decision, live status',
)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
