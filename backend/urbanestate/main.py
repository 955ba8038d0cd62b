"""UrbanEstate API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map UrbanEstateError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized and the rate-limit sweeper started via the lifespan
      context manager; the sweeper is cancelled on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Rate-limit state is per process; run one worker per limiter domain
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from urbanestate.api.error_handlers import register_error_handlers
from urbanestate.api.routes import (
    admin, ai, availability, bookings, health, leads, marketplace, properties,
)
from urbanestate.config import get_settings
from urbanestate.core.rate_limit import rate_limiter
from urbanestate.infrastructure.database import init_db
from urbanestate.infrastructure.observability import setup_logging
from urbanestate.infrastructure.rate_limit_sweeper import start_sweeper

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    sweeper = start_sweeper(rate_limiter, settings.rate_limit_sweep_seconds)
    logger.info("UrbanEstate API started")
    yield
    logger.info("UrbanEstate API shutting down")
    sweeper.cancel()
    try:
        await sweeper
    except asyncio.CancelledError:
        pass


app = FastAPI(title="UrbanEstate API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Retry-After", "X-RateLimit-Remaining"],
)

register_error_handlers(app)

# Routes
app.include_router(health.router)
app.include_router(properties.router)
app.include_router(availability.router)
app.include_router(bookings.router)
app.include_router(leads.router)
app.include_router(marketplace.router)
app.include_router(ai.router)
app.include_router(admin.router)
