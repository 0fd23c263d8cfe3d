"""FastAPI application for Court Watch."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from courtwatch import db
from courtwatch.config import VERSION
from courtwatch.rate_limit import limiter
from courtwatch.routers import health, pipeline, preferences
from courtwatch.services.registry import registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    await db.init_db()
    await registry.start()
    logger.info("🎾 Court Watch ready (sources: %s)", ", ".join(registry.list_sources()) or "none")
    try:
        yield
    finally:
        await registry.stop()
        await db.close_db()


async def _rate_limit_exceeded(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


app = FastAPI(
    title="Court Watch API",
    description="Aggregates tennis court availability and emails users when a booked slot frees up",
    version=VERSION,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded)

app.include_router(health.router)
app.include_router(pipeline.router)
app.include_router(preferences.router)
