"""EMA Residences API — FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from ema_api.api.exceptions import register_exception_handlers
from ema_api.api.v1.auth import router as auth_router
from ema_api.api.v1.reservations import router as reservations_router
from ema_api.api.v1.residences import router as residences_router
from ema_api.config import settings
from ema_api.middleware.request_logging import RequestLoggingMiddleware

# Configure root logger so all ema_api.* loggers output to stderr.
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)
    yield
    # Shutdown — dispose engine connections
    from ema_api.database import engine

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Residence listings, reservations and owner statistics.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Middleware — added in reverse execution order (last added runs first on request).
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=settings.cors_origin_regex,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept", "Origin"],
)

register_exception_handlers(app)

# Routers
app.include_router(auth_router)
app.include_router(residences_router)
app.include_router(reservations_router)

# Uploaded media; the directory is created on startup.
app.mount(
    settings.uploads_url_prefix,
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
