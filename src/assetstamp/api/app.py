"""
assetstamp FastAPI Application.

Serves version tags and versioned asset URLs to build tooling and
front-end hosts that cannot import the library directly.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from assetstamp import __version__
from assetstamp.api.dependencies import get_resolver
from assetstamp.api.routes import tags
from assetstamp.api.schemas import HealthResponse
from assetstamp.logging_config import setup_logging
from assetstamp.resolver import VersionTagResolver

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Configures logging before the application starts serving requests.
    """
    setup_logging(context="api")
    logger.info("Application startup complete")

    yield

    logger.info("Application shutdown complete")


app = FastAPI(
    lifespan=lifespan,
    title="assetstamp API",
    description="Build-derived version tags for cache-busting asset URLs",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint - API health check."""
    return {
        "status": "ok",
        "message": "assetstamp API is running",
        "version": __version__,
    }


@app.get("/health", response_model=HealthResponse)
async def health(
    resolver: VersionTagResolver = Depends(get_resolver),
) -> HealthResponse:
    """Health check endpoint listing registered providers."""
    return HealthResponse(status="healthy", providers=resolver.registered_providers)


app.include_router(tags.router, prefix="", tags=["tags"])
