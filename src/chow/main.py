# src/chow/main.py
"""Main entry point for the Chow application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from chow import __version__
from chow.api.errors import register_exception_handlers
from chow.api.v1 import (
    auth_router,
    complaints_router,
    joints_router,
    system_router,
    votes_router,
)
from chow.core.logging import configure_logging
from chow.core.settings import settings
from chow.db.session import Database

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Location-aware community API for discovering and rating joints",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

register_exception_handlers(app)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(joints_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(complaints_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.on_event("startup")
def on_startup() -> None:
    configure_logging(settings.log_level)
    app.state.database = Database.from_settings(settings)
    logger.info("%s %s started", settings.app_name, __version__)


@app.on_event("shutdown")
def on_shutdown() -> None:
    database: Database | None = getattr(app.state, "database", None)
    if database is not None:
        database.dispose()
        app.state.database = None


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "description": "Location-aware community API for discovering and rating joints",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("chow.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
