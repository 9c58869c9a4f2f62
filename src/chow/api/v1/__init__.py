# src/chow/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    complaints_router,
    joints_router,
    system_router,
    votes_router,
)

__all__ = [
    "auth_router",
    "joints_router",
    "votes_router",
    "complaints_router",
    "system_router",
]
