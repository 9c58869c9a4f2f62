# src/chow/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .complaints import router as complaints_router
from .joints import router as joints_router
from .system import router as system_router
from .votes import router as votes_router

__all__ = [
    "auth_router",
    "joints_router",
    "votes_router",
    "complaints_router",
    "system_router",
]
