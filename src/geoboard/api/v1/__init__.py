# src/geoboard/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    messages_router,
    system_router,
    users_router,
    votes_router,
)

__all__ = [
    "messages_router",
    "system_router",
    "users_router",
    "votes_router",
]
