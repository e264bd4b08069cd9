# src/geoboard/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .messages import router as messages_router
from .system import router as system_router
from .users import router as users_router
from .votes import router as votes_router

__all__ = [
    "messages_router",
    "system_router",
    "users_router",
    "votes_router",
]
