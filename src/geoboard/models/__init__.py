# src/geoboard/models/__init__.py
"""SQLAlchemy models for the Geoboard application."""

from .message import Message
from .user import User
from .vote import Vote

__all__ = ["Message", "User", "Vote"]
