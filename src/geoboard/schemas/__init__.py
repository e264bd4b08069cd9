# src/geoboard/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .message import MessageRequest, MessageResponse
from .user import UserCreate, UserResponse
from .vote import VoteRequest, VoteResponse

__all__ = [
    "MessageRequest", "MessageResponse",
    "UserCreate", "UserResponse",
    "VoteRequest", "VoteResponse",
]
