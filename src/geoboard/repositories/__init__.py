"""Data access layer over SQLAlchemy sessions."""

from .message_repo import MessageRepository
from .user_repo import UserRepository
from .vote_repo import VoteRepository

__all__ = ["MessageRepository", "UserRepository", "VoteRepository"]
