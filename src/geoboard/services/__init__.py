"""Business logic services for the Geoboard application."""

from .errors import (
    BadRequest,
    DuplicateName,
    Forbidden,
    GeoboardError,
    InvalidUser,
    NotFound,
    StorageError,
    ValidationError,
)
from .identity import IdentityCheck
from .message_service import MessageService
from .user_service import UserService
from .vote_ledger import VoteLedger

__all__ = [
    "IdentityCheck",
    "MessageService",
    "UserService",
    "VoteLedger",
    "GeoboardError",
    "ValidationError",
    "InvalidUser",
    "Forbidden",
    "DuplicateName",
    "NotFound",
    "BadRequest",
    "StorageError",
]
