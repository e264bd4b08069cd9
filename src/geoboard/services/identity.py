"""Credential checks shared by every mutating operation."""
from __future__ import annotations

import logging

from geoboard.core.security import key_matches
from geoboard.models.user import User
from geoboard.repositories.user_repo import UserRepository
from geoboard.services.errors import InvalidUser

logger = logging.getLogger(__name__)


class IdentityCheck:
    """Resolve a (display name, token) claim to the user it names."""

    def __init__(self, users: UserRepository) -> None:
        self.users = users

    def verify(self, display_name: str | None, auth_token: str | None) -> User:
        """Return the user whose display name and token both match.

        Raises:
            InvalidUser: If no user has exactly this display name or the
                token does not belong to it.
        """
        if not display_name or not auth_token:
            raise InvalidUser()
        user = self.users.get_by_display_name(display_name)
        if user is None or not key_matches(auth_token, user.auth_token_hash):
            logger.info("Rejected credentials for display name %r", display_name)
            raise InvalidUser()
        return user
