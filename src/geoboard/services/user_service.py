"""Signup and lookup of board users."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from geoboard.db.session import atomic
from geoboard.models.user import User
from geoboard.repositories.user_repo import UserRepository
from geoboard.services.errors import DuplicateName, NotFound, ValidationError

__all__ = ["UserService"]

logger = logging.getLogger(__name__)


class UserService:
    """Application service for the user store."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session)

    def create_user(self, display_name: str | None, auth_token: str | None) -> User:
        """Register a new display name paired with its token.

        Raises:
            ValidationError: If either value is missing or empty.
            DuplicateName: If the display name is already taken, including when
                a concurrent signup claims it first.
        """
        if not display_name or not auth_token:
            raise ValidationError("displayName and userAuth required")
        if self.users.get_by_display_name(display_name) is not None:
            raise DuplicateName()

        try:
            with atomic(self.session):
                user = self.users.create(display_name=display_name, auth_token=auth_token)
        except IntegrityError as err:
            raise DuplicateName() from err

        logger.info("Created user %s (%r)", user.id, display_name)
        return user

    def get_by_auth_token(self, auth_token: str | None) -> User:
        """Return the user holding `auth_token`.

        Raises:
            NotFound: If the token is missing or unknown.
        """
        user = self.users.get_by_auth_token(auth_token) if auth_token else None
        if user is None:
            raise NotFound("User not found")
        return user

    def get_by_display_name(self, display_name: str) -> User:
        """Return the user with exactly this display name.

        Raises:
            NotFound: If nobody uses that name.
        """
        user = self.users.get_by_display_name(display_name)
        if user is None:
            raise NotFound("User not found")
        return user
