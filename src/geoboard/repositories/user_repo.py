"""Data access helpers for working with users."""
from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from geoboard.core.security import hash_key
from geoboard.models.user import User
from geoboard.models.vote import Vote

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for user entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_display_name(self, display_name: str) -> User | None:
        """Return the user with exactly this display name."""
        result = self.session.execute(select(User).where(User.display_name == display_name))
        return result.scalars().first()

    def get_by_auth_token(self, auth_token: str) -> User | None:
        """Return the user whose stored token hash matches `auth_token`."""
        result = self.session.execute(
            select(User).where(User.auth_token_hash == hash_key(auth_token)).order_by(User.id)
        )
        return result.scalars().first()

    def create(self, *, display_name: str, auth_token: str) -> User:
        """Insert a new user with zeroed vote tallies."""
        user = User(
            display_name=display_name,
            auth_token_hash=hash_key(auth_token),
            up_votes=0,
            down_votes=0,
        )
        self.session.add(user)
        self.session.flush()
        return user

    def apply_vote_delta(self, user_id: int, up_delta: int, down_delta: int) -> bool:
        """Shift the user's vote tallies in place.

        Returns:
            False if no user row matched `user_id`.
        """
        result = self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                up_votes=User.up_votes + up_delta,
                down_votes=User.down_votes + down_delta,
            )
        )
        return result.rowcount > 0

    def revoke_votes_on_message(self, user_id: int, message_id: int) -> bool:
        """Take every vote recorded on a message off its author's tallies.

        The counts are read from the vote rows by the UPDATE itself, so a vote
        committed after the message was loaded is still debited.

        Returns:
            False if no user row matched `user_id`.
        """

        def _count(value: bool):
            return (
                select(func.count())
                .select_from(Vote)
                .where(Vote.message_id == message_id, Vote.vote.is_(value))
                .scalar_subquery()
            )

        result = self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                up_votes=User.up_votes - _count(True),
                down_votes=User.down_votes - _count(False),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
