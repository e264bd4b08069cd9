"""Data access helpers for working with votes."""
from __future__ import annotations

from sqlalchemy import ColumnElement, delete, select
from sqlalchemy.orm import Session

from geoboard.models.user import User
from geoboard.models.vote import Vote

__all__ = ["VoteRepository"]


class VoteRepository:
    """Thin wrapper around database access for vote entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get(self, user_id: int, message_id: int) -> Vote | None:
        """Return the vote a user holds on a message, if any."""
        return self.session.get(Vote, (user_id, message_id))

    def add(self, *, user_id: int, message_id: int, value: bool) -> Vote:
        """Insert a vote for a pair that has none."""
        vote = Vote(user_id=user_id, message_id=message_id, vote=value)
        self.session.add(vote)
        self.session.flush()
        return vote

    def set_value(self, vote: Vote, value: bool) -> Vote:
        """Overwrite the value of an existing vote."""
        vote.vote = value
        self.session.flush()
        return vote

    def remove(self, vote: Vote) -> None:
        """Delete a single vote."""
        self.session.delete(vote)
        self.session.flush()

    def remove_for_message(self, message_id: int) -> int:
        """Delete every vote on a message and return how many were removed."""
        result = self.session.execute(delete(Vote).where(Vote.message_id == message_id))
        return result.rowcount

    def find_with_display_name(self, user_id: int, message_id: int) -> tuple[Vote, str] | None:
        """Return a single vote together with the voter display name."""
        rows = self._with_display_name(Vote.user_id == user_id, Vote.message_id == message_id)
        return rows[0] if rows else None

    def list_by_user(self, user_id: int) -> list[tuple[Vote, str]]:
        """Return a user's votes with the voter display name, oldest first."""
        return self._with_display_name(Vote.user_id == user_id)

    def list_for_message(self, message_id: int) -> list[tuple[Vote, str]]:
        """Return all votes on a message with voter display names, oldest first."""
        return self._with_display_name(Vote.message_id == message_id)

    def _with_display_name(self, *criteria: ColumnElement[bool]) -> list[tuple[Vote, str]]:
        stmt = (
            select(Vote, User.display_name)
            .join(User, User.id == Vote.user_id)
            .where(*criteria)
            .order_by(Vote.created_at, Vote.message_id, Vote.user_id)
        )
        return [(vote, display_name) for vote, display_name in self.session.execute(stmt)]
