"""Data access helpers for working with messages."""
from __future__ import annotations

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from geoboard.models.message import Message

__all__ = ["MessageRepository"]


class MessageRepository:
    """Thin wrapper around database access for message entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, message_id: int, *, for_update: bool = False) -> Message | None:
        """Return a message by identifier.

        Args:
            message_id: Primary key of the message.
            for_update: Lock the row until the surrounding transaction ends.
                SQLite ignores the lock and relies on its writer lock instead.
        """
        stmt = select(Message).where(Message.id == message_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = self.session.execute(stmt)
        return result.scalars().first()

    def list_all(self) -> list[Message]:
        """Return every message in creation order."""
        result = self.session.execute(select(Message).order_by(Message.id))
        return list(result.scalars())

    def create(
        self,
        *,
        text: str,
        latitude: float,
        longitude: float,
        user_id: int,
    ) -> Message:
        """Insert a new message with zeroed vote tallies and return it."""
        message = Message(
            text=text,
            latitude=latitude,
            longitude=longitude,
            user_id=user_id,
            up_votes=0,
            down_votes=0,
        )
        self.session.add(message)
        self.session.flush()
        return message

    def delete(self, message_id: int) -> bool:
        """Remove a message row. Returns False if it was already gone."""
        result = self.session.execute(delete(Message).where(Message.id == message_id))
        return result.rowcount > 0

    def apply_vote_delta(self, message_id: int, up_delta: int, down_delta: int) -> bool:
        """Shift the message's vote tallies in place.

        The increment is evaluated by the database, so concurrent deltas on the
        same message never overwrite each other.

        Returns:
            False if the message no longer exists.
        """
        result = self.session.execute(
            update(Message)
            .where(Message.id == message_id)
            .values(
                up_votes=Message.up_votes + up_delta,
                down_votes=Message.down_votes + down_delta,
            )
        )
        return result.rowcount > 0
