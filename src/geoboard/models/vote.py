# src/geoboard/models/vote.py
"""Models capturing voting interactions on messages."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from geoboard.db.session import Base
from geoboard.db.time import utcnow


class Vote(Base):
    """Current vote of one user on one message."""

    __tablename__ = "votes"
    __table_args__ = (Index("ix_votes_message_id", "message_id"),)

    # Composite primary key prevents duplicate votes from the same user.
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        primary_key=True,
    )
    message_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("messages.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # True = upvote, False = downvote.
    vote: Mapped[bool] = mapped_column(Boolean, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
