"""SQLAlchemy model for location-tagged messages."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from geoboard.db.session import Base
from geoboard.db.time import utcnow


class Message(Base):
    """Short text anchored to a point on the map.

    `up_votes` and `down_votes` mirror the vote ledger for this message and are
    only ever changed by in-database increments issued by the ledger.
    """

    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint("length(text) >= 1", name="ck_messages_text_nonempty"),
        CheckConstraint("latitude BETWEEN -90 AND 90", name="ck_messages_latitude"),
        CheckConstraint("longitude BETWEEN -180 AND 180", name="ck_messages_longitude"),
        CheckConstraint("up_votes >= 0", name="ck_messages_up_votes"),
        CheckConstraint("down_votes >= 0", name="ck_messages_down_votes"),
        Index("ix_messages_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    up_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    down_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
