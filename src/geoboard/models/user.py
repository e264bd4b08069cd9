"""SQLAlchemy model for board users."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from geoboard.db.session import Base
from geoboard.db.time import utcnow


class User(Base):
    """Identity paired with a credential token, plus votes received on their messages."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("up_votes >= 0", name="ck_users_up_votes"),
        CheckConstraint("down_votes >= 0", name="ck_users_down_votes"),
        Index("ix_users_auth_token_hash", "auth_token_hash"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    display_name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    # SHA-256 hex digest; the raw token is never persisted.
    auth_token_hash: Mapped[str] = mapped_column(String(64), nullable=False)

    # Tallies of votes cast by others on this user's messages.
    up_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    down_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
