"""Service-level helpers for posting, deleting and listing messages."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from geoboard.core.settings import settings
from geoboard.db.session import atomic
from geoboard.models.message import Message
from geoboard.repositories.message_repo import MessageRepository
from geoboard.repositories.user_repo import UserRepository
from geoboard.services.errors import Forbidden, NotFound, ValidationError
from geoboard.services.identity import IdentityCheck
from geoboard.services.proximity import GeoPoint, filter_nearby
from geoboard.services.vote_ledger import VoteLedger

__all__ = ["MessageService"]

logger = logging.getLogger(__name__)


class MessageService:
    """Application service for the message store."""

    def __init__(self, session: Session, ledger: VoteLedger | None = None) -> None:
        self.session = session
        self.messages = MessageRepository(session)
        self.identity = IdentityCheck(UserRepository(session))
        self.ledger = ledger or VoteLedger(session)

    def create_message(
        self,
        *,
        display_name: str | None,
        auth_token: str | None,
        text: str | None,
        latitude: float | None,
        longitude: float | None,
    ) -> Message:
        """Post a message at a location on behalf of an authenticated user.

        Args:
            display_name: Claimed author display name.
            auth_token: Token paired with the display name.
            text: Message body; must hold at least one character.
            latitude: Decimal degrees, required together with `longitude`.
            longitude: Decimal degrees, required together with `latitude`.

        Returns:
            The persisted message with zeroed tallies.

        Raises:
            InvalidUser: If the credentials do not match a user.
            ValidationError: If the text is empty or the location is missing,
                partial or out of range.
        """
        author = self.identity.verify(display_name, auth_token)
        if not text:
            raise ValidationError("text must contain at least 1 character")
        point = GeoPoint.from_optional(latitude, longitude)
        if point is None:
            raise ValidationError("latitude and longitude are required")

        with atomic(self.session):
            message = self.messages.create(
                text=text,
                latitude=point.latitude,
                longitude=point.longitude,
                user_id=author.id,
            )
        logger.info("User %s posted message %s", author.id, message.id)
        return message

    def delete_message(
        self,
        *,
        display_name: str | None,
        auth_token: str | None,
        message_id: int | None,
    ) -> None:
        """Delete a message, and every vote on it, at its author's request.

        Raises:
            InvalidUser: If the credentials do not match a user.
            ValidationError: If no message id was given.
            NotFound: If the message does not exist.
            Forbidden: If the requester is not the author.
        """
        requester = self.identity.verify(display_name, auth_token)
        if message_id is None:
            raise ValidationError("id required")

        with atomic(self.session):
            message = self.messages.get_by_id(message_id, for_update=True)
            if message is None:
                raise NotFound("Message not found")
            if message.user_id != requester.id:
                raise Forbidden("Only the author may delete this message")
            self.ledger.purge_message(message)
            self.messages.delete(message_id)
        logger.info("User %s deleted message %s", requester.id, message_id)

    def get_message(self, message_id: int) -> Message:
        """Return a message by id.

        Raises:
            NotFound: If it does not exist.
        """
        message = self.messages.get_by_id(message_id)
        if message is None:
            raise NotFound("Message not found")
        return message

    def list_all(self) -> list[Message]:
        """Return every message in creation order."""
        return self.messages.list_all()

    def list_near(
        self,
        point: GeoPoint,
        radius_km: float | None = None,
        *,
        order_by_distance: bool = False,
    ) -> Sequence[Message]:
        """Return the messages within `radius_km` of `point`.

        The radius defaults to the configured proximity threshold.
        """
        radius = settings.proximity_radius_km if radius_km is None else radius_km
        return filter_nearby(
            self.messages.list_all(),
            point,
            radius,
            order_by_distance=order_by_distance,
        )

    def list_messages(
        self,
        latitude: float | None = None,
        longitude: float | None = None,
        radius_km: float | None = None,
        *,
        order_by_distance: bool = False,
    ) -> Sequence[Message]:
        """Return the feed, filtered by proximity when a coordinate is given.

        Raises:
            ValidationError: If only one coordinate is supplied.
        """
        point = GeoPoint.from_optional(latitude, longitude)
        if point is None:
            return self.list_all()
        return self.list_near(point, radius_km, order_by_distance=order_by_distance)
