"""Tests for posting, deleting and listing messages."""

import pytest

from geoboard.models import Message, User, Vote
from geoboard.services.errors import Forbidden, InvalidUser, NotFound, ValidationError
from geoboard.services.message_service import MessageService
from geoboard.services.proximity import GeoPoint
from geoboard.services.vote_ledger import VoteLedger

NEAR = (37.3323314, -122.0342186)
FAR = (39.5344314, -122.0336186)
VALJEAN = ("Jean Valjean", "24601")
FANTINE = ("Fantine", "123456789")


def _post(service: MessageService, text="Who am I?", latitude=NEAR[0], longitude=NEAR[1]):
    return service.create_message(
        display_name=VALJEAN[0],
        auth_token=VALJEAN[1],
        text=text,
        latitude=latitude,
        longitude=longitude,
    )


def test_create_message_starts_with_zero_tallies(db_session, valjean) -> None:
    """A posted message belongs to its author and has no votes."""
    message = _post(MessageService(db_session))
    assert message.user_id == valjean
    assert (message.up_votes, message.down_votes) == (0, 0)
    assert (message.latitude, message.longitude) == NEAR


@pytest.mark.parametrize(
    ("text", "latitude", "longitude"),
    [
        ("", NEAR[0], NEAR[1]),
        (None, NEAR[0], NEAR[1]),
        ("Hello world", None, None),
        ("Hello world", NEAR[0], None),
        ("Hello world", None, NEAR[1]),
        ("Hello world", 91.0, 0.0),
    ],
)
def test_invalid_messages_are_not_stored(db_session, valjean, text, latitude, longitude) -> None:
    """Empty text and missing, partial or out-of-range locations are rejected."""
    with pytest.raises(ValidationError):
        _post(MessageService(db_session), text=text, latitude=latitude, longitude=longitude)
    assert db_session.query(Message).count() == 0


def test_create_message_checks_identity_first(db_session, valjean) -> None:
    """Unknown credentials fail before any validation or write."""
    service = MessageService(db_session)
    with pytest.raises(InvalidUser):
        service.create_message(
            display_name="Jean Valjohn",
            auth_token="24601",
            text="",
            latitude=None,
            longitude=None,
        )
    assert db_session.query(Message).count() == 0


def test_feed_lists_all_or_nearby(db_session, valjean) -> None:
    """Without a point the whole feed returns; with one only nearby messages."""
    service = MessageService(db_session)
    near = _post(service, "Who am I?")
    _post(service, "You're Jean Valjean . . .", latitude=FAR[0], longitude=FAR[1])

    assert len(service.list_all()) == 2
    assert len(service.list_messages()) == 2
    nearby = service.list_messages(*NEAR)
    assert [message.id for message in nearby] == [near.id]
    assert len(service.list_near(GeoPoint(*NEAR), radius_km=500.0)) == 2


def test_feed_rejects_a_single_coordinate(db_session) -> None:
    """Latitude without longitude is a validation error."""
    with pytest.raises(ValidationError):
        MessageService(db_session).list_messages(NEAR[0], None)


def test_author_can_delete_message(db_session, valjean) -> None:
    """Deleting removes the message from the feed."""
    service = MessageService(db_session)
    message = _post(service)
    service.delete_message(display_name=VALJEAN[0], auth_token=VALJEAN[1], message_id=message.id)
    assert service.list_all() == []


def test_only_the_author_can_delete(db_session, valjean, fantine) -> None:
    """Another valid user is forbidden from deleting the message."""
    service = MessageService(db_session)
    message_id = _post(service).id
    with pytest.raises(Forbidden):
        service.delete_message(
            display_name=FANTINE[0], auth_token=FANTINE[1], message_id=message_id
        )
    assert db_session.get(Message, message_id) is not None


def test_delete_missing_message(db_session, valjean) -> None:
    """Deleting an unknown id reports NotFound; a missing id is invalid."""
    service = MessageService(db_session)
    with pytest.raises(NotFound):
        service.delete_message(display_name=VALJEAN[0], auth_token=VALJEAN[1], message_id=999)
    with pytest.raises(ValidationError):
        service.delete_message(display_name=VALJEAN[0], auth_token=VALJEAN[1], message_id=None)


def test_delete_cascades_votes_and_debits_author(db_session, valjean, fantine, make_user) -> None:
    """Votes on a deleted message vanish and the author's tallies drop accordingly."""
    service = MessageService(db_session)
    ledger = VoteLedger(db_session)
    doomed = _post(service, "doomed").id
    kept = _post(service, "kept").id
    make_user("Javert", "0987654321")

    ledger.cast_vote(*FANTINE, doomed, True)
    ledger.cast_vote("Javert", "0987654321", doomed, False)
    ledger.cast_vote(*FANTINE, kept, True)

    service.delete_message(display_name=VALJEAN[0], auth_token=VALJEAN[1], message_id=doomed)

    db_session.expire_all()
    assert db_session.query(Vote).filter(Vote.message_id == doomed).count() == 0
    assert db_session.query(Vote).count() == 1
    author = db_session.get(User, valjean)
    assert (author.up_votes, author.down_votes) == (1, 0)
