"""Vote ledger: one vote per user per message, with consistent tallies.

Every transition of a (voter, message) pair writes the vote row and applies
the matching counter delta to the message and to the message's author in one
database transaction. Transitions on the same pair are additionally
serialized in-process through a pair-scoped lock.
"""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from geoboard.core.settings import settings
from geoboard.db.session import atomic
from geoboard.models.message import Message
from geoboard.models.vote import Vote
from geoboard.repositories.message_repo import MessageRepository
from geoboard.repositories.user_repo import UserRepository
from geoboard.repositories.vote_repo import VoteRepository
from geoboard.services.errors import BadRequest, NotFound, StorageError
from geoboard.services.identity import IdentityCheck

__all__ = [
    "PairLockRegistry",
    "VoteDelta",
    "VoteLedger",
    "VoteResult",
    "VoteTransition",
    "VoteView",
    "pair_locks",
]

logger = logging.getLogger(__name__)

PairKey = tuple[int, int]
T = TypeVar("T")


class VoteTransition(enum.StrEnum):
    """What a ledger operation did to a (voter, message) pair."""

    CREATED = "created"
    CHANGED = "changed"
    UNCHANGED = "unchanged"
    REMOVED = "removed"


@dataclass(frozen=True)
class VoteDelta:
    """Counter adjustment applied to a message and its author."""

    up: int = 0
    down: int = 0

    @classmethod
    def for_value(cls, value: bool) -> VoteDelta:
        """Return the delta of adding one vote with `value`."""
        return cls(up=1) if value else cls(down=1)

    def __neg__(self) -> VoteDelta:
        return VoteDelta(up=-self.up, down=-self.down)

    def __sub__(self, other: VoteDelta) -> VoteDelta:
        return VoteDelta(up=self.up - other.up, down=self.down - other.down)


@dataclass(frozen=True)
class VoteResult:
    """Outcome of a cast or remove."""

    user_id: int
    message_id: int
    display_name: str
    transition: VoteTransition
    # None once the vote has been removed.
    value: bool | None


@dataclass(frozen=True)
class VoteView:
    """A ledger entry joined with its voter's display name."""

    user_id: int
    message_id: int
    display_name: str
    value: bool

    @classmethod
    def from_row(cls, vote: Vote, display_name: str) -> VoteView:
        return cls(
            user_id=vote.user_id,
            message_id=vote.message_id,
            display_name=display_name,
            value=vote.vote,
        )


class PairLockRegistry:
    """Process-wide locks keyed by (voter, message).

    A lock lives only while some thread holds or waits for it, so the registry
    does not grow with the number of pairs ever voted on.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[PairKey, list] = {}

    @contextmanager
    def hold(self, key: PairKey) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.Lock(), 0]
            entry[1] += 1
        lock: threading.Lock = entry[0]
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


pair_locks = PairLockRegistry()


class VoteLedger:
    """Owns vote records and the tallies derived from them."""

    def __init__(
        self,
        session: Session,
        *,
        attempts: int | None = None,
        locks: PairLockRegistry | None = None,
    ) -> None:
        self.session = session
        self.users = UserRepository(session)
        self.messages = MessageRepository(session)
        self.votes = VoteRepository(session)
        self.identity = IdentityCheck(self.users)
        self.attempts = attempts or settings.vote_transaction_attempts
        self.locks = locks or pair_locks

    # --- transitions ---

    def cast_vote(
        self,
        display_name: str | None,
        auth_token: str | None,
        message_id: int,
        value: bool,
    ) -> VoteResult:
        """Record `value` as the voter's vote on a message.

        A first vote is inserted, a differing vote overwrites the old one and
        an identical vote changes nothing.

        Raises:
            InvalidUser: If the credentials do not match a user.
            NotFound: If the message does not exist (or was deleted meanwhile).
            StorageError: If the store kept failing transiently.
        """
        voter = self.identity.verify(display_name, auth_token)
        voter_id, voter_name = voter.id, voter.display_name
        return self._run_transition(
            (voter_id, message_id),
            lambda: self._cast(voter_id, voter_name, message_id, value),
        )

    def remove_vote(
        self,
        display_name: str | None,
        auth_token: str | None,
        message_id: int,
    ) -> VoteResult:
        """Delete the voter's vote on a message and take it off the tallies.

        Raises:
            InvalidUser: If the credentials do not match a user.
            NotFound: If the voter holds no vote on the message.
            StorageError: If the store kept failing transiently.
        """
        voter = self.identity.verify(display_name, auth_token)
        voter_id, voter_name = voter.id, voter.display_name
        return self._run_transition(
            (voter_id, message_id),
            lambda: self._remove(voter_id, voter_name, message_id),
        )

    def purge_message(self, message: Message) -> int:
        """Drop every vote on a message that is about to be deleted.

        Runs inside the caller's transaction. The author is debited by the
        vote rows present when the debit runs, not by the tallies loaded with
        `message`. The debit is the first write, so on SQLite it also takes the
        writer lock before the votes are counted and deleted.

        Returns:
            Number of votes removed.
        """
        self.users.revoke_votes_on_message(message.user_id, message.id)
        removed = self.votes.remove_for_message(message.id)
        logger.debug("Purged %d votes of message %s", removed, message.id)
        return removed

    def _cast(self, voter_id: int, voter_name: str, message_id: int, value: bool) -> VoteResult:
        message = self._locked_message(message_id)
        existing = self.votes.get(voter_id, message_id)

        if existing is None:
            self.votes.add(user_id=voter_id, message_id=message_id, value=value)
            delta = VoteDelta.for_value(value)
            transition = VoteTransition.CREATED
        elif existing.vote == value:
            return VoteResult(voter_id, message_id, voter_name, VoteTransition.UNCHANGED, value)
        else:
            delta = VoteDelta.for_value(value) - VoteDelta.for_value(existing.vote)
            self.votes.set_value(existing, value)
            transition = VoteTransition.CHANGED

        self._apply_delta(message_id, message.user_id, delta)
        logger.debug(
            "Vote %s by user %s on message %s (value=%s)", transition, voter_id, message_id, value
        )
        return VoteResult(voter_id, message_id, voter_name, transition, value)

    def _remove(self, voter_id: int, voter_name: str, message_id: int) -> VoteResult:
        message = self.messages.get_by_id(message_id, for_update=True)
        existing = self.votes.get(voter_id, message_id) if message is not None else None
        if message is None or existing is None:
            raise NotFound("Vote not found")

        delta = -VoteDelta.for_value(existing.vote)
        self.votes.remove(existing)
        self._apply_delta(message_id, message.user_id, delta)
        logger.debug("Vote removed by user %s on message %s", voter_id, message_id)
        return VoteResult(voter_id, message_id, voter_name, VoteTransition.REMOVED, None)

    def _locked_message(self, message_id: int) -> Message:
        message = self.messages.get_by_id(message_id, for_update=True)
        if message is None:
            raise NotFound("Message not found")
        return message

    def _apply_delta(self, message_id: int, author_id: int, delta: VoteDelta) -> None:
        if not self.messages.apply_vote_delta(message_id, delta.up, delta.down):
            raise NotFound("Message not found")
        if not self.users.apply_vote_delta(author_id, delta.up, delta.down):
            raise NotFound("Author not found")

    def _run_transition(self, key: PairKey, operation: Callable[[], T]) -> T:
        """Run `operation` as one committed unit, retrying transient store faults.

        Domain errors roll back and propagate on the first attempt. Lock
        timeouts, dropped connections and a racing first insert for the same
        pair are retried up to `self.attempts` times in total.
        """
        attempt = 1
        with self.locks.hold(key):
            while True:
                try:
                    with atomic(self.session):
                        return operation()
                except (OperationalError, IntegrityError) as err:
                    if attempt >= self.attempts:
                        logger.error(
                            "Vote transaction for pair %s failed after %d attempts: %s",
                            key,
                            attempt,
                            err,
                        )
                        raise StorageError() from err
                    logger.warning(
                        "Vote transaction for pair %s failed (attempt %d/%d): %s",
                        key,
                        attempt,
                        self.attempts,
                        err,
                    )
                    attempt += 1

    # --- queries ---

    def vote_for(self, user_id: int, message_id: int) -> VoteView:
        """Return the vote a user holds on a message.

        Raises:
            NotFound: If there is none.
        """
        row = self.votes.find_with_display_name(user_id, message_id)
        if row is None:
            raise NotFound("Vote not found")
        return VoteView.from_row(*row)

    def votes_by_user(self, user_id: int) -> list[VoteView]:
        """Return every vote cast by a user."""
        return [VoteView.from_row(*row) for row in self.votes.list_by_user(user_id)]

    def votes_for_message(self, message_id: int) -> list[VoteView]:
        """Return every vote cast on a message."""
        return [VoteView.from_row(*row) for row in self.votes.list_for_message(message_id)]

    def query(
        self,
        display_name: str | None = None,
        message_id: int | None = None,
    ) -> VoteView | list[VoteView]:
        """Look votes up by voter display name, message, or both.

        Returns:
            A single vote when both selectors are given, otherwise a list.

        Raises:
            BadRequest: If neither selector is given.
            NotFound: If the display name is unknown, or no vote matches both
                selectors.
        """
        if not display_name and message_id is None:
            raise BadRequest("displayName and/or MessageId required")
        if not display_name:
            return self.votes_for_message(message_id)

        voter = self.users.get_by_display_name(display_name)
        if voter is None:
            raise NotFound("User not found")
        if message_id is None:
            return self.votes_by_user(voter.id)
        return self.vote_for(voter.id, message_id)
