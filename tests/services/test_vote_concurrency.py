"""Vote ledger behaviour with several sessions on one SQLite file."""

import threading

from sqlalchemy import func, select

from geoboard.models import Message, User, Vote
from geoboard.services.message_service import MessageService
from geoboard.services.user_service import UserService
from geoboard.services.vote_ledger import PairLockRegistry, VoteLedger, VoteTransition

VALJEAN = ("Jean Valjean", "24601")
FANTINE = ("Fantine", "123456789")


def _seed(session_factory, voters) -> tuple[int, int]:
    """Create the author, the voters and one message; return (author id, message id)."""
    with session_factory() as session:
        author_id = UserService(session).create_user(*VALJEAN).id
        for name, token in voters:
            UserService(session).create_user(name, token)
        message = MessageService(session).create_message(
            display_name=VALJEAN[0],
            auth_token=VALJEAN[1],
            text="My name is Jean Valjean!",
            latitude=37.3323314,
            longitude=-122.0342186,
        )
        return author_id, message.id


def _state(session_factory, author_id: int, message_id: int):
    with session_factory() as session:
        votes = session.scalar(select(func.count()).select_from(Vote))
        author = session.get(User, author_id)
        message = session.get(Message, message_id)
        message_tallies = None if message is None else (message.up_votes, message.down_votes)
        return votes, (author.up_votes, author.down_votes), message_tallies


def _run_threads(targets) -> list[Exception]:
    errors: list[Exception] = []

    def _guard(target):
        try:
            target()
        except Exception as err:
            errors.append(err)

    threads = [threading.Thread(target=_guard, args=(target,)) for target in targets]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return errors


def test_delete_debits_author_for_vote_committed_after_load(file_session_factory, monkeypatch) -> None:
    """A vote that lands between loading the message and purging it is still debited."""
    author_id, message_id = _seed(file_session_factory, [FANTINE])

    with file_session_factory() as deleting, file_session_factory() as voting:
        service = MessageService(deleting, ledger=VoteLedger(deleting, locks=PairLockRegistry()))
        purge = service.ledger.purge_message

        def purge_after_late_vote(message):
            VoteLedger(voting, locks=PairLockRegistry()).cast_vote(*FANTINE, message_id, True)
            return purge(message)

        monkeypatch.setattr(service.ledger, "purge_message", purge_after_late_vote)
        service.delete_message(
            display_name=VALJEAN[0], auth_token=VALJEAN[1], message_id=message_id
        )

    votes, author_tallies, message_tallies = _state(file_session_factory, author_id, message_id)
    assert votes == 0
    assert message_tallies is None
    assert author_tallies == (0, 0)


def test_concurrent_voters_are_all_counted(file_session_factory) -> None:
    """Many users voting on one message at once lose no increments."""
    voters = [(f"Voter {index}", f"token-{index}") for index in range(8)]
    author_id, message_id = _seed(file_session_factory, voters)
    start = threading.Barrier(len(voters))

    def cast(name: str, token: str):
        def _cast() -> None:
            with file_session_factory() as session:
                ledger = VoteLedger(session, attempts=len(voters) + 2)
                start.wait(timeout=10)
                ledger.cast_vote(name, token, message_id, True)

        return _cast

    errors = _run_threads([cast(name, token) for name, token in voters])

    assert errors == []
    votes, author_tallies, message_tallies = _state(file_session_factory, author_id, message_id)
    assert votes == len(voters)
    assert message_tallies == (len(voters), 0)
    assert author_tallies == (len(voters), 0)


def test_racing_first_votes_on_one_pair_count_once(file_session_factory) -> None:
    """Two first votes for the same pair leave one entry and a single increment.

    Each ledger has its own lock registry, as separate processes would, and
    both see no existing vote before either inserts.
    """
    author_id, message_id = _seed(file_session_factory, [FANTINE])
    both_looked = threading.Barrier(2)
    transitions: list[VoteTransition] = []

    def cast() -> None:
        with file_session_factory() as session:
            ledger = VoteLedger(session, attempts=5, locks=PairLockRegistry())
            lookup = ledger.votes.get
            first = [True]

            def get_after_both_looked(user_id, message_id):
                found = lookup(user_id, message_id)
                if first[0]:
                    first[0] = False
                    both_looked.wait(timeout=10)
                return found

            ledger.votes.get = get_after_both_looked
            transitions.append(ledger.cast_vote(*FANTINE, message_id, True).transition)

    errors = _run_threads([cast, cast])

    assert errors == []
    assert sorted(transitions) == [VoteTransition.CREATED, VoteTransition.UNCHANGED]
    votes, author_tallies, message_tallies = _state(file_session_factory, author_id, message_id)
    assert votes == 1
    assert message_tallies == (1, 0)
    assert author_tallies == (1, 0)
