"""Shared API dependencies wiring request-scoped services."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from geoboard.db.session import get_db
from geoboard.services.message_service import MessageService
from geoboard.services.user_service import UserService
from geoboard.services.vote_ledger import VoteLedger

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_vote_ledger(db: SessionDep) -> VoteLedger:
    """Return a vote ledger bound to the request session."""
    return VoteLedger(db)


VoteLedgerDep = Annotated[VoteLedger, Depends(get_vote_ledger)]


def get_message_service(db: SessionDep, ledger: VoteLedgerDep) -> MessageService:
    """Return a message service sharing the request's ledger."""
    return MessageService(db, ledger=ledger)


def get_user_service(db: SessionDep) -> UserService:
    """Return a user service bound to the request session."""
    return UserService(db)


MessageServiceDep = Annotated[MessageService, Depends(get_message_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
