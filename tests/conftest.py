# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from geoboard.db.session import create_tables, drop_tables, enable_sqlite_foreign_keys
from geoboard.db.session import get_db as app_get_session
from geoboard.main import app as fastapi_app
from geoboard.models import Message, User
from geoboard.services.message_service import MessageService
from geoboard.services.user_service import UserService

TEST_DB_URL = "sqlite://"

NEAR_POINT = (37.3323314, -122.0342186)
FAR_POINT = (39.5344314, -122.0336186)

FANTINE = ("Fantine", "123456789")
VALJEAN = ("Jean Valjean", "24601")


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    create_tables(bind=engine)
    try:
        yield engine
    finally:
        drop_tables(bind=engine)
        engine.dispose()


@pytest.fixture()
def file_session_factory(tmp_path) -> Generator[sessionmaker[Session], None, None]:
    """Sessions on a SQLite file, each with its own connection.

    Used where separate sessions must see each other's commits and contend
    for the database writer lock.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'geoboard.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    enable_sqlite_foreign_keys(engine)
    create_tables(bind=engine)
    try:
        yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    finally:
        drop_tables(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(app: FastAPI, session_factory: sessionmaker[Session]) -> Iterator[TestClient]:
    def _get_session_override() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        with TestClient(app, base_url="http://test") as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def make_user(db_session: Session) -> Callable[[str, str], int]:
    """Return a factory that signs a user up and yields its id."""

    def _make_user(display_name: str, auth_token: str) -> int:
        return UserService(db_session).create_user(display_name, auth_token).id

    return _make_user


@pytest.fixture()
def fantine(make_user: Callable[[str, str], int]) -> int:
    """The voting user."""
    return make_user(*FANTINE)


@pytest.fixture()
def valjean(make_user: Callable[[str, str], int]) -> int:
    """The authoring user."""
    return make_user(*VALJEAN)


@pytest.fixture()
def make_message(db_session: Session, valjean: int) -> Callable[..., int]:
    """Return a factory posting messages as Jean Valjean."""

    def _make_message(
        text: str = "My name is Jean Valjean!",
        latitude: float = NEAR_POINT[0],
        longitude: float = NEAR_POINT[1],
    ) -> int:
        message = MessageService(db_session).create_message(
            display_name=VALJEAN[0],
            auth_token=VALJEAN[1],
            text=text,
            latitude=latitude,
            longitude=longitude,
        )
        return message.id

    return _make_message


@pytest.fixture()
def message_id(make_message: Callable[..., int]) -> int:
    """A message authored by Jean Valjean at the near point."""
    return make_message()


@pytest.fixture()
def tallies(db_session: Session) -> Callable[[type[Message] | type[User], int], tuple[int, int]]:
    """Return a reader of fresh (up_votes, down_votes) for a message or user."""

    def _tallies(model: type[Message] | type[User], row_id: int) -> tuple[int, int]:
        db_session.expire_all()
        row = db_session.get(model, row_id)
        assert row is not None
        return row.up_votes, row.down_votes

    return _tallies
