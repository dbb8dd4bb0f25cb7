# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["ADMIN_CODE"] = "test-admin-code"
os.environ.pop("SMTP_HOST", None)

from cinequiz.api.dependencies import get_mailer_dep, get_now
from cinequiz.db.session import Base
from cinequiz.db.session import get_db as app_get_session
from cinequiz.main import app as fastapi_app
from cinequiz.models import Movie, User
from cinequiz.services.mailer import MailDeliveryError, Mailer
from cinequiz.services.movie_selector import seed_movies

TEST_DB_URL = "sqlite://"
ADMIN_CODE = "test-admin-code"

# 2024-03-15 11:00 in Paris; zero-based day of year 74.
FROZEN_NOW = datetime(2024, 3, 15, 10, 0, tzinfo=UTC)

WALLET = "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin"
OTHER_WALLET = "4Nd1mBQtrMJVYVfKf2PJy9NZUZdTAsp7D4xWLs4gDB4T"


class FrozenClock:
    """Mutable stand-in for the request clock."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now

    def __call__(self) -> datetime:
        return self.now


class RecordingMailer(Mailer):
    """Mailer that keeps sent links instead of talking to SMTP."""

    def __init__(self) -> None:
        super().__init__(host="")
        self.sent: list[tuple[str, str]] = []
        self.fail = False

    def send_verification(self, to_addr: str, link: str) -> None:
        if self.fail:
            raise MailDeliveryError("relay unavailable")
        self.sent.append((to_addr, link))

    @property
    def last_token(self) -> str:
        return self.sent[-1][1].rsplit("/", 1)[-1]


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Services commit, so every table is emptied between tests.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(FROZEN_NOW)


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    clock: FrozenClock,
    mailer: RecordingMailer,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_now] = clock
    app.dependency_overrides[get_mailer_dep] = lambda: mailer
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def movies(db_session: Session) -> list[Movie]:
    """Seed a three-movie catalog."""
    return seed_movies(
        db_session,
        [
            ("Inception", "https://img.cinequiz.app/inception.jpg"),
            ("Heat", "https://img.cinequiz.app/heat.jpg"),
            ("Alien", "https://img.cinequiz.app/alien.jpg"),
        ],
    )


@pytest.fixture()
def inception(db_session: Session) -> Movie:
    """Seed a catalog holding only Inception."""
    return seed_movies(db_session, [("Inception", "https://img.cinequiz.app/inception.jpg")])[0]


@pytest.fixture()
def verified_user(db_session: Session) -> User:
    """Create a verified user who has not participated yet."""
    user = User(
        wallet_address=WALLET,
        email="alice@gmail.com",
        is_email_verified=True,
        correct_answers=0,
        created_at=FROZEN_NOW - timedelta(days=10),
    )
    db_session.add(user)
    db_session.commit()
    return user
