# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("JWT_SECRET", "test-secret-key-for-chow")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("MAX_RADIUS_METERS", "2000")

from chow.core.security import hash_password
from chow.core.settings import Settings
from chow.db.session import Base, enable_sqlite_foreign_keys
from chow.db.session import get_db as app_get_session
from chow.main import app as fastapi_app
from chow.models import Joint, Role, User
from chow.services.auth import TokenService

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct-horse-battery"

# Hashed once; bcrypt is slow.
_TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)
_USER_COUNTER = count(1)
_TEST_SETTINGS_INSTANCE = Settings()


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Services commit, so each test wipes the tables instead of rolling back.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide a Settings instance aligned with runtime configuration."""
    return _TEST_SETTINGS_INSTANCE


@pytest.fixture(scope="session")
def test_password() -> str:
    """Plain-text password shared by every fixture user."""
    return TEST_PASSWORD


@pytest.fixture(scope="session")
def token_service(test_settings: Settings) -> TokenService:
    return TokenService.from_settings(test_settings)


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users with the shared test password."""

    def _make_user(role: Role = Role.USER, *, username: str | None = None, email: str | None = None) -> User:
        n = next(_USER_COUNTER)
        user = User(
            email=email or f"user{n}@example.com",
            username=username or f"{role.value}{n:04d}",
            password_hash=_TEST_PASSWORD_HASH,
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return a persisted plain user."""
    return make_user(Role.USER)


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second persisted plain user."""
    return make_user(Role.USER)


@pytest.fixture()
def moderator_user(make_user: Callable[..., User]) -> User:
    return make_user(Role.MODERATOR)


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user(Role.ADMIN)


def _bearer(tokens: TokenService, user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {tokens.issue(user)}"}


@pytest.fixture()
def auth_token(token_service: TokenService, test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return _bearer(token_service, test_user)


@pytest.fixture()
def other_auth_token(token_service: TokenService, other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return _bearer(token_service, other_user)


@pytest.fixture()
def moderator_token(token_service: TokenService, moderator_user: User) -> dict[str, str]:
    return _bearer(token_service, moderator_user)


@pytest.fixture()
def admin_token(token_service: TokenService, admin_user: User) -> dict[str, str]:
    return _bearer(token_service, admin_user)


@pytest.fixture()
def make_joint(db_session: Session, test_user: User) -> Callable[..., Joint]:
    """Return a factory persisting joints created by ``test_user``."""

    def _make_joint(
        name: str = "Mama Put",
        latitude: float = 6.5,
        longitude: float = 3.3,
        *,
        approved: bool = True,
        description: str | None = "Jollof and fried plantain",
        creator: User | None = None,
    ) -> Joint:
        joint = Joint(
            name=name,
            latitude=latitude,
            longitude=longitude,
            description=description,
            is_approved=approved,
            creator_id=(creator or test_user).id,
        )
        db_session.add(joint)
        db_session.commit()
        return joint

    return _make_joint


@pytest.fixture()
def test_joint(make_joint: Callable[..., Joint]) -> Joint:
    """An approved joint at (6.5, 3.3)."""
    return make_joint()


@pytest.fixture()
def pending_joint(make_joint: Callable[..., Joint]) -> Joint:
    """A joint that has not been approved yet."""
    return make_joint("Suya Spot", 6.51, 3.31, approved=False, description="Late night suya")
