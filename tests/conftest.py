# tests/conftest.py
from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Generator, Iterator

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from currents.core.security import create_access_token
from currents.db.session import Base, enable_sqlite_foreign_keys
from currents.db.session import get_db as app_get_session
from currents.main import app as fastapi_app
from currents.models import Profile
from currents.repositories.post_repo import PostRepository
from currents.repositories.profile_repo import ProfileRepository
from currents.services.feed import FeedPaginator
from currents.services.post_service import PostService

TEST_DB_URL = "sqlite://"


@pytest.fixture()
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
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


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


@pytest.fixture()
def post_repo(db_session: Session) -> PostRepository:
    return PostRepository(db_session)


@pytest.fixture()
def post_service(post_repo: PostRepository) -> PostService:
    return PostService(post_repo)


@pytest.fixture()
def feed(post_repo: PostRepository) -> FeedPaginator:
    return FeedPaginator(post_repo)


@pytest.fixture()
def make_profile(db_session: Session) -> Callable[..., Profile]:
    """Return a factory that persists profiles with unique ids."""
    repo = ProfileRepository(db_session)

    def _make(username: str, full_name: str | None = None) -> Profile:
        profile = repo.create(
            profile_id=str(uuid.uuid4()),
            username=username,
            email=f"{username}@example.com",
            full_name=full_name,
        )
        db_session.commit()
        return profile

    return _make


@pytest.fixture()
def author(make_profile: Callable[..., Profile]) -> Profile:
    """Create and return the primary test author."""
    return make_profile("alice", "Alice Author")


@pytest.fixture()
def other_author(make_profile: Callable[..., Profile]) -> Profile:
    """Create and return a second author."""
    return make_profile("bob", "Bob Writer")


@pytest.fixture()
def auth_headers(author: Profile) -> dict[str, str]:
    """Return authorization headers for the primary test author."""
    token = create_access_token(author.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_headers(other_author: Profile) -> dict[str, str]:
    """Return authorization headers for the second author."""
    token = create_access_token(other_author.id)
    return {"Authorization": f"Bearer {token}"}
