"""Shared fixtures: a throwaway SQLite schema and authenticated clients."""
from __future__ import annotations

import os
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

# Settings are read at import time, so the environment must be ready first.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_portalhub.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DISABLE_AUTO_MIGRATIONS", "true")

from portalhub.database import Base, SessionLocal, engine  # noqa: E402
from portalhub.main import app  # noqa: E402
from portalhub.models import Profile, User  # noqa: E402
from portalhub.services import get_current_user, get_optional_user  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    yield
    with SessionLocal() as session:
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(delete(table))
        session.commit()


@pytest.fixture
def user_factory() -> Callable[..., User]:
    def _factory(username: str, *, is_private: bool = False, with_profile: bool = True) -> User:
        with SessionLocal() as session:
            user = User(email=f"{username}@portal.io", hashed_password="test-hash")
            session.add(user)
            session.flush()
            if with_profile:
                session.add(
                    Profile(
                        user_id=user.id,
                        username=username,
                        display_name=username.title(),
                        full_name=f"{username.title()} Tester",
                        is_private=is_private,
                    )
                )
            session.commit()
            session.refresh(user)
            return user

    return _factory


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def authed_client(client: TestClient) -> Iterator[Callable[[User], TestClient]]:
    def _with_user(user: User) -> TestClient:
        def _override() -> User:
            return user

        app.dependency_overrides[get_current_user] = _override
        app.dependency_overrides[get_optional_user] = _override
        return client

    yield _with_user
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous(client: TestClient) -> TestClient:
    app.dependency_overrides.pop(get_current_user, None)
    app.dependency_overrides.pop(get_optional_user, None)
    return client
