"""Shared test fixtures and utilities."""

from __future__ import annotations

import itertools
import os
import sys
from pathlib import Path
from typing import Callable, Dict

import pytest


ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))


# Must be in place before app.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ.setdefault("LOG_LEVEL", "WARNING")


from fastapi.testclient import TestClient  # noqa: E402

from app.auth import create_access_token  # noqa: E402
from app.database import Base, SessionLocal, engine, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.chat_channel import ChatChannel  # noqa: E402
from app.models.chat_channel_membership import ChatChannelMembership  # noqa: E402
from app.models.user import User  # noqa: E402
from app.models.user_block import UserBlock  # noqa: E402


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token({"sub": user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def user_factory(db) -> Callable[..., User]:
    sequence = itertools.count(1)

    def factory(**kwargs) -> User:
        n = next(sequence)
        kwargs.setdefault("username", f"user{n}")
        kwargs.setdefault("email", f"user{n}@example.com")
        kwargs.setdefault("hashed_password", "not-a-real-hash")
        user = User(**kwargs)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return factory


@pytest.fixture
def blocker(user_factory) -> User:
    return user_factory(username="blocker")


@pytest.fixture
def blocked(user_factory) -> User:
    return user_factory(username="blocked")


@pytest.fixture
def block_factory(db) -> Callable[[User, User], UserBlock]:
    """Insert a block row with counters kept consistent."""

    def factory(blocker: User, blocked: User) -> UserBlock:
        block = UserBlock(blocker_id=blocker.id, blocked_id=blocked.id)
        db.add(block)
        blocker.blocking_others_count += 1
        blocked.blocked_by_count += 1
        db.commit()
        db.refresh(block)
        return block

    return factory


@pytest.fixture
def direct_channel_factory(db) -> Callable[..., ChatChannel]:
    def factory(
        user_a: User,
        user_b: User,
        *,
        status: str = "active",
        channel_type: str = "direct",
    ) -> ChatChannel:
        channel = ChatChannel(
            channel_type=channel_type,
            slug=f"{user_a.username}/{user_b.username}",
            status=status,
        )
        db.add(channel)
        db.flush()
        db.add(ChatChannelMembership(chat_channel_id=channel.id, user_id=user_a.id))
        db.add(ChatChannelMembership(chat_channel_id=channel.id, user_id=user_b.id))
        db.commit()
        db.refresh(channel)
        return channel

    return factory


__all__ = ["auth_headers"]
