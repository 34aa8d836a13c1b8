# tests/conftest.py
from __future__ import annotations

import json
import os
from collections.abc import Callable, Generator, Iterator
from datetime import timedelta
from typing import Any

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_MODE", "enforced")
os.environ.pop("REDIS_URL", None)
os.environ.pop("RESEND_API_KEY", None)


import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from limits.storage import MemoryStorage
from pytest_mock import MockerFixture
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from veilpost.core.security import create_access_token, hash_password
from veilpost.db.session import Base
from veilpost.db.session import get_db as app_get_session
from veilpost.db.time import utcnow
from veilpost.main import app as fastapi_app
from veilpost.models import Post, Reply, User
from veilpost.services.email import EmailSender, get_email_sender
from veilpost.services.rate_limit import (
    RateLimiter,
    RateLimitPolicy,
    get_rate_limiter,
    load_buckets,
)
from veilpost.services.suggestions import (
    CompletionClient,
    CompletionConfig,
    SuggestionService,
    get_suggestion_service,
)

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct-horse"


@pytest.fixture()
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
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
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
def clock(mocker: MockerFixture) -> list[float]:
    """Fake time for in-memory rate limit counters: ``clock[0]`` is now."""
    now = [1_000.0]
    fake_time = mocker.patch("limits.storage.memory.time")
    fake_time.time.side_effect = lambda: now[0]
    return now


@pytest.fixture()
def rate_limiter(clock: list[float]) -> RateLimiter:
    return RateLimiter(RateLimitPolicy.ENFORCED, load_buckets(), MemoryStorage())


@pytest.fixture(autouse=True)
def override_rate_limiter(app: FastAPI, rate_limiter: RateLimiter) -> Iterator[None]:
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_rate_limiter, None)


@pytest.fixture()
def sent_emails() -> list[dict[str, Any]]:
    return []


@pytest.fixture(autouse=True)
def override_email_sender(app: FastAPI, sent_emails: list[dict[str, Any]]) -> Iterator[None]:
    """Route verification emails to an in-memory outbox."""

    def handler(request: httpx.Request) -> httpx.Response:
        sent_emails.append(json.loads(request.content))
        return httpx.Response(200, json={"id": "email-1"})

    sender = EmailSender(
        api_key="test-key",
        api_url="https://mail.test/emails",
        transport=httpx.MockTransport(handler),
    )
    app.dependency_overrides[get_email_sender] = lambda: sender
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_email_sender, None)


CompletionHandler = Callable[[httpx.Request], httpx.Response]


def completion_reply(text: str) -> httpx.Response:
    """Build a chat-completions response carrying ``text``."""
    return httpx.Response(
        200,
        json={"choices": [{"index": 0, "message": {"role": "assistant", "content": text}}]},
    )


def build_suggestion_service(handler: CompletionHandler) -> SuggestionService:
    config = CompletionConfig(
        base_url="https://llm.test/api/v1",
        api_key="llm-key",
        model="test-model",
        temperature=0.9,
        timeout_seconds=5.0,
    )
    client = CompletionClient(config, transport=httpx.MockTransport(handler))
    return SuggestionService(client)


@pytest.fixture()
def use_completion(app: FastAPI) -> Iterator[Callable[[CompletionHandler], None]]:
    """Install a suggestion service whose completion API is ``handler``."""

    def install(handler: CompletionHandler) -> None:
        service = build_suggestion_service(handler)
        app.dependency_overrides[get_suggestion_service] = lambda: service

    try:
        yield install
    finally:
        app.dependency_overrides.pop(get_suggestion_service, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def password_hash() -> str:
    return hash_password(TEST_PASSWORD)


@pytest.fixture()
def make_user(db_session: Session, password_hash: str) -> Callable[..., User]:
    """Return a factory persisting verified users."""

    def _make_user(
        username: str,
        *,
        email: str | None = None,
        verified: bool = True,
        accepting: bool = True,
        code: str = "123456",
    ) -> User:
        user = User(
            username=username,
            email=email or f"{username.lower()}@example.com",
            password_hash=password_hash,
            is_verified=verified,
            verify_code=code,
            verify_code_expiry=utcnow() + timedelta(hours=1),
            is_accepting_messages=accepting,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return a persisted verified user."""
    return make_user("alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second persisted user."""
    return make_user("bob")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return {"Authorization": f"Bearer {create_access_token(test_user.id)}"}


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory persisting posts for a given owner."""

    def _make_post(
        owner: User,
        content: str = "What should I improve?",
        *,
        accepting: bool = True,
        created_at=None,
        replies: list[str] | None = None,
    ) -> Post:
        post = Post(
            owner_id=owner.id,
            username=owner.username,
            content=content,
            is_accepting_messages=accepting,
            replies=[Reply(content=text) for text in replies or []],
        )
        if created_at is not None:
            post.created_at = created_at
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make_post


@pytest.fixture()
def test_post(make_post: Callable[..., Post], test_user: User) -> Post:
    """Create a baseline post owned by the primary user with two replies."""
    return make_post(test_user, replies=["Great work", "Speak up more"])
