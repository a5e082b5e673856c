"""Pytest fixtures for service and API tests."""

import os
import uuid
from collections.abc import AsyncGenerator, Callable, Generator
from datetime import datetime, timezone

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from blinkvocab.api.deps import get_db
from blinkvocab.core.security import get_password_hash, issue_token
from blinkvocab.db import models  # noqa: F401  # Imported for side effects
from blinkvocab.db.base import Base
from blinkvocab.db.models import (
    Dictionary,
    DictionaryWord,
    LearningRecord,
    Tag,
    User,
    Word,
    WordSense,
    WordTag,
)
from blinkvocab.main import create_app
from blinkvocab.utils.cache import cache_backend

NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def db_engine():
    engine = create_engine(
        "sqlite://",
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
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=db_engine
    )
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clear_cache() -> Generator[None, None, None]:
    cache_backend.clear()
    try:
        yield
    finally:
        cache_backend.clear()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture()
async def async_client(db_session: Session) -> AsyncGenerator[httpx.AsyncClient, None]:
    app = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    def _make_user(email: str = "learner@example.com") -> User:
        user = User(
            id=uuid.uuid4(),
            email=email,
            hashed_password=get_password_hash("verysecure"),
            full_name=email.split("@")[0],
            is_active=True,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture()
def learner(make_user) -> User:
    return make_user("learner@example.com")


@pytest.fixture()
def other_learner(make_user) -> User:
    return make_user("other@example.com")


@pytest.fixture()
def auth_headers(learner: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {issue_token(learner.id)}"}


@pytest.fixture()
def make_word(db_session: Session) -> Callable[..., Word]:
    def _make_word(lemma: str, *, definition: str | None = None) -> Word:
        word = Word(lemma=lemma, language="en", source="seed", created_at=NOW)
        if definition:
            word.senses.append(
                WordSense(pos="noun", definition=definition, examples=[f"An example of {lemma}."], order=0)
            )
        db_session.add(word)
        db_session.commit()
        return word

    return _make_word


@pytest.fixture()
def make_record(db_session: Session) -> Callable[..., LearningRecord]:
    def _make_record(
        user: User,
        word: Word,
        *,
        status: str = "new",
        stage: int = 0,
        next_due_at: datetime | None = NOW,
        created_at: datetime = NOW,
    ) -> LearningRecord:
        record = LearningRecord(
            id=uuid.uuid4(),
            user_id=user.id,
            word_id=word.id,
            status=status,
            stage=stage,
            next_due_at=next_due_at,
            created_at=created_at,
            updated_at=created_at,
        )
        db_session.add(record)
        db_session.commit()
        return record

    return _make_record


@pytest.fixture()
def essentials(db_session: Session, make_word) -> Dictionary:
    """A small dictionary with three tagged words."""

    dictionary = Dictionary(name="Essentials", description="Everyday words", language="en")
    tag = Tag(name="daily", type="topic")
    db_session.add_all([dictionary, tag])
    db_session.commit()
    for lemma in ("apple", "bread", "water"):
        word = make_word(lemma, definition=f"Definition of {lemma}")
        db_session.add(DictionaryWord(dictionary_id=dictionary.id, word_id=word.id, added_at=NOW))
        db_session.add(WordTag(word_id=word.id, tag_id=tag.id))
    db_session.commit()
    return dictionary
