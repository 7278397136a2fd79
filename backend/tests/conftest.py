from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from loveslices.db.base import Base  # noqa: E402
from loveslices.db.session import get_db  # noqa: E402
from loveslices.main import create_app  # noqa: E402
from loveslices.models import (  # noqa: E402
    Conversation,
    ConversationOutcome,
    JournalEntry,
    Loveslice,
    Question,
    Response,
    SpokenLoveslice,
    User,
)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory):
    session: Session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture()
def client(session_factory):
    app = create_app()

    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as test_client:
        yield test_client


def make_user(db: Session, name: str, **kwargs) -> User:
    user = User(
        name=name,
        email=kwargs.pop("email", f"{name.lower()}@example.com"),
        hashed_password="hashed",
        **kwargs,
    )
    db.add(user)
    db.flush()
    return user


def link(db: Session, a: User, b: User) -> None:
    a.partner_id = b.id
    b.partner_id = a.id
    db.flush()


def make_written_entry(
    db: Session,
    user1: User,
    user2: User,
    *,
    theme: str = "Gratitude",
    content: str = "Grateful today for you",
    created_at: datetime | None = None,
) -> JournalEntry:
    question = Question(content=f"What are you thankful for? ({theme})", theme=theme)
    db.add(question)
    db.flush()
    response1 = Response(user_id=user1.id, question_id=question.id, content=f"{user1.name} answers")
    response2 = Response(user_id=user2.id, question_id=question.id, content=f"{user2.name} answers")
    db.add_all([response1, response2])
    db.flush()
    loveslice = Loveslice(
        question_id=question.id,
        user1_id=user1.id,
        user2_id=user2.id,
        response1_id=response1.id,
        response2_id=response2.id,
    )
    db.add(loveslice)
    db.flush()
    entry = JournalEntry(
        user1_id=user1.id,
        user2_id=user2.id,
        written_loveslice_id=loveslice.id,
        theme=theme,
        searchable_content=content,
        created_at=created_at or datetime(2024, 5, 1, 12, 0),
    )
    db.add(entry)
    db.flush()
    return entry


def make_spoken_entry(
    db: Session,
    user1: User,
    user2: User,
    *,
    theme: str = "Dreams",
    content: str = "We talked about moving to the coast",
    created_at: datetime | None = None,
) -> JournalEntry:
    conversation = Conversation(
        initiated_by_user_id=user1.id,
        duration_seconds=900,
        outcome=ConversationOutcome.CONNECTED,
        final_note="Worth it",
    )
    db.add(conversation)
    db.flush()
    spoken = SpokenLoveslice(
        conversation_id=conversation.id,
        user1_id=user1.id,
        user2_id=user2.id,
        outcome=ConversationOutcome.CONNECTED,
        theme=theme,
        duration_seconds=900,
    )
    db.add(spoken)
    db.flush()
    entry = JournalEntry(
        user1_id=user1.id,
        user2_id=user2.id,
        spoken_loveslice_id=spoken.id,
        theme=theme,
        searchable_content=content,
        created_at=created_at or datetime(2024, 5, 2, 12, 0),
    )
    db.add(entry)
    db.flush()
    return entry
