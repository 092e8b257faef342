"""Shared fixtures: in-memory database, API client and authenticated users."""

from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SEED_ON_STARTUP", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bukva.auth.passwords import get_password_hash
from bukva.auth.tokens import create_access_token
from bukva.database import Base, get_db
from bukva.main import app
from bukva.models import Section, User, UserRole


@pytest.fixture
def engine():
    """Fresh in-memory SQLite engine shared across connections."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db_session(engine) -> Session:
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session: Session) -> TestClient:
    """TestClient whose requests all run against the in-memory database."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(db: Session, email: str, role: UserRole, password: str) -> User:
    user = User(
        email=email,
        password_hash=get_password_hash(password),
        nickname=email.split("@")[0],
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def teacher(db_session: Session) -> User:
    return _make_user(db_session, "teacher@example.com", UserRole.TEACHER, "teacher123")


@pytest.fixture
def student(db_session: Session) -> User:
    return _make_user(db_session, "learner@example.com", UserRole.STUDENT, "learner123")


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def teacher_headers(teacher: User) -> dict:
    return auth_headers(teacher)


@pytest.fixture
def student_headers(student: User) -> dict:
    return auth_headers(student)


@pytest.fixture
def grammar_tree(db_session: Session) -> dict:
    """Grammar > Tenses (active) plus an inactive Vocabulary root with an active child.

    Returns the created sections keyed by name.
    """
    grammar = Section(name="Grammar", parent_id=None, order_index=0, is_active=True)
    vocabulary = Section(name="Vocabulary", parent_id=None, order_index=1, is_active=False)
    db_session.add_all([grammar, vocabulary])
    db_session.commit()

    tenses = Section(name="Tenses", parent_id=grammar.id, order_index=0, is_active=True)
    food = Section(name="Food", parent_id=vocabulary.id, order_index=0, is_active=True)
    db_session.add_all([tenses, food])
    db_session.commit()

    return {
        "Grammar": grammar,
        "Vocabulary": vocabulary,
        "Tenses": tenses,
        "Food": food,
    }
