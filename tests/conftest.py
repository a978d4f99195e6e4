# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import models.task  # noqa: F401
import models.users  # noqa: F401
from config import settings
from database import Base, get_db
from main import app
from models.task import Task, TodoItem
from models.users import User, utcnow
from utils.hashing import get_password_hash
from utils.image_host import get_image_host
from utils.tokenJWT import token_for_user

from .fakes import FakeImageHost

# Hashing once keeps the suite fast; every fixture user shares this password
PASSWORD = "password123"
PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture()
def engine():
    """Fresh in-memory SQLite database per test, shared by every session."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory) -> Session:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def image_host() -> FakeImageHost:
    return FakeImageHost()


@pytest.fixture()
def client(session_factory, image_host, monkeypatch):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(settings, "ADMIN_INVITE_TOKEN", "admin123")
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_host] = lambda: image_host
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db: Session, name: str, email: str, role: str = "user", **fields) -> User:
    user = User(name=name, email=email, role=role, password_hash=PASSWORD_HASH, **fields)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_task(db: Session, *, assigned_to=(), checklist=(), **fields) -> Task:
    values = {
        "title": "Default Task",
        "description": "Default Description",
        "priority": "Medium",
        "status": "Pending",
        "due_date": utcnow() + timedelta(days=3),
        "attachments": [],
    }
    values.update(fields)
    task = Task(**values)
    task.set_assignees(list(assigned_to))
    task.todo_checklist = [
        TodoItem(position=i, text=text, completed=done) for i, (text, done) in enumerate(checklist)
    ]
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def auth(user: User) -> dict:
    return {"Authorization": f"Bearer {token_for_user(user)}"}


@pytest.fixture()
def admin(db) -> User:
    return make_user(db, "Admin User", "admin@example.com", role="admin")


@pytest.fixture()
def user(db) -> User:
    return make_user(db, "Normal User", "user@example.com")


@pytest.fixture()
def other_user(db) -> User:
    return make_user(db, "Other User", "other@example.com")


@pytest.fixture()
def past() -> datetime:
    return utcnow() - timedelta(days=2)
