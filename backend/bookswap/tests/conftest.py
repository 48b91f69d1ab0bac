"""
Shared fixtures: an in-memory database, a TestClient wired to it, and
helpers for creating users and books.
"""
import os
import tempfile

# Must be set before bookswap.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="bookswap-uploads-")
os.environ["ADMIN_EMAILS"] = "moderator@example.com"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bookswap.main import app
from bookswap.db.base import Base
from bookswap.db.session import get_db
from bookswap.models.user import User, UserRole
from bookswap.services import auth_service, book_service, moderation_service

PASSWORD = "Secret#123"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """TestClient whose requests share the test session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory for registered users."""
    counter = {"n": 0}

    def _make_user(name=None, email=None, role=UserRole.USER) -> User:
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        user = auth_service.register_user(name or f"User {counter['n']}", email, PASSWORD, db)
        if role != UserRole.USER:
            user.role = role
            db.commit()
            db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", email="admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
def make_book(db, admin):
    """Factory for books; approved unless approved=False."""
    def _make_book(owner: User, title="Dune", author="Frank Herbert", approved=True):
        book = book_service.create_book(owner, title, author, "", None, db)
        if approved:
            book = moderation_service.approve_book(book.id, admin, db)
        return book

    return _make_book


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {auth_service.issue_token(user)}"}


@pytest.fixture
def headers():
    return auth_headers
