"""
Pytest fixtures for testing
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ecofinance.api.deps import get_db, get_email_sender
from ecofinance.auth import create_access_token, hash_password
from ecofinance.infrastructure.db.models import User
from ecofinance.infrastructure.db.session import Base
from ecofinance.main import app


class RecordingEmailSender:
    """EmailSender double: remembers every message instead of sending it."""

    def __init__(self):
        self.password_resets = []
        self.welcomes = []

    def send_password_reset_email(self, to: str, reset_token: str, frontend_url: str) -> bool:
        self.password_resets.append({"to": to, "token": reset_token, "frontend_url": frontend_url})
        return True

    def send_welcome_email(self, to: str, first_name: str, frontend_url: str) -> bool:
        self.welcomes.append({"to": to, "first_name": first_name})
        return True


@pytest.fixture
def db_engine():
    """In-memory SQLite shared by the test and the app (single connection)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


def make_user(db: Session, email: str = "anna@example.com", password: str = "password123") -> User:
    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name="Анна",
        last_name="Иванова",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db_session) -> User:
    return make_user(db_session)


@pytest.fixture
def other_user(db_session) -> User:
    return make_user(db_session, email="boris@example.com")


@pytest.fixture
def client(db_engine, email_sender):
    """Test client для FastAPI поверх тестовой БД"""
    SessionLocal = sessionmaker(bind=db_engine, autoflush=False, autocommit=False)

    def _override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def auth_headers(user) -> dict:
    return bearer(user)


@pytest.fixture
def other_auth_headers(other_user) -> dict:
    return bearer(other_user)
