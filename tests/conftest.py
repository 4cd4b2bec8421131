"""
Pytest fixtures and configuration for Rider Expense tests.

This module provides common fixtures used across all test modules,
including database setup, test client, a recording email sender and
user/record factories.
"""

import os
import tempfile

# Settings are read once and cached, so the test environment must be in
# place before anything from rider_expense is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-jwt-secret-0123456789abcdefghijkl"
os.environ["PASSWORD_HASH_ROUNDS"] = "1000"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"
os.environ["LOG_DIR"] = os.path.join(tempfile.gettempdir(), "rider_expense_test_logs")

import pytest
from datetime import timedelta
from typing import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from rider_expense.db import get_db
from rider_expense.deps import get_email_sender
from rider_expense.main import app
from rider_expense.models import Base
from rider_expense.models.daily_record import DailyRecord
from rider_expense.models.user import FULL_TIMER, PART_TIMER, User, salary_for
from rider_expense.responses import TOKEN_COOKIE
from rider_expense.utils.auth import create_access_token, hash_password
from rider_expense.utils.dates import utcnow

from tests.fakes import RecordingEmailSender

# Password used in fixtures - satisfies the strength rule
TEST_PASSWORD = "Password123"

# Long enough, with a letter and a digit, but each carries one character
# outside letters, digits and !@#$%^&*
DISALLOWED_PASSWORDS = [
    "abcd 1234",
    "abcd1234~",
    "abcd1234\n",
    "abcdefg\u0663",
    "abcd\uff11234",
]

# Create in-memory SQLite database for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture(scope="function")
def client(db_session: Session, email_sender: RecordingEmailSender) -> Generator[TestClient, None, None]:
    """
    Create a test client with overridden database and email dependencies.
    """
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(
    db_session: Session,
    email: str = "rider@example.com",
    name: str = "Test Rider",
    employment_type: str = FULL_TIMER,
    verified: bool = True,
    created_days_ago: int = 120,
) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        employment_type=employment_type,
        fixed_salary=salary_for(employment_type),
        is_account_verified=verified,
        account_created_at=utcnow() - timedelta(days=created_days_ago),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session: Session) -> User:
    """
    Create a verified full-time rider in the database.
    """
    return make_user(db_session)


@pytest.fixture
def unverified_user(db_session: Session) -> User:
    return make_user(db_session, email="pending@example.com", name="Pending Rider", verified=False)


@pytest.fixture
def other_user(db_session: Session) -> User:
    return make_user(db_session, email="other@example.com", name="Other Rider", employment_type=PART_TIMER)


@pytest.fixture
def auth_client(client: TestClient, test_user: User) -> TestClient:
    """
    Test client carrying a valid session cookie for test_user.
    """
    client.cookies.set(TOKEN_COOKIE, create_access_token(test_user.id))
    return client


@pytest.fixture
def pending_client(client: TestClient, unverified_user: User) -> TestClient:
    client.cookies.set(TOKEN_COOKIE, create_access_token(unverified_user.id))
    return client


def add_record(db_session: Session, user: User, day, work_status="On", deliveries=0, tips=0.0, expenses=0.0, day_quality="Average"):
    record = DailyRecord(
        user_id=user.id,
        date=day,
        work_status=work_status,
        deliveries=deliveries if work_status == "On" else 0,
        tips=tips if work_status == "On" else 0,
        expenses=expenses if work_status == "On" else 0,
        day_quality=day_quality if work_status == "On" else None,
    )
    db_session.add(record)
    db_session.commit()
    db_session.refresh(record)
    return record
