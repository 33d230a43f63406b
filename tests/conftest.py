"""
Pytest fixtures for the fintools test suite.

Provides:
- An in-memory SQLite database, created fresh for every test
- A FastAPI TestClient whose requests share the test's Session
- One user per role, with bearer headers for each
"""

import os

# Settings are read at import time, so point them at SQLite before fintools loads
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import date
from decimal import Decimal
from typing import Dict, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from fintools.core.database import Base, SessionLocal, engine
from fintools.core.dependencies import get_db
from fintools.main import app
from fintools.models.user import User, UserRole
from fintools.services.user_service import create_user
from tests.helpers import bearer


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _make_user(db: Session, email: str, name: str, role: UserRole, contribution: str = "0") -> User:
    return create_user(
        db,
        email=email,
        password="secret123",
        name=name,
        role=role,
        fund_contribution=Decimal(contribution),
    )


@pytest.fixture
def founder(db_session: Session) -> User:
    return _make_user(db_session, "founder@example.com", "Farah Founder", UserRole.founder, "5000")


@pytest.fixture
def second_founder(db_session: Session) -> User:
    return _make_user(db_session, "cofounder@example.com", "Bilal Cofounder", UserRole.founder, "3000")


@pytest.fixture
def admin(db_session: Session) -> User:
    return _make_user(db_session, "admin@example.com", "Ayesha Admin", UserRole.admin)


@pytest.fixture
def manager(db_session: Session) -> User:
    return _make_user(db_session, "manager@example.com", "Moiz Manager", UserRole.manager)


@pytest.fixture
def founder_headers(founder: User) -> Dict[str, str]:
    return bearer(founder)


@pytest.fixture
def admin_headers(admin: User) -> Dict[str, str]:
    return bearer(admin)


@pytest.fixture
def manager_headers(manager: User) -> Dict[str, str]:
    return bearer(manager)


@pytest.fixture
def today() -> date:
    return date.today()