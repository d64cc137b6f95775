"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (with the ability catalog and default grants seeded)
- FastAPI test client
- One user per role and matching bearer headers
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.permissions import Role
from app.core.security import create_user_token, get_password_hash
from app.core.storage import LocalStorage, get_storage
from app.crud import permission as permission_crud
from app.models.candidate import Candidate, CandidateStatus
from app.models.user import User
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "SecurePass123!"
# bcrypt is slow on purpose; hash once for every fixture user
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture
def db_session():
    """
    Create a fresh, seeded database for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    permission_crud.seed_defaults(db)
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def client(db_session, upload_dir):
    """
    FastAPI test client with overridden database and storage dependencies.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: LocalStorage(str(upload_dir), "/uploads")

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def users(db_session):
    """One stored user per role, keyed by role."""
    created = {}
    for role in Role:
        user = User(
            email=f"{role.value}@example.com",
            hashed_password=TEST_PASSWORD_HASH,
            name=f"{role.value.title()} Tester",
            role=role,
        )
        db_session.add(user)
        created[role] = user
    db_session.commit()
    for user in created.values():
        db_session.refresh(user)
    return created


@pytest.fixture
def headers(users):
    """Bearer headers per role, e.g. ``headers[Role.OPERATIONS]``."""
    return {
        role: {"Authorization": f"Bearer {create_user_token(user)}"}
        for role, user in users.items()
    }


@pytest.fixture
def admin_headers(headers):
    return headers[Role.ADMIN]


@pytest.fixture
def operations_headers(headers):
    return headers[Role.OPERATIONS]


@pytest.fixture
def employment_headers(headers):
    return headers[Role.EMPLOYMENT]


@pytest.fixture
def user_headers(headers):
    return headers[Role.USER]


@pytest.fixture
def sample_job_data():
    """Sample position for testing"""
    return {
        "title": "Welder",
        "job_number": "W-1042",
        "department": "Plant A",
        "due_date": "2026-11-30",
    }


@pytest.fixture
def make_candidate(db_session):
    """Insert a candidate directly, bypassing the API."""
    def _make(full_name="Jane Doe", status=CandidateStatus.HIRED, **fields):
        candidate = Candidate(full_name=full_name, status=status, **fields)
        db_session.add(candidate)
        db_session.commit()
        db_session.refresh(candidate)
        return candidate
    return _make


@pytest.fixture
def password():
    """Plain-text password of every fixture user"""
    return TEST_PASSWORD
