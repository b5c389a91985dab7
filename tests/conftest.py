"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Seeded companies, jobs and users with their tokens
"""

import os

# Settings are read at import time, so point them at test values first
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobly.core.database import Base, get_db
from jobly.core.security import create_access_token, get_password_hash
from jobly.models import Company, Job, User
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def seed_data(db_session):
    """
    Three companies, one job each, a regular user u1 and an admin.

    Returns the job ids keyed by title.
    """
    db_session.add_all([
        Company(handle="c1", name="C1", description="Desc1", num_employees=1, logo_url="http://c1.img"),
        Company(handle="c2", name="C2", description="Desc2", num_employees=2, logo_url="http://c2.img"),
        Company(handle="c3", name="C3", description="Desc3", num_employees=3, logo_url="http://c3.img"),
    ])
    db_session.flush()

    jobs = [
        Job(title="j1", salary=10000, equity=0.01, company_handle="c1"),
        Job(title="j2", salary=20000, equity=0.02, company_handle="c2"),
        Job(title="j3", salary=30000, equity=0, company_handle="c3"),
    ]
    db_session.add_all(jobs)

    db_session.add_all([
        User(
            username="u1",
            password=get_password_hash("password1"),
            first_name="U1F",
            last_name="U1L",
            email="user1@user.com",
            is_admin=False
        ),
        User(
            username="admin",
            password=get_password_hash("password2"),
            first_name="AdF",
            last_name="AdL",
            email="admin@user.com",
            is_admin=True
        ),
    ])
    db_session.commit()

    return {job.title: job.id for job in jobs}


@pytest.fixture
def user_headers():
    """Auth headers for the regular user u1"""
    token = create_access_token({"sub": "u1", "is_admin": False})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    """Auth headers for the admin user"""
    token = create_access_token({"sub": "admin", "is_admin": True})
    return {"Authorization": f"Bearer {token}"}
