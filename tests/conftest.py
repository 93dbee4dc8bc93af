import os

# Settings are read at import time; tests never touch this database
os.environ.setdefault("DATABASE_URL", "sqlite:///./test-household-planner.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-household-planner")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from app.database import get_db
from app.config import settings
# Import all model classes to ensure they're registered with SQLAlchemy
from app.models import Base, User, Household, HouseholdMembership
from app.models.role import HouseholdRole
# Import FastAPI app AFTER model imports
from app.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(user_id: str = "test-user-123", expired: bool = False) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "exp": exp, "iat": datetime.now(UTC)}

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


def headers_for(auth_user_id: str) -> dict:
    """Authorization headers for the given auth user id"""
    return {"Authorization": f"Bearer {create_test_token(user_id=auth_user_id)}"}


@pytest.fixture
def mock_jwt_token():
    """Generate valid JWT token"""
    return create_test_token()


@pytest.fixture
def auth_headers(mock_jwt_token):
    """Authorization headers for authenticated requests"""
    return {"Authorization": f"Bearer {mock_jwt_token}"}


def _add_user(db_session, auth_user_id: str) -> User:
    user = User(auth_user_id=auth_user_id)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session):
    return _add_user(db_session, "admin-user")


@pytest.fixture
def member_user(db_session):
    return _add_user(db_session, "member-user")


@pytest.fixture
def viewer_user(db_session):
    return _add_user(db_session, "viewer-user")


@pytest.fixture
def outsider_user(db_session):
    return _add_user(db_session, "outsider-user")


@pytest.fixture
def household(db_session, admin_user, member_user, viewer_user):
    """Household with one admin, one member and one viewer"""
    household = Household(name="Test Household", invite_code="test-invite-code", created_by=admin_user.id)
    db_session.add(household)
    db_session.commit()

    db_session.add_all(
        [
            HouseholdMembership(household_id=household.id, user_id=admin_user.id, role=HouseholdRole.ADMIN),
            HouseholdMembership(household_id=household.id, user_id=member_user.id, role=HouseholdRole.MEMBER),
            HouseholdMembership(household_id=household.id, user_id=viewer_user.id, role=HouseholdRole.VIEWER),
        ]
    )
    db_session.commit()
    db_session.refresh(household)
    return household


@pytest.fixture
def admin_headers(admin_user):
    return headers_for(admin_user.auth_user_id)


@pytest.fixture
def member_headers(member_user):
    return headers_for(member_user.auth_user_id)


@pytest.fixture
def viewer_headers(viewer_user):
    return headers_for(viewer_user.auth_user_id)


@pytest.fixture
def outsider_headers(outsider_user):
    return headers_for(outsider_user.auth_user_id)


@pytest.fixture
def events_url(household):
    return f"/api/households/{household.id}/events"


@pytest.fixture
def todos_url(household):
    return f"/api/households/{household.id}/todos"
