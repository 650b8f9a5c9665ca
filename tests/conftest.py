import itertools
import os

# Must be set before the app (and its engine) is imported
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

import fakeredis
import pytest
from fastapi.testclient import TestClient

from healthconnect.main import app
from healthconnect.core.database import Base, SessionLocal, engine, get_redis
from healthconnect.core.security import UserRole, create_token_pair, get_password_hash
from healthconnect.models.user import User

TEST_PASSWORD = "TestPassword123"

_emails = itertools.count(1)

@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def redis_client():
    fake = fakeredis.FakeRedis(decode_responses=True)
    app.dependency_overrides[get_redis] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_redis, None)

@pytest.fixture
def client(test_db, redis_client):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

@pytest.fixture
def db_session(test_db):
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def make_user(db_session):
    """Insert a user directly, bypassing registration rules (e.g. for admins)."""
    def _make_user(role=UserRole.PATIENT, first_name="Test", last_name="User", email=None, is_active=True):
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email or f"{role.value}{next(_emails)}@example.com",
            password_hash=get_password_hash(TEST_PASSWORD),
            role=role,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user

@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        tokens = create_token_pair(user.id, user.email, user.role)
        return {"Authorization": f"Bearer {tokens.access_token}"}

    return _auth_headers

@pytest.fixture
def patient(make_user):
    return make_user(UserRole.PATIENT, first_name="Pat", last_name="Ient")

@pytest.fixture
def other_patient(make_user):
    return make_user(UserRole.PATIENT, first_name="Other", last_name="Patient")

@pytest.fixture
def doctor(make_user):
    return make_user(UserRole.DOCTOR, first_name="Doc", last_name="Tor")

@pytest.fixture
def other_doctor(make_user):
    return make_user(UserRole.DOCTOR, first_name="Second", last_name="Opinion")

@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN, first_name="Ad", last_name="Min")
