import os
import sys
import tempfile

# Settings are read at import time, so point them at test locations first.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="weather-uploads-"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.db.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import User  # noqa: E402
from app.services.auth_service import auth_service  # noqa: E402
from app.services.upload_storage import UploadStorage, get_upload_storage  # noqa: E402

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Test database URL - using SQLite for tests is simpler
SQLALCHEMY_DATABASE_TEST_URL = "sqlite:///:memory:"

TEST_PASSWORD = "testpassword123"

test_engine = create_engine(
    SQLALCHEMY_DATABASE_TEST_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=test_engine
)


def create_test_user(db: Session, username: str = "testuser", password: str = TEST_PASSWORD) -> User:
    """Helper function to create a user directly in the database"""
    user = User(
        username=username,
        hashed_password=auth_service.get_password_hash(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login(client: TestClient, username: str, password: str = TEST_PASSWORD):
    """Helper function to log a client in through the API"""
    response = client.post(
        "/api/auth/login", json={"username": username, "password": password}
    )
    assert response.status_code == 200, response.text
    return response


@pytest.fixture(scope="function")
def db():
    # Create all tables
    Base.metadata.create_all(bind=test_engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def storage(tmp_path) -> UploadStorage:
    """Upload storage in a per-test directory."""
    return UploadStorage(tmp_path / "uploads", "/uploads").ensure()


@pytest.fixture(scope="function")
def client(db, storage):
    """Provides a FastAPI test client with test database and upload storage."""

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Cleanup handled by db fixture

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_upload_storage] = lambda: storage

    with TestClient(app) as c:
        yield c

    # Clean up overrides after test
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def test_user(db) -> User:
    return create_test_user(db)


@pytest.fixture(scope="function")
def auth_client(client, test_user) -> TestClient:
    """A test client with a logged in session for ``test_user``."""
    login(client, test_user.username)
    return client


@pytest.fixture(scope="function")
def user_factory(db):
    """Returns a callable that creates users in the test database."""

    def _create(username: str, password: str = TEST_PASSWORD) -> User:
        return create_test_user(db, username, password)

    return _create


@pytest.fixture(scope="function")
def login_as(client):
    """Returns a callable that logs the test client in as another user."""

    def _login(username: str, password: str = TEST_PASSWORD):
        return login(client, username, password)

    return _login
