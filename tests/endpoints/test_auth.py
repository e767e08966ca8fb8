from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.user import User


def test_register_user(db: Session, client: TestClient):
    """Test user registration endpoint"""
    user_data = {
        "username": "testuser",
        "password": "testpassword123",
    }

    response = client.post("/api/auth/register", json=user_data)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "success"
    assert data["user"]["username"] == "testuser"

    db_user = db.query(User).filter(User.username == user_data["username"]).first()
    assert db_user is not None
    assert db_user.hashed_password != user_data["password"]


def test_register_does_not_affect_welcome(client: TestClient):
    """Registering a user leaves unrelated endpoints untouched"""
    response = client.post(
        "/api/auth/register",
        json={"username": "testuser", "password": "testpassword123"},
    )
    assert response.status_code == 200

    response = client.get("/welcome")

    assert response.status_code == 200
    assert response.json() == {"status": "success", "message": "Welcome!"}


def test_register_null_username(db: Session, client: TestClient):
    """Null username is rejected before anything is written"""
    response = client.post(
        "/api/auth/register",
        json={"username": None, "password": "testpassword123"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid input"
    assert db.query(User).count() == 0


def test_register_blank_username(db: Session, client: TestClient):
    response = client.post(
        "/api/auth/register",
        json={"username": "   ", "password": "testpassword123"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid input"
    assert db.query(User).count() == 0


def test_register_missing_password(db: Session, client: TestClient):
    response = client.post("/api/auth/register", json={"username": "testuser"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid input"
    assert db.query(User).count() == 0


def test_register_short_username(client: TestClient):
    response = client.post(
        "/api/auth/register", json={"username": "ab", "password": "testpassword123"}
    )

    assert response.status_code == 400
    assert "at least 3 characters" in response.json()["message"]


def test_register_existing_user(client: TestClient, user_factory):
    """Test registering a user that already exists"""
    user_factory("testexisting")

    response = client.post(
        "/api/auth/register",
        json={"username": "testexisting", "password": "anotherpassword"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Bad Request"
    assert "already exists" in body["message"].lower()


def test_login_success(client: TestClient, test_user: User):
    """Test successful login starts a session"""
    response = client.post(
        "/api/auth/login",
        json={"username": test_user.username, "password": "testpassword123"},
    )

    assert response.status_code == 200
    assert response.json()["user"]["id"] == test_user.id
    assert "weather_session" in response.cookies

    me = client.get("/api/users/me")
    assert me.status_code == 200
    assert me.json()["username"] == test_user.username


def test_login_incorrect_password(client: TestClient, test_user: User):
    response = client.post(
        "/api/auth/login",
        json={"username": test_user.username, "password": "wrongpassword"},
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Incorrect password. Please try again."


def test_login_unknown_user(client: TestClient):
    response = client.post(
        "/api/auth/login",
        json={"username": "nobody", "password": "whatever"},
    )

    assert response.status_code == 401
    assert response.json()["message"] == "User not found. Please register first."


def test_login_missing_credentials(client: TestClient):
    response = client.post("/api/auth/login", json={"username": "someone"})

    assert response.status_code == 400
    assert response.json()["message"] == "Username and password are required"


def test_logout_ends_session(auth_client: TestClient):
    assert auth_client.get("/api/users/me").status_code == 200

    response = auth_client.post("/api/auth/logout")

    assert response.status_code == 200
    assert auth_client.get("/api/users/me").status_code == 401
