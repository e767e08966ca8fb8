from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.user import User


def test_welcome(client: TestClient):
    response = client.get("/welcome")

    assert response.status_code == 200
    assert response.json()["status"] == "success"
    assert response.json()["message"] == "Welcome!"


def test_root_redirects_to_login(client: TestClient):
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_login_page(client: TestClient):
    response = client.get("/login")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert 'action="/login"' in response.text


def test_home_requires_login(client: TestClient):
    response = client.get("/home", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_form_login_and_home(client: TestClient, test_user: User):
    response = client.post(
        "/login",
        data={"username": test_user.username, "password": "testpassword123"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/home"

    home = client.get("/home")
    assert home.status_code == 200
    assert f"Welcome, {test_user.username}" in home.text
    assert "{{USERNAME}}" not in home.text


def test_form_login_wrong_password(client: TestClient, test_user: User):
    response = client.post(
        "/login",
        data={"username": test_user.username, "password": "nope"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"].startswith("/login?error=")
    assert "Incorrect%20password" in response.headers["location"]


def test_form_login_missing_fields(client: TestClient):
    response = client.post("/login", data={}, follow_redirects=False)

    assert response.status_code == 303
    assert "Username%20and%20password%20are%20required" in response.headers["location"]


def test_home_escapes_username(client: TestClient, user_factory):
    user_factory("<b>bold</b>")
    client.post(
        "/login", data={"username": "<b>bold</b>", "password": "testpassword123"}
    )

    home = client.get("/home")

    assert "&lt;b&gt;bold&lt;/b&gt;" in home.text
    assert "<b>bold</b>" not in home.text


def test_form_register(db: Session, client: TestClient):
    response = client.post(
        "/register",
        data={"username": "formuser", "password": "formpassword"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert db.query(User).filter(User.username == "formuser").first() is not None


def test_form_register_invalid(db: Session, client: TestClient):
    response = client.post(
        "/register",
        data={"username": "", "password": "formpassword"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/register?error=Invalid%20input"
    assert db.query(User).count() == 0


def test_logout_page(auth_client: TestClient):
    response = auth_client.get("/logout", follow_redirects=False)

    assert response.status_code == 303
    assert auth_client.get("/home", follow_redirects=False).status_code == 303
