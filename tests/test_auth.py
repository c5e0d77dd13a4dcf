from app.models import User
from app.utils.security import create_refresh_token, decode_token, REFRESH_TOKEN_TYPE

NEW_USER = {
    "first_name": "Asha",
    "last_name": "Rao",
    "email": "Asha.Rao@Example.com",
    "phone": "9876500001",
    "password": "s3cret-pass",
}


def test_register_returns_customer_and_tokens(client):
    response = client.post("/api/v1/auth/register", json=NEW_USER)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["user"]["email"] == "asha.rao@example.com"
    assert data["user"]["role"] == "customer"
    assert decode_token(data["refresh_token"], expected_type=REFRESH_TOKEN_TYPE)["sub"] == data["user"]["id"]


def test_duplicate_email_is_409(client):
    client.post("/api/v1/auth/register", json=NEW_USER)

    response = client.post("/api/v1/auth/register", json=dict(NEW_USER, email="asha.rao@example.com"))

    assert response.status_code == 409


def test_login_and_me(client):
    client.post("/api/v1/auth/register", json=NEW_USER)

    login = client.post("/api/v1/auth/login", json={"email": "asha.rao@example.com", "password": "s3cret-pass"})

    assert login.status_code == 200
    token = login.json()["data"]["token"]
    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["data"]["first_name"] == "Asha"


def test_wrong_password_is_401(client):
    client.post("/api/v1/auth/register", json=NEW_USER)

    response = client.post("/api/v1/auth/login", json={"email": NEW_USER["email"], "password": "wrong-pass"})

    assert response.status_code == 401


def test_inactive_user_cannot_log_in(client, db):
    user_id = client.post("/api/v1/auth/register", json=NEW_USER).json()["data"]["user"]["id"]
    db.get(User, user_id).is_active = False
    db.commit()

    response = client.post("/api/v1/auth/login", json={"email": NEW_USER["email"], "password": NEW_USER["password"]})

    assert response.status_code == 403


def test_refresh_issues_new_pair(client):
    tokens = client.post("/api/v1/auth/register", json=NEW_USER).json()["data"]

    response = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

    assert response.status_code == 200
    assert set(response.json()["data"]) == {"token", "refresh_token"}


def test_access_token_cannot_be_used_to_refresh(client):
    tokens = client.post("/api/v1/auth/register", json=NEW_USER).json()["data"]

    response = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["token"]})

    assert response.status_code == 401


def test_refresh_token_cannot_be_used_as_access_token(client, customer):
    token = create_refresh_token({"sub": customer.id})

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_validation_errors_use_envelope(client):
    response = client.post("/api/v1/auth/register", json={"email": "not-an-email"})

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"
