import logging
from datetime import timedelta

from carlens.core.security import issue_token, verify_token
from carlens.models import User


def test_signup_creates_user(client, db):
    response = client.post("/signup", json={"email": "a@b.com", "password": "pw123"})

    assert response.status_code == 201
    assert response.json() == {"message": "User created"}
    user = db.query(User).filter(User.email == "a@b.com").one()
    assert user.password_hash != "pw123"


def test_duplicate_signup_is_conflict_and_keeps_one_row(client, db):
    client.post("/signup", json={"email": "a@b.com", "password": "pw123"})

    response = client.post("/signup", json={"email": "a@b.com", "password": "other"})

    assert response.status_code == 409
    assert response.json()["detail"] == "Email already exists"
    assert db.query(User).filter(User.email == "a@b.com").count() == 1


def test_signup_with_missing_fields_is_bad_request(client):
    assert client.post("/signup", json={"email": "a@b.com"}).status_code == 400
    assert client.post("/signup", json={"password": "pw123"}).status_code == 400
    assert client.post("/signup", json={"email": "", "password": "pw123"}).status_code == 400


def test_login_returns_token_for_stored_user(client, db, settings):
    client.post("/signup", json={"email": "a@b.com", "password": "pw123"})

    response = client.post("/login", json={"email": "a@b.com", "password": "pw123"})

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    user = db.query(User).filter(User.email == "a@b.com").one()
    assert verify_token(body["token"], settings).sub == str(user.id)


def test_login_with_wrong_password_fails(client):
    client.post("/signup", json={"email": "a@b.com", "password": "pw123"})

    for guess in ["pw12", "pw1234", "PW123", "wrong"]:
        response = client.post("/login", json={"email": "a@b.com", "password": guess})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid credentials"


def test_login_with_unknown_email_fails(client):
    response = client.post("/login", json={"email": "nobody@b.com", "password": "pw123"})

    assert response.status_code == 400


def test_login_with_missing_fields_is_bad_request(client):
    assert client.post("/login", json={}).status_code == 400


def test_me_returns_token_owner(client, auth_headers):
    response = client.get("/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["email"] == "a@b.com"


def test_missing_token_is_unauthorized(client):
    response = client.get("/me")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_invalid_token_is_forbidden(client):
    response = client.get("/images", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 403


def test_expired_token_is_forbidden(client, settings, auth_headers):
    user_id = client.get("/me", headers=auth_headers).json()["id"]
    expired = issue_token(user_id, settings, expires_delta=timedelta(minutes=-61))

    response = client.get("/images", headers={"Authorization": f"Bearer {expired}"})

    assert response.status_code == 403


def test_signup_conflict_log_omits_email(client, caplog):
    client.post("/signup", json={"email": "secret-person@b.com", "password": "pw123"})

    with caplog.at_level(logging.INFO, logger="carlens.services.credentials"):
        response = client.post("/signup", json={"email": "secret-person@b.com", "password": "pw123"})

    assert response.status_code == 409
    assert "Signup rejected" in caplog.text
    assert "secret-person" not in caplog.text
