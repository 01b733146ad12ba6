from datetime import timedelta

from bookrental.utils.security import create_access_token, decode_access_token


def test_signup_and_login(client):
    resp = client.post(
        "/auth/signup",
        json={"name": "Ala", "email": "Ala@Example.com", "password": "secret123", "phoneNo": "123"},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["user"]["email"] == "ala@example.com"
    assert body["user"]["phoneNo"] == "123"
    assert decode_access_token(body["token"]) == body["user"]["id"]

    login = client.post("/auth/login", json={"email": "ala@example.com", "password": "secret123"})
    assert login.status_code == 200
    assert login.json()["user"]["id"] == body["user"]["id"]


def test_signup_duplicate_email(client):
    payload = {"name": "Ala", "email": "ala@example.com", "password": "secret123"}
    client.post("/auth/signup", json=payload)
    resp = client.post("/auth/signup", json=payload)
    assert resp.status_code == 400
    assert resp.json()["detail"]["reason"] == "email_taken"


def test_login_wrong_password(client, make_user):
    user = make_user(email="bob@example.com")
    resp = client.post("/auth/login", json={"email": user.email, "password": "nope-nope"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["reason"] == "invalid_credentials"


def test_profile_lists_rentals(client, make_user, make_book, headers):
    user = make_user()
    book = make_book(quantity=1)
    client.post("/checkout", json={"items": [{"bookId": book.id, "rentalDuration": 2}]}, headers=headers(user.id))

    resp = client.get("/auth/profile", headers=headers(user.id))

    assert resp.status_code == 200
    profile = resp.json()
    assert profile["id"] == user.id
    assert [r["bookId"] for r in profile["rentedBooks"]] == [book.id]
    assert profile["rentedBooks"][0]["rentalDuration"] == 2


def test_invalid_and_expired_tokens(client):
    assert client.get("/auth/profile", headers={"Authorization": "Bearer garbage"}).status_code == 401

    expired = create_access_token(1, expires_delta=timedelta(minutes=-5))
    resp = client.get("/auth/profile", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["reason"] == "invalid_token"
