from datetime import timedelta

from jose import jwt

from moodchat import config
from moodchat.models import User
from moodchat.services.auth_service import create_access_token

from conftest import signup, login, count_rows


def test_signup_logout_login_flow(client):
    res = signup(client)
    assert res.status_code == 200
    assert res.json() == {"id": 1, "email": "a@x.com", "name": "A"}
    assert config.SESSION_COOKIE_NAME in res.cookies

    set_cookie = res.headers["set-cookie"].lower()
    assert "httponly" in set_cookie
    assert "secure" in set_cookie
    assert "path=/" in set_cookie
    assert "samesite=none" in set_cookie

    assert client.post("/api/auth/logout").status_code == 200
    assert client.get("/api/auth/me").status_code == 401

    res = login(client, password="wrong")
    assert res.status_code == 401

    res = login(client)
    assert res.status_code == 200
    assert res.json() == {"id": 1, "email": "a@x.com", "name": "A"}
    assert client.get("/api/auth/me").json() == {"id": 1, "email": "a@x.com", "name": "A"}


def test_duplicate_signup_is_rejected_without_new_row(client):
    assert signup(client).status_code == 200
    client.cookies.clear()

    res = signup(client, name="Other")
    assert res.status_code == 400
    assert res.json() == {"detail": "Email already registered"}
    assert count_rows(client, User) == 1
    # 실패한 가입은 세션 쿠키를 주지 않는다
    assert client.get("/api/auth/me").status_code == 401


def test_unknown_email_and_wrong_password_fail_identically(client):
    signup(client)
    client.cookies.clear()

    wrong_password = login(client, password="nope")
    unknown_email = login(client, email="nobody@x.com")

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid credentials"}


def test_malformed_email_login_is_invalid_credentials(client):
    signup(client)
    client.cookies.clear()

    res = login(client, email="nobody")
    assert res.status_code == 401
    assert res.json() == login(client, password="nope").json() == {"detail": "Invalid credentials"}


def test_password_is_not_stored_in_plain_text(client):
    signup(client, password="s3cret-pw")

    async def _hash():
        async with client.app.state.database.sessionmaker() as db:
            return (await db.get(User, 1)).password_hash

    stored = client.portal.call(_hash)
    assert stored != "s3cret-pw"
    assert stored.startswith("$pbkdf2-sha256$")


def test_me_without_cookie_is_unauthenticated(client):
    res = client.get("/api/auth/me")
    assert res.status_code == 401
    assert res.json() == {"detail": "Not authenticated"}


def test_forged_token_is_invalid_session(client):
    forged = jwt.encode({"sub": "1", "id": 1, "email": "a@x.com", "name": "A"}, "other-key", algorithm="HS256")
    client.cookies.set(config.SESSION_COOKIE_NAME, forged)

    res = client.get("/api/chats")
    assert res.status_code == 401
    assert res.json() == {"detail": "Invalid session"}


def test_garbage_token_is_invalid_session(client):
    client.cookies.set(config.SESSION_COOKIE_NAME, "not-a-jwt")
    assert client.get("/api/auth/me").json() == {"detail": "Invalid session"}


def test_expired_token_is_invalid_session(client):
    user = User(id=7, email="old@x.com", name="Old")
    client.cookies.set(config.SESSION_COOKIE_NAME, create_access_token(user, timedelta(minutes=-1)))

    res = client.get("/api/auth/me")
    assert res.status_code == 401
    assert res.json() == {"detail": "Invalid session"}


def test_token_carries_identity_claims(client):
    signup(client, email="b@x.com", name="B")
    token = client.cookies.get(config.SESSION_COOKIE_NAME)
    claims = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])

    assert claims["sub"] == "1"
    assert claims["id"] == 1
    assert claims["email"] == "b@x.com"
    assert claims["name"] == "B"
    assert "exp" in claims


def test_signup_rejects_malformed_body(client):
    res = client.post("/api/auth/signup", json={"email": "not-an-email", "password": "pw", "name": "A"})
    assert res.status_code == 422
