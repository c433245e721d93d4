import base64
import json

from itsdangerous import TimestampSigner

from wikihub.config import settings


def test_guarded_route_redirects_with_message(client):
    resp = client.get("/create", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"

    login_page = client.get("/login")
    assert "You must be logged in to access this page." in login_page.text


def test_flash_message_is_delivered_once(client):
    client.get("/profile", follow_redirects=False)

    first = client.get("/login")
    assert "You must be logged in to access this page." in first.text

    second = client.get("/login")
    assert "You must be logged in to access this page." not in second.text


def test_session_cookie_flags(client):
    resp = client.get("/profile", follow_redirects=False)
    cookie = resp.headers["set-cookie"]
    assert cookie.startswith(f"{settings.session_cookie}=")
    assert "httponly" in cookie.lower()
    assert "samesite=lax" in cookie.lower()
    assert f"Max-Age={settings.session_max_age}" in cookie


def test_tampered_cookie_is_treated_as_anonymous(client, logged_in_user):
    assert client.get("/profile").status_code == 200

    client.cookies.clear()
    client.cookies.set(settings.session_cookie, "not-a-valid-signed-session")
    resp = client.get("/profile", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"


def test_cookie_signed_with_other_secret_is_ignored(client, logged_in_user):
    forged = base64.b64encode(json.dumps({"user": {"username": "alice"}}).encode())
    signed = TimestampSigner("some-other-secret").sign(forged).decode()
    client.cookies.clear()
    client.cookies.set(settings.session_cookie, signed)

    resp = client.get("/profile", follow_redirects=False)
    assert resp.status_code == 303


def test_session_for_deleted_user_is_anonymous(client, db_session, logged_in_user):
    db_session.delete(logged_in_user)
    db_session.commit()

    resp = client.get("/profile", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"
