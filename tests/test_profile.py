import io

from wikihub import crud, models
from wikihub.config import settings

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _upload(client, filename, payload=PNG_BYTES, content_type="image/png"):
    return client.post(
        "/profile",
        files={"avatar": (filename, io.BytesIO(payload), content_type)},
        follow_redirects=False,
    )


def test_profile_requires_login(client):
    resp = client.get("/profile", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"


def test_profile_shows_user(client, logged_in_user):
    resp = client.get("/profile")
    assert resp.status_code == 200
    assert "alice" in resp.text
    assert "No avatar yet." in resp.text


def test_avatar_upload_updates_user(client, db_session, logged_in_user):
    resp = _upload(client, "me.PNG")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/profile"

    db_session.expire_all()
    user = db_session.query(models.User).filter_by(username="alice").one()
    assert user.avatar is not None
    assert user.avatar.endswith(".png")
    assert (settings.upload_dir / user.avatar).read_bytes() == PNG_BYTES

    profile = client.get("/profile")
    assert "Avatar updated successfully!" in profile.text
    assert f"/avatars/{user.avatar}" in profile.text

    served = client.get(f"/avatars/{user.avatar}")
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_replacing_avatar_removes_previous_file(client, db_session, logged_in_user):
    _upload(client, "first.gif", content_type="image/gif")
    db_session.expire_all()
    first = db_session.query(models.User).filter_by(username="alice").one().avatar

    _upload(client, "second.jpg", content_type="image/jpeg")
    db_session.expire_all()
    second = db_session.query(models.User).filter_by(username="alice").one().avatar

    assert first != second
    assert not (settings.upload_dir / first).exists()
    assert (settings.upload_dir / second).exists()


def test_disallowed_extension_is_rejected(client, db_session, logged_in_user):
    _upload(client, "ok.jpeg", content_type="image/jpeg")
    db_session.expire_all()
    before = db_session.query(models.User).filter_by(username="alice").one().avatar
    client.get("/profile")  # consume the success message

    resp = _upload(client, "script.txt", payload=b"not an image", content_type="text/plain")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/profile"
    assert "No file selected or invalid file type." in client.get("/profile").text

    db_session.expire_all()
    after = db_session.query(models.User).filter_by(username="alice").one().avatar
    assert after == before


def test_missing_file_is_rejected(client, db_session, logged_in_user):
    resp = client.post("/profile", data={}, follow_redirects=False)
    assert resp.status_code == 303
    assert "No file selected or invalid file type." in client.get("/profile").text

    db_session.expire_all()
    assert db_session.query(models.User).filter_by(username="alice").one().avatar is None


def test_storage_failure_removes_saved_file(client, db_session, logged_in_user, monkeypatch):
    def _fail(db, user, filename):
        raise crud.StorageError("Database commit failed in test")

    monkeypatch.setattr(crud, "update_avatar", _fail)
    existing = set(settings.upload_dir.iterdir())

    resp = _upload(client, "me.png")
    assert resp.status_code == 303
    assert "Error updating avatar. Please try again." in client.get("/profile").text
    assert set(settings.upload_dir.iterdir()) == existing


def test_upload_requires_login(client, db_session):
    resp = _upload(client, "me.png")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"
