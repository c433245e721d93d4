from wikihub import models
from wikihub.rendering import render_markdown


def _create_page(client, title, content, is_markdown=True):
    data = {"title": title, "content": content}
    if is_markdown:
        data["is_markdown"] = "on"
    return client.post("/create", data=data, follow_redirects=False)


def test_created_page_is_retrievable_by_exact_title(client, db_session, logged_in_user):
    resp = _create_page(client, "Python Tips", "# Tips\n\nUse **virtualenvs**.")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/wiki/Python%20Tips"

    page = client.get("/wiki/Python Tips")
    assert page.status_code == 200
    assert "Page created successfully!" in page.text
    assert render_markdown("# Tips\n\nUse **virtualenvs**.") in page.text
    assert "<strong>virtualenvs</strong>" in page.text

    db_session.expire_all()
    stored = db_session.query(models.Page).filter_by(title="Python Tips").one()
    assert stored.is_markdown is True
    assert stored.author_id == logged_in_user.id

    # Lookup is exact: a different case is another page.
    assert client.get("/wiki/python tips").status_code == 404


def test_html_page_is_rendered_as_stored(client, logged_in_user):
    _create_page(client, "Raw", "<p>Hello <em>HTML</em></p>", is_markdown=False)
    page = client.get("/wiki/Raw")
    assert page.status_code == 200
    assert "<p>Hello <em>HTML</em></p>" in page.text


def test_title_is_trimmed(client, db_session, logged_in_user):
    resp = _create_page(client, "  Padded  ", "body")
    assert resp.headers["location"] == "/wiki/Padded"
    db_session.expire_all()
    assert db_session.query(models.Page).filter_by(title="Padded").count() == 1


def test_title_with_slash(client, logged_in_user):
    resp = _create_page(client, "Guides/Setup", "Install it.")
    assert resp.headers["location"] == "/wiki/Guides%2FSetup"
    assert client.get(resp.headers["location"]).status_code == 200


def test_duplicate_title_is_rejected(client, db_session, logged_in_user):
    _create_page(client, "Unique", "first")
    resp = _create_page(client, "Unique", "second")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/create"
    assert "A page with that title already exists!" in client.get("/create").text

    db_session.expire_all()
    pages = db_session.query(models.Page).filter_by(title="Unique").all()
    assert len(pages) == 1
    assert pages[0].content == "first"


def test_create_validation_errors(client, db_session, logged_in_user):
    resp = client.post("/create", data={"title": "   ", "content": ""}, follow_redirects=False)
    assert resp.headers["location"] == "/create"

    form = client.get("/create")
    assert "Page title is required" in form.text
    assert "Content is required" in form.text

    db_session.expire_all()
    assert db_session.query(models.Page).filter(models.Page.title != "HomePage").count() == 0


def test_create_requires_login_and_changes_nothing(client, db_session):
    resp = _create_page(client, "Sneaky", "content")
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"

    db_session.expire_all()
    assert db_session.query(models.Page).filter_by(title="Sneaky").first() is None


def test_missing_page_renders_not_found(client):
    resp = client.get("/wiki/DoesNotExist")
    assert resp.status_code == 404
    assert "This page doesn&#39;t exist" in resp.text
    assert "Page doesn&#39;t exist" in resp.text


def test_unknown_route_renders_friendly_404(client):
    resp = client.get("/no/such/route")
    assert resp.status_code == 404
    assert "Page Not Found" in resp.text
    assert "/no/such/route" in resp.text


def test_unknown_route_returns_json_for_api_clients(client):
    resp = client.get("/no/such/route", headers={"accept": "application/json"})
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Not Found"}


def test_home_page_is_seeded_and_listed(client):
    home = client.get("/")
    assert "HomePage" in home.text

    page = client.get("/wiki/HomePage")
    assert page.status_code == 200
    assert "<h1>Welcome!</h1>" in page.text
