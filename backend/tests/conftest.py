import pytest
from flask_jwt_extended import create_access_token

from portfolio import create_app
from portfolio.extensions import db
from portfolio.models.user import User


@pytest.fixture
def app():
    app = create_app("testing")

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(email="ada@example.com", slug="ada", password="correct horse",
                   name="Ada Lovelace", is_active=True, is_public=False):
        user = User()
        user.email = email
        user.slug = slug
        user.name = name
        user.is_active = is_active
        user.is_public = is_public
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def bearer(app):
    def _bearer(user):
        return {"Authorization": f"Bearer {create_access_token(identity=user.id)}"}
    return _bearer


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def other_user(make_user):
    return make_user(email="grace@example.com", slug="grace", name="Grace Hopper")


@pytest.fixture
def auth_headers(user, bearer):
    return bearer(user)


@pytest.fixture
def star_entry():
    return {
        "situation": "Checkout latency doubled after a vendor change",
        "task": "Bring p95 back under 300ms",
        "action": "Profiled the payment client and added connection pooling",
        "result": "p95 dropped to 180ms",
    }


@pytest.fixture
def star_section(client, auth_headers):
    resp = client.post(
        "/api/v1/sections",
        json={"type": "star-memo", "title": "Wins at Work"},
        headers=auth_headers,
    )
    assert resp.status_code == 201
    return resp.get_json()
