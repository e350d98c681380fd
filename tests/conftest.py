import pytest

from agrobuizz import create_app
from agrobuizz.extensions import db
from agrobuizz.seed import seed_database

TEST_CONFIG = {
    "TESTING": True,
    "SECRET_KEY": "test-secret",
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "SESSION_COOKIE_SECURE": False,
    "ADMIN_CONSOLE_DATABASE_URL": None,
}


@pytest.fixture
def empty_app():
    app = create_app(dict(TEST_CONFIG))
    with app.app_context():
        db.create_all()
    yield app


@pytest.fixture
def app(empty_app):
    with empty_app.app_context():
        seed_database()
    yield empty_app


def login(client, username, password):
    return client.post("/api/login", json={"username": username, "password": password})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    client = app.test_client()
    resp = login(client, "admin", "admin123")
    assert resp.status_code == 200
    return client


@pytest.fixture
def user_client(app):
    client = app.test_client()
    resp = login(client, "farmer1", "password123")
    assert resp.status_code == 200
    return client
