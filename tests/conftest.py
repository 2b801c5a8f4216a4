"""Shared test fixtures."""

import json

import pytest

from app import create_app
from app.extensions import db as _db


@pytest.fixture(scope="session")
def app():
    """Create an application instance configured for testing."""
    app = create_app("testing")
    with app.app_context():
        _db.create_all()
        yield app
        _db.drop_all()


@pytest.fixture(autouse=True)
def db_session(app):
    """Ensure a clean database state for each test.

    Re-creates all tables before each test to guarantee isolation.
    """
    with app.app_context():
        _db.create_all()
        yield _db.session
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def register(client):
    """Factory fixture: sign up a user and return ``(user_dict, auth_headers)``."""

    def _register(email="ada@example.com", name="Ada Lovelace", password="s3cret!"):
        resp = client.post(
            "/api/v1/auth/sign-up",
            data=json.dumps({"name": name, "email": email, "password": password}),
            content_type="application/json",
        )
        body = resp.get_json()
        assert resp.status_code == 201, body
        headers = {"Authorization": f"Bearer {body['data']['token']}"}
        return body["data"]["user"], headers

    return _register
