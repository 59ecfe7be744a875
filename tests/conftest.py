"""Pytest fixtures for the edugame API.

Every test gets a fresh app on an in-memory SQLite database, its own session
store, and a Flask test client that keeps cookies between requests.
"""

import pytest

from config import TestingConfig
from edugame import create_app
from edugame.db import db
from edugame.sessions import SessionStore

PASSWORD = "s3cret-pass"


@pytest.fixture
def session_store():
    return SessionStore()


@pytest.fixture
def app(session_store):
    app = create_app(TestingConfig, session_store=session_store)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def cookie_name(app):
    return app.config["SESSION_COOKIE_NAME"]


def create_player(client, username="alice", password=PASSWORD, **extra):
    return client.post("/create-player", json={"username": username, "password": password, **extra})


def login(client, username="alice", password=PASSWORD):
    return client.post("/login", json={"username": username, "password": password})


def fetch_player(app, username="alice"):
    """Read the row straight from the database, outside any request."""
    from edugame.players.queries import get_player_by_username
    with app.app_context():
        player = get_player_by_username(username)
        return player.to_dict(include_password=True) if player else None


@pytest.fixture
def player(client):
    """An existing account named alice."""
    response = create_player(client)
    assert response.status_code == 201
    return response.get_json()["player"]


@pytest.fixture
def logged_in(client, player):
    """Client with an authenticated session for alice."""
    response = login(client)
    assert response.status_code == 200
    return client
