"""Session store and cookie handling tests."""

import threading
from datetime import timedelta

from conftest import create_player, login
from edugame.sessions import SessionStore


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **delta):
        self.now += timedelta(**delta).total_seconds()


class TestSessionStore:
    def test_save_get_destroy(self, session_store):
        token = session_store.new_token()
        session_store.save(token, {"player_id": 1, "username": "alice"})

        assert token in session_store
        assert session_store.get(token) == {"player_id": 1, "username": "alice"}
        assert session_store.destroy(token) is True
        assert session_store.get(token) is None
        assert session_store.destroy(token) is False

    def test_get_returns_a_copy(self, session_store):
        session_store.save("t", {"player_id": 1})
        session_store.get("t")["player_id"] = 99
        assert session_store.get("t") == {"player_id": 1}

    def test_tokens_are_unique(self, session_store):
        assert len({session_store.new_token() for _ in range(100)}) == 100

    def test_destroy_none_is_harmless(self, session_store):
        assert session_store.destroy(None) is False

    def test_concurrent_saves(self, session_store):
        def worker(n):
            for i in range(50):
                session_store.save(f"{n}-{i}", {"i": i})

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(session_store) == 400

    def test_record_expires_after_lifetime(self):
        clock = FakeClock()
        store = SessionStore(lifetime=timedelta(minutes=30), clock=clock)
        store.save("t", {"player_id": 1})

        clock.advance(minutes=29)
        assert store.get("t") == {"player_id": 1}
        clock.advance(minutes=2)
        assert store.get("t") is None
        assert "t" not in store

    def test_saving_extends_the_lifetime(self):
        clock = FakeClock()
        store = SessionStore(lifetime=timedelta(minutes=30), clock=clock)
        store.save("t", {"n": 1})
        clock.advance(minutes=20)
        store.save("t", {"n": 2})
        clock.advance(minutes=20)
        assert store.get("t") == {"n": 2}

    def test_save_prunes_expired_records(self):
        clock = FakeClock()
        store = SessionStore(lifetime=timedelta(minutes=30), clock=clock)
        for i in range(25):
            store.save(f"old-{i}", {"i": i})
        assert len(store) == 25

        clock.advance(hours=1)
        store.save("fresh", {})
        assert len(store) == 1
        assert "fresh" in store

    def test_explicit_lifetime_wins(self):
        clock = FakeClock()
        store = SessionStore(lifetime=timedelta(days=7), clock=clock)
        store.save("t", {}, lifetime=timedelta(seconds=5))
        clock.advance(seconds=6)
        assert store.get("t") is None


class TestSessionCookie:
    def test_anonymous_requests_create_no_session(self, client, session_store):
        client.get("/players")
        assert len(session_store) == 0

    def test_login_stores_player_identity(self, client, player, session_store, cookie_name):
        login(client)
        cookie = client.get_cookie(cookie_name)
        assert cookie is not None
        assert len(session_store) == 1

        (token,) = list(session_store._data)
        # cookie carries the signed token, never the data
        assert cookie.value.startswith(token + ".")
        data = session_store.get(token)
        assert data["player_id"] == player["id"]
        assert data["username"] == "alice"

    def test_tampered_cookie_is_anonymous(self, logged_in, cookie_name):
        value = logged_in.get_cookie(cookie_name).value
        logged_in.set_cookie(cookie_name, value[:-2] + "xx")

        response = logged_in.get("/api/current-user")
        assert response.status_code == 401

    def test_unknown_token_is_anonymous(self, client, app, cookie_name):
        from itsdangerous import Signer
        forged = Signer(app.secret_key, salt="edugame-session").sign("made-up").decode()
        client.set_cookie(cookie_name, forged)

        response = client.get("/api/current-user")
        assert response.status_code == 401
        assert response.get_json()["error"] == "Unauthenticated"

    def test_logout_destroys_session(self, logged_in, session_store, cookie_name):
        response = logged_in.post("/api/logout")
        assert response.status_code == 200
        assert response.get_json() == {"success": True}
        assert len(session_store) == 0
        assert logged_in.get_cookie(cookie_name) is None
        assert logged_in.get("/api/current-user").status_code == 401

    def test_logout_when_anonymous(self, client):
        response = client.post("/api/logout")
        assert response.status_code == 200


class TestSessionExpiry:
    def test_expired_login_is_anonymous(self, app, client, player, session_store, monkeypatch):
        clock = FakeClock()
        monkeypatch.setattr(session_store, "_clock", clock)
        login(client)
        assert client.get("/api/current-user").status_code == 200

        clock.advance(seconds=app.permanent_session_lifetime.total_seconds() + 1)
        response = client.get("/api/current-user")
        assert response.status_code == 401
        assert response.get_json()["error"] == "Unauthenticated"

    def test_abandoned_logins_are_pruned(self, app, player, session_store, monkeypatch):
        clock = FakeClock()
        monkeypatch.setattr(session_store, "_clock", clock)
        for _ in range(25):
            login(app.test_client())
        assert len(session_store) == 25

        clock.advance(seconds=app.permanent_session_lifetime.total_seconds() + 1)
        create_player(app.test_client(), "bob")
        login(app.test_client(), "bob")
        assert len(session_store) == 1
