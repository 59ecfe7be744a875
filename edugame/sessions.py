# edugame/sessions.py
"""Server-side sessions.

The cookie only carries an opaque token (signed with the app secret); the
session data itself lives in a ``SessionStore`` owned by the application.
Emptying a session (logout, account deletion) removes the store record, so the
old token is anonymous from then on. Records also expire after
``PERMANENT_SESSION_LIFETIME``.
"""
from __future__ import annotations

import logging
import secrets
import threading
import time
from datetime import timedelta
from typing import Any, Callable, Dict, Optional, Tuple

from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from werkzeug.datastructures import CallbackDict

log = logging.getLogger(__name__)

DEFAULT_LIFETIME = timedelta(days=7)


class SessionStore:
    """In-process token -> session data mapping with a per-record expiry.

    A record lives ``lifetime`` past its last save; after that ``get`` treats
    the token as unknown. Expired records are dropped on the next ``save``.
    """

    def __init__(self, lifetime: timedelta = DEFAULT_LIFETIME, clock: Callable[[], float] = time.time):
        self.lifetime = lifetime
        self._clock = clock
        self._data: Dict[str, Tuple[float, Dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def new_token(self) -> str:
        return secrets.token_urlsafe(32)

    def get(self, token: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._data.get(token)
            if record is None:
                return None
            expires_at, data = record
            if expires_at <= self._clock():
                del self._data[token]
                return None
            return dict(data)

    def save(self, token: str, data: Dict[str, Any], lifetime: Optional[timedelta] = None) -> None:
        now = self._clock()
        expires_at = now + (lifetime or self.lifetime).total_seconds()
        with self._lock:
            self._prune(now)
            self._data[token] = (expires_at, dict(data))

    def destroy(self, token: Optional[str]) -> bool:
        if not token:
            return False
        with self._lock:
            return self._data.pop(token, None) is not None

    def _prune(self, now: float) -> None:
        expired = [token for token, (expires_at, _) in self._data.items() if expires_at <= now]
        for token in expired:
            del self._data[token]
        if expired:
            log.debug("Pruned %d expired sessions", len(expired))

    def __contains__(self, token: str) -> bool:
        return self.get(token) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class ServerSession(CallbackDict, SessionMixin):
    def __init__(self, initial=None, sid: Optional[str] = None, new: bool = False):
        def on_update(self):
            self.modified = True

        super().__init__(initial, on_update)
        self.sid = sid
        self.new = new
        self.modified = False


class StoreSessionInterface(SessionInterface):
    salt = "edugame-session"

    def __init__(self, store: SessionStore):
        self.store = store

    def _signer(self, app) -> Optional[Signer]:
        if not app.secret_key:
            return None
        return Signer(app.secret_key, salt=self.salt)

    def open_session(self, app, request):
        signer = self._signer(app)
        if signer is None:
            return None

        cookie = request.cookies.get(self.get_cookie_name(app))
        if cookie:
            try:
                sid = signer.unsign(cookie).decode("utf-8")
            except BadSignature:
                log.info("Rejected session cookie with bad signature")
                sid = None
            if sid:
                data = self.store.get(sid)
                if data is not None:
                    return ServerSession(data, sid=sid)

        return ServerSession(sid=self.store.new_token(), new=True)

    def save_session(self, app, session, response):
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)

        if not session:
            if session.modified:
                self.store.destroy(session.sid)
                response.delete_cookie(name, domain=domain, path=path)
            return

        if not self.should_set_cookie(app, session):
            return

        self.store.save(session.sid, session, lifetime=app.permanent_session_lifetime)
        response.set_cookie(
            name,
            self._signer(app).sign(session.sid).decode("utf-8"),
            expires=self.get_expiration_time(app, session),
            httponly=self.get_cookie_httponly(app),
            domain=domain,
            path=path,
            secure=self.get_cookie_secure(app),
            samesite=self.get_cookie_samesite(app),
        )
